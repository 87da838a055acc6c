import argparse
import getpass
import sys

from authflow.core.config import Settings
from authflow.core.logging import configure_logging
from authflow.domain.errors import ConflictError
from authflow.infrastructure.repositories.user_repository import SQLiteUserRepository
from authflow.services.password_hasher import PasswordHasher


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an account directly in the user store.")
    parser.add_argument("name")
    parser.add_argument("email")
    parser.add_argument("--verified", action="store_true", help="mark the email as already verified")
    args = parser.parse_args()

    configure_logging()
    settings = Settings()

    password = getpass.getpass("Password: ").strip()
    if not password:
        print("Password cannot be empty.", file=sys.stderr)
        return 1

    repository = SQLiteUserRepository(settings.database_path)
    try:
        user = repository.create(
            name=args.name,
            email=args.email,
            password_hash=PasswordHasher(rounds=settings.bcrypt_rounds).hash(password),
            is_account_verified=args.verified,
        )
    except ConflictError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    finally:
        repository.close()

    print(f"Created user {user.id} <{user.email}> in {settings.database_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
