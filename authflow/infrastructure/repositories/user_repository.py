"""Repository for User persistence."""

import sqlite3
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from authflow.domain.errors import ConflictError
from authflow.domain.models.user import User
from authflow.domain.ports.persistence import UserRepository


class SQLiteUserRepository(UserRepository):
    """Repository for managing User entities in SQLite."""

    def __init__(self, path: Union[str, Path]):
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize_table()

    def _initialize_table(self) -> None:
        """Create users table if it doesn't exist."""
        with self._lock, self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL,
                    is_account_verified INTEGER NOT NULL DEFAULT 0,
                    verify_otp TEXT,
                    verify_otp_expired_at INTEGER,
                    reset_otp TEXT,
                    reset_otp_expired_at INTEGER,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_users_email ON users(email)"
            )

    def close(self) -> None:
        self._conn.close()

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        is_account_verified: bool = False,
    ) -> User:
        """Create a new user. Raises ConflictError when the email is taken."""
        user_id = uuid.uuid4().hex
        now = datetime.utcnow().isoformat()

        try:
            with self._lock, self._conn:
                self._conn.execute(
                    """
                    INSERT INTO users (
                        id, name, email, password_hash, is_account_verified,
                        created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, name, email, password_hash, int(is_account_verified), now, now),
                )
        except sqlite3.IntegrityError as exc:
            raise ConflictError() from exc

        return User(
            id=user_id,
            name=name,
            email=email,
            password_hash=password_hash,
            is_account_verified=is_account_verified,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()

        return self._row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM users WHERE email = ?", (email,)
            ).fetchone()

        return self._row_to_user(row) if row else None

    def set_verify_otp(self, user_id: str, otp: str, expires_at: int) -> None:
        """Store a new email-verification code, replacing any pending one."""
        now = datetime.utcnow().isoformat()
        with self._lock, self._conn:
            self._conn.execute(
                """
                UPDATE users
                SET verify_otp = ?, verify_otp_expired_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (otp, expires_at, now, user_id),
            )

    def consume_verify_otp(self, user_id: str, otp: str) -> bool:
        """
        Mark the account verified and clear the code, only if it is still pending.

        Returns:
            False when another request consumed or replaced the code first
        """
        now = datetime.utcnow().isoformat()
        with self._lock, self._conn:
            cursor = self._conn.execute(
                """
                UPDATE users
                SET is_account_verified = 1, verify_otp = NULL,
                    verify_otp_expired_at = NULL, updated_at = ?
                WHERE id = ? AND verify_otp = ?
                """,
                (now, user_id, otp),
            )
        return cursor.rowcount == 1

    def set_reset_otp(self, user_id: str, otp: str, expires_at: int) -> None:
        """Store a new password-reset code, replacing any pending one."""
        now = datetime.utcnow().isoformat()
        with self._lock, self._conn:
            self._conn.execute(
                """
                UPDATE users
                SET reset_otp = ?, reset_otp_expired_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (otp, expires_at, now, user_id),
            )

    def consume_reset_otp(self, user_id: str, otp: str, password_hash: str) -> bool:
        """Swap in the new password hash and clear the reset code in one step."""
        now = datetime.utcnow().isoformat()
        with self._lock, self._conn:
            cursor = self._conn.execute(
                """
                UPDATE users
                SET password_hash = ?, reset_otp = NULL,
                    reset_otp_expired_at = NULL, updated_at = ?
                WHERE id = ? AND reset_otp = ?
                """,
                (password_hash, now, user_id, otp),
            )
        return cursor.rowcount == 1

    def _row_to_user(self, row: sqlite3.Row) -> User:
        """Convert database row to User entity."""
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            is_account_verified=bool(row["is_account_verified"]),
            verify_otp=row["verify_otp"],
            verify_otp_expired_at=row["verify_otp_expired_at"],
            reset_otp=row["reset_otp"],
            reset_otp_expired_at=row["reset_otp_expired_at"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
