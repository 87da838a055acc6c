"""Request bodies for the authentication endpoints.

Fields are optional at the schema level so that missing values reach the
service and produce the JSON envelope instead of a framework 422.
"""

from typing import Optional

from pydantic import BaseModel, Field


class RegisterPayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class VerifyEmailPayload(BaseModel):
    otp: Optional[str] = None


class ResetOtpPayload(BaseModel):
    email: Optional[str] = None


class ResetPasswordPayload(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")
