"""Service for sending transactional emails."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from authflow.domain.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: str = "",
        smtp_port: int = 587,
        smtp_username: str = "",
        smtp_password: str = "",
        from_email: str = "",
        from_name: str = "RAD Tech",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_username = smtp_username
        self.smtp_password = smtp_password
        self.from_email = from_email
        self.from_name = from_name
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_welcome_email(self, to_email: str, name: str) -> None:
        subject = f"Welcome to {self.from_name}"
        text_body = (
            f"Hello {name},\n\n"
            f"Welcome to {self.from_name}. Your account has been created with email id: {to_email}"
        )
        self._send_email(to_email, subject, text_body)

    def send_verify_otp_email(self, to_email: str, name: str, otp: str) -> None:
        """
        Send the account verification code.

        Args:
            to_email: Recipient email
            name: Recipient display name
            otp: 6-digit verification code

        Raises:
            EmailDeliveryError: If the SMTP transport fails
        """
        subject = "Verify Your Account - OTP Code"
        html_body = f"""
        <div style="font-family: Arial, sans-serif;">
            <h2>Verify Your Account</h2>
            <p>Hello <strong>{name}</strong>,</p>
            <p>Your OTP is:</p>
            <h3>{otp}</h3>
            <p>This OTP is valid for 24 hours.</p>
        </div>
        """
        text_body = (
            f"Hello {name},\n\n"
            f"Your account verification OTP is: {otp}\n"
            "This OTP is valid for 24 hours."
        )
        self._send_email(to_email, subject, text_body, html_body)

    def send_reset_otp_email(self, to_email: str, name: str, otp: str) -> None:
        """
        Send the password reset code.

        Raises:
            EmailDeliveryError: If the SMTP transport fails
        """
        subject = "Password Reset - OTP"
        html_body = f"""
        <div style="max-width: 600px; margin: auto; padding: 20px; font-family: 'Segoe UI', sans-serif;
                    background-color: #f9f9f9; border: 1px solid #e0e0e0; border-radius: 8px;">
            <div style="text-align: center;">
                <h2 style="color: #333;">Password Reset Request</h2>
                <p style="font-size: 16px; color: #555;">Hello <strong>{name}</strong>,</p>
                <p style="font-size: 16px; color: #555;">We received a request to reset your password.</p>
            </div>

            <div style="margin: 30px 0; text-align: center;">
                <p style="font-size: 16px; color: #333; margin-bottom: 10px;">
                    Use the OTP below to reset your password:
                </p>
                <h1 style="font-size: 36px; color: #007BFF; letter-spacing: 6px;">{otp}</h1>
                <p style="font-size: 14px; color: #999; margin-top: 10px;">
                    This OTP is valid for <strong>15 Minutes</strong>.
                </p>
            </div>

            <div style="font-size: 14px; color: #888; text-align: center; margin-top: 40px;">
                <p>If you did not request this, you can safely ignore this email.</p>
                <p>Thank you,<br><strong>{self.from_name}</strong></p>
            </div>
        </div>
        """
        text_body = (
            f"Hello {name},\n\n"
            f"Use this OTP to reset your password: {otp}\n"
            "This OTP is valid for 15 minutes.\n\n"
            "If you did not request this, you can safely ignore this email."
        )
        self._send_email(to_email, subject, text_body, html_body)

    def _send_email(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: Optional[str] = None,
    ) -> None:
        """
        Send an email via SMTP.

        When SMTP is not configured the message is logged instead of sent.
        """
        if not self.enabled:
            logger.info("[EMAIL] SMTP disabled; message for %s (%s):\n%s", to_email, subject, text_body)
            return

        if html_body is None:
            msg = MIMEText(text_body, "plain", "utf-8")
        else:
            msg = MIMEMultipart("alternative")
            msg.attach(MIMEText(text_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s: %s", to_email, exc)
            raise EmailDeliveryError() from exc
