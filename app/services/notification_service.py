# app/services/notification_service.py
from urllib.parse import urlencode

from app.core import email_client
from app.core.config import get_settings

settings = get_settings()


class NotificationService:
    """
    Composes and sends the transactional emails of the auth flows.
    """

    def send_otp(self, to_email: str, otp: str) -> None:
        minutes = settings.OTP_EXPIRE_MINUTES
        text_body = (
            f"Your verification code is {otp}.\n"
            f"This code expires in {minutes} minutes.\n\n"
            "If you didn't request this, please ignore this email."
        )
        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2>Your Verification Code</h2>
          <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; text-align: center;">
            <h1 style="font-size: 32px; color: #2563eb; margin: 0;">{otp}</h1>
            <p>This code expires in {minutes} minutes.</p>
          </div>
          <p>If you didn't request this, please ignore this email.</p>
        </div>
        """
        email_client.send_email(
            to_email=to_email,
            subject="Verify Your Email - YellowChilli",
            text_body=text_body,
            html_body=html_body,
        )

    @staticmethod
    def reset_url(token: str) -> str:
        base = settings.APP_URL.rstrip("/")
        return f"{base}/reset-password?{urlencode({'token': token})}"

    def send_password_reset(self, to_email: str, token: str) -> None:
        url = self.reset_url(token)
        text_body = (
            "You requested to reset your password.\n"
            f"Open this link to set a new password: {url}\n\n"
            "This link expires in 1 hour. If you didn't request this, "
            "please ignore this email."
        )
        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
          <h2>Password Reset Request</h2>
          <p>You requested to reset your password. Click the button below to set a new password:</p>
          <div style="text-align: center; margin: 30px 0;">
            <a href="{url}"
               style="background: #2563eb; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px;">
              Reset Password
            </a>
          </div>
          <p><small>This link expires in 1 hour. If you didn't request this, please ignore this email.</small></p>
        </div>
        """
        email_client.send_email(
            to_email=to_email,
            subject="Reset Your YellowChilli Password",
            text_body=text_body,
            html_body=html_body,
        )
