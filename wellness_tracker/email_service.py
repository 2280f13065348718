"""
Email Service Module
Sends emails over SMTP
"""
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
from loguru import logger

from .config import settings


class EmailService:
    """Service sending emails through the configured SMTP server"""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.SMTP_FROM_EMAIL or settings.SMTP_USERNAME
        self.from_name = settings.SMTP_FROM_NAME
        self.use_tls = settings.SMTP_USE_TLS

    def _create_smtp_connection(self):
        """Opens an authenticated SMTP connection"""
        try:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port)
            if self.use_tls:
                server.starttls()
            if self.smtp_username:
                server.login(self.smtp_username, self.smtp_password)
            return server
        except Exception as e:
            logger.error(f"Failed to create SMTP connection: {e}")
            raise

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """
        Sends an email

        Args:
            to_email: Recipient address
            subject: Message subject
            html_content: HTML body
            text_content: Plain text body (fallback)

        Returns:
            True if the message was handed to the SMTP server
        """
        try:
            message = MIMEMultipart('alternative')
            message['From'] = f"{self.from_name} <{self.from_email}>"
            message['To'] = to_email
            message['Subject'] = subject

            if text_content:
                message.attach(MIMEText(text_content, 'plain', 'utf-8'))
            message.attach(MIMEText(html_content, 'html', 'utf-8'))

            server = self._create_smtp_connection()
            try:
                server.sendmail(self.from_email, to_email, message.as_string())
            finally:
                server.quit()

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    def send_otp_email(self, to_email: str, otp: str) -> bool:
        """
        Sends the verification code email

        Returns:
            True if sent successfully
        """
        minutes = settings.OTP_EXPIRE_MINUTES
        html_content = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2 style="color: #4CAF50;">Wellness Tracker Verification</h2>
            <p>Your verification code is:</p>
            <div style="background-color: #f4f4f4; padding: 20px; text-align: center; margin: 20px 0;">
                <h1 style="color: #4CAF50; font-size: 32px; margin: 0;">{otp}</h1>
            </div>
            <p>This code will expire in {minutes} minutes.</p>
            <p>If you didn't request this code, please ignore this email.</p>
        </div>
        """
        text_content = (
            f"Your Wellness Tracker verification code is: {otp}\n"
            f"This code will expire in {minutes} minutes."
        )
        return self.send_email(to_email, settings.OTP_EMAIL_SUBJECT, html_content, text_content)


# Singleton instance
_email_service = None


def get_email_service() -> EmailService:
    """Returns the shared EmailService instance"""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
