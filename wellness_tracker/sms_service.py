"""
SMS Service Module
Sends text messages through the Twilio REST API
"""
import requests
from loguru import logger

from .config import settings


class SMSService:
    """Service sending SMS messages via Twilio's Messages endpoint"""

    def __init__(self):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.auth_token = settings.TWILIO_AUTH_TOKEN
        self.from_number = settings.TWILIO_PHONE_NUMBER
        self.api_url = settings.TWILIO_API_URL.rstrip("/")
        self.timeout = settings.TWILIO_TIMEOUT_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def _messages_url(self) -> str:
        return f"{self.api_url}/Accounts/{self.account_sid}/Messages.json"

    def send_sms(self, to_number: str, body: str) -> bool:
        """
        Sends one SMS message

        Args:
            to_number: Recipient phone number
            body: Message text

        Returns:
            True if the provider accepted the message
        """
        if not self.configured:
            logger.error("SMS provider is not configured")
            return False

        try:
            response = requests.post(
                self._messages_url(),
                data={"To": to_number, "From": self.from_number, "Body": body},
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.info(f"SMS sent successfully to {to_number}")
            return True
        except requests.RequestException as e:
            logger.error(f"Failed to send SMS to {to_number}: {e}")
            return False

    def send_otp_sms(self, to_number: str, otp: str) -> bool:
        body = (
            f"Your Wellness Tracker OTP is: {otp}. "
            f"Valid for {settings.OTP_EXPIRE_MINUTES} minutes."
        )
        return self.send_sms(to_number, body)


_sms_service = None


def get_sms_service() -> SMSService:
    """Returns the shared SMSService instance"""
    global _sms_service
    if _sms_service is None:
        _sms_service = SMSService()
    return _sms_service
