"""
Service for sending SMS messages through the Twilio REST API.

The service is considered configured only when the account SID, auth token
and sender number are all present. Callers check `is_configured` and fall
back to logging the message when it is not.
"""
import logging
from typing import Optional

import requests
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.rest import Client

from core.config import settings
from core.exceptions import SmsDeliveryError

logger = logging.getLogger(__name__)

# Twilio error code for a "To" number that is not a valid phone number
INVALID_NUMBER_ERROR_CODE = 21211


class SmsService:
    """Thin wrapper around the Twilio messages resource."""

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        client: Optional[Client] = None
    ):
        """
        Initialize the SMS service.

        Args:
            account_sid: Twilio account SID. Defaults to TWILIO_ACCOUNT_SID.
            auth_token: Twilio auth token. Defaults to TWILIO_AUTH_TOKEN.
            from_number: Sender phone number. Defaults to TWILIO_PHONE_NUMBER.
            client: Pre-built Twilio client (tests pass a mock here).
        """
        self.account_sid = account_sid if account_sid is not None else settings.twilio_account_sid
        self.auth_token = auth_token if auth_token is not None else settings.twilio_auth_token
        self.from_number = from_number if from_number is not None else settings.twilio_phone_number

        self._client = client
        if self._client is None and self.is_configured:
            self._client = Client(self.account_sid, self.auth_token)

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def send(self, to: str, body: str) -> str:
        """
        Send one SMS.

        Returns:
            The provider message SID.

        Raises:
            SmsDeliveryError: If the service is not configured or the provider
                rejected the message or could not be
                reached. `code` carries the Twilio error code.
        """
        if self._client is None:
            raise SmsDeliveryError(to=to, reason="Twilio not configured")

        try:
            message = self._client.messages.create(
                body=body,
                from_=self.from_number,
                to=to
            )
        except TwilioRestException as e:
            logger.warning(
                "Twilio rejected SMS",
                extra={"to": to, "code": e.code, "status": e.status}
            )
            raise SmsDeliveryError(to=to, code=e.code, reason=e.msg) from e
        except TwilioException as e:
            logger.warning("Twilio client error", extra={"to": to, "error": str(e)})
            raise SmsDeliveryError(to=to, reason=str(e)) from e
        except requests.exceptions.RequestException as e:
            logger.warning("SMS transport error", extra={"to": to, "error": type(e).__name__})
            raise SmsDeliveryError(to=to, reason=f"Transport error: {type(e).__name__}") from e

        logger.debug("SMS sent", extra={"to": to, "sid": message.sid})
        return message.sid
