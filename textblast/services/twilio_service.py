"""
textblast/services/twilio_service.py

Purpose: Twilio SMS/MMS message sending

- Sends text and media messages via the Twilio REST API
- Classifies Twilio error codes once, at this boundary
- Verifies account credentials for the health/auth check
"""

import httpx
from dataclasses import dataclass
from typing import Dict, Any, Optional
from textblast.core.config import settings, Settings
from textblast.core.exceptions import AuthenticationError, ExternalServiceError, ProviderSendError
from textblast.core.logging import get_logger

logger = get_logger(__name__)


# Account, sender or policy level failures. When one of these shows up the
# remaining sends of the run are likely to fail the same way.
CRITICAL_ERROR_CODES = frozenset({
    20003,  # Authentication failed
    21606,  # From number is not SMS/MMS capable
    21608,  # Trial account: recipient is not verified
    21611,  # From number has too many queued messages
    30002,  # Account suspended
    30034,  # Sender not registered for A2P 10DLC
})


def is_critical_error(code: Optional[int]) -> bool:
    return code in CRITICAL_ERROR_CODES


@dataclass(frozen=True)
class ProviderResult:
    """Twilio's acknowledgement of an accepted message."""

    sid: str
    status: Optional[str] = None


class TwilioService:
    """Service for sending messages via Twilio"""

    def __init__(self, config: Settings = settings, client: Optional[httpx.AsyncClient] = None):
        self.account_sid = config.TWILIO_ACCOUNT_SID
        self.auth_token = config.TWILIO_AUTH_TOKEN
        self.from_number = config.TWILIO_FROM
        self.base_url = f"{config.TWILIO_API_BASE}/Accounts/{self.account_sid}"
        self._timeout = config.TWILIO_TIMEOUT
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                auth=(self.account_sid or "", self.auth_token or ""),
                timeout=self._timeout
            )
        return self._client

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send_message(
        self,
        to_phone: str,
        message: str,
        media_url: Optional[str] = None
    ) -> ProviderResult:
        """
        Sends one message via Twilio

        Args:
            to_phone: Recipient phone (+14045550100)
            message: Message text, may be empty for media-only messages
            media_url: Optional public URL of an image to attach

        Returns:
            ProviderResult with the message SID and Twilio status

        Raises:
            ProviderSendError: If Twilio rejects the message or is unreachable
        """
        data = {
            "From": self.from_number or "",
            "To": to_phone,
            "Body": message or "",
        }
        if media_url:
            data["MediaUrl"] = media_url

        try:
            response = await self._get_client().post(
                f"{self.base_url}/Messages.json",
                data=data
            )
        except httpx.TimeoutException:
            logger.error(f"Twilio API timeout sending to {to_phone}")
            raise ProviderSendError("Twilio API timeout")
        except httpx.RequestError as e:
            logger.error(f"Network error sending to {to_phone}: {e}")
            raise ProviderSendError(f"Unable to reach Twilio: {e}")

        if response.status_code in (200, 201):
            result = response.json()
            if not isinstance(result, dict) or not result.get("sid"):
                logger.error(f"Twilio accepted message to {to_phone} without a message SID")
                raise ProviderSendError("Twilio response missing message sid")
            return ProviderResult(sid=result.get("sid"), status=result.get("status"))

        raise self._send_error(response)

    def _send_error(self, response: httpx.Response) -> ProviderSendError:
        """Builds a ProviderSendError from a Twilio error body."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        code = body.get("code")
        if code is not None:
            try:
                code = int(code)
            except (TypeError, ValueError):
                code = None
        message = body.get("message") or f"Twilio API error: {response.status_code}"

        return ProviderSendError(message, provider_code=code, critical=is_critical_error(code))

    async def verify_credentials(self) -> Dict[str, Any]:
        """
        Fetches the account resource to prove the credentials work.

        Returns:
            {"sid": "AC...", "status": "active", "friendly_name": "..."}
        """
        if not self.is_configured():
            raise AuthenticationError("Twilio credentials are not configured")

        try:
            response = await self._get_client().get(f"{self.base_url}.json")
        except httpx.RequestError as e:
            logger.error(f"Twilio credential check failed: {e}")
            raise ExternalServiceError(f"Unable to reach Twilio: {e}")

        if response.status_code in (401, 403):
            raise AuthenticationError("Twilio rejected the account credentials")
        if response.status_code != 200:
            raise ExternalServiceError(f"Twilio API error: {response.status_code}")

        account = response.json()
        return {
            "sid": account.get("sid"),
            "status": account.get("status"),
            "friendly_name": account.get("friendly_name"),
        }

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured"""
        return bool(
            self.account_sid
            and self.auth_token
            and self.from_number
            and self.account_sid != "your_twilio_sid"
        )


_twilio_service: Optional[TwilioService] = None


def get_twilio_service() -> TwilioService:
    """Get or create the shared Twilio service instance."""
    global _twilio_service
    if _twilio_service is None:
        _twilio_service = TwilioService()
    return _twilio_service


async def close_twilio_service():
    """Close the Twilio HTTP client."""
    global _twilio_service
    if _twilio_service:
        await _twilio_service.aclose()
        _twilio_service = None
