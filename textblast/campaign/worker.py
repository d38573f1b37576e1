"""
textblast/campaign/worker.py

Purpose: Single-recipient dispatch

- Personalizes the template with the recipient's name
- Hands the message to the injected provider
- Turns provider errors into failed outcomes (never retried)
"""

from typing import Optional, Protocol
from textblast.core.exceptions import ProviderSendError
from textblast.core.logging import get_logger
from textblast.models.campaign import DispatchOutcome, NormalizedRecipient

logger = get_logger(__name__)


NAME_PLACEHOLDER = "{name}"


class MessageProvider(Protocol):
    async def send_message(self, to_phone: str, message: str, media_url: Optional[str] = None):
        ...


def personalize(template: Optional[str], name: str) -> str:
    """Replaces every {name} in the template. A missing template gives an empty body."""
    if not template:
        return ""
    return template.replace(NAME_PLACEHOLDER, name)


class DispatchWorker:
    """Sends one campaign message per call."""

    def __init__(self, provider: MessageProvider, template: Optional[str] = None, media_url: Optional[str] = None):
        self.provider = provider
        self.template = template
        self.media_url = media_url

    async def send(self, recipient: NormalizedRecipient) -> DispatchOutcome:
        body = personalize(self.template, recipient.display_name)

        try:
            result = await self.provider.send_message(
                to_phone=recipient.canonical_phone,
                message=body,
                media_url=self.media_url or None
            )
        except ProviderSendError as e:
            extra = {"phone": recipient.canonical_phone, "error_code": e.provider_code, "critical": e.critical}
            if e.critical:
                logger.error(
                    f"❌ Critical provider error for {recipient.display_name} at {recipient.canonical_phone}: "
                    f"{e.message} - later sends will likely fail too",
                    extra=extra
                )
            else:
                logger.warning(
                    f"❌ Failed to send to {recipient.display_name} at {recipient.canonical_phone}: {e.message}",
                    extra=extra
                )
            return DispatchOutcome.failed(
                recipient,
                error_message=e.message,
                error_code=e.provider_code,
                critical=e.critical,
            )

        logger.info(f"✅ Message sent to {recipient.display_name} at {recipient.canonical_phone}")
        return DispatchOutcome.sent(recipient, message_id=result.sid, provider_status=result.status)
