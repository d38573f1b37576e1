"""
textblast/api/campaign.py

Purpose: Campaign HTTP endpoints

- POST /send-messages: run one campaign against the configured board
- POST /test-send: send a single message to check provider setup
- GET /test-auth: verify Twilio credentials
"""

from fastapi import APIRouter, Depends

from textblast.campaign.engine import CampaignEngine
from textblast.campaign.scheduler import BatchScheduler
from textblast.core.config import settings
from textblast.core.exceptions import ExternalServiceError, ProviderSendError, ValidationError
from textblast.core.logging import get_logger
from textblast.schemas.campaign import (
    AuthCheckResponse,
    SendMessagesRequest,
    SendMessagesResponse,
    SingleSendRequest,
    SingleSendResponse,
)
from textblast.services.monday_service import MondayService, get_monday_service
from textblast.services.twilio_service import TwilioService, get_twilio_service
from textblast.utils.phone_utils import normalize_phone

logger = get_logger(__name__)
router = APIRouter()


def get_batch_scheduler() -> BatchScheduler:
    return BatchScheduler(
        batch_size=settings.CAMPAIGN_BATCH_SIZE,
        delay_seconds=settings.batch_delay_seconds
    )


def get_campaign_engine(
    monday: MondayService = Depends(get_monday_service),
    twilio: TwilioService = Depends(get_twilio_service),
    scheduler: BatchScheduler = Depends(get_batch_scheduler),
) -> CampaignEngine:
    return CampaignEngine(record_source=monday, provider=twilio, scheduler=scheduler)


@router.post("/send-messages", response_model=SendMessagesResponse, response_model_by_alias=True)
async def send_messages(
    body: SendMessagesRequest,
    engine: CampaignEngine = Depends(get_campaign_engine),
):
    """
    Sends the campaign message to every eligible board recipient.

    Failures of individual recipients are part of the report; a record
    source failure aborts the run with an error envelope and no results.
    """
    report = await engine.run(body.to_campaign_request())
    return SendMessagesResponse.from_report(report)


@router.post("/test-send", response_model=SingleSendResponse, response_model_by_alias=True)
async def test_send(
    body: SingleSendRequest,
    twilio: TwilioService = Depends(get_twilio_service),
):
    """
    Sends one message to one phone, bypassing the board and batching.
    """
    phone = normalize_phone(body.phone)
    if not phone:
        raise ValidationError("Phone must be a 10 digit or 1 + 10 digit number.", details={"phone": body.phone})

    logger.info(f"📤 Test send to {phone}")
    try:
        result = await twilio.send_message(to_phone=phone, message=body.message)
    except ProviderSendError as e:
        raise ExternalServiceError(
            e.message,
            code="PROVIDER_SEND_ERROR",
            details={"provider_code": e.provider_code, "critical": e.critical}
        )

    return SingleSendResponse(success=True, id=result.sid, provider_status=result.status)


@router.get("/test-auth", response_model=AuthCheckResponse)
async def test_auth(twilio: TwilioService = Depends(get_twilio_service)):
    """
    Verifies the Twilio account credentials.
    """
    account = await twilio.verify_credentials()
    return AuthCheckResponse(success=True, status="Authenticated", sid=account.get("sid"))
