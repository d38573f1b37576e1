"""
textblast/schemas/campaign.py

Purpose: HTTP payload schemas for the campaign endpoints

- Request bodies use the camelCase names the dashboard sends
- Responses serialize the campaign report for the caller
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from textblast.models.campaign import CampaignReport, CampaignRequest, DispatchOutcome
from textblast.utils.phone_utils import normalize_sent_keys


class SendMessagesRequest(BaseModel):
    """
    Campaign request body. At least one of message/imageUrl is required;
    that rule is enforced by the engine so it answers 400, not 422.
    """
    message: Optional[str] = Field(default=None, description="Template; {name} is replaced per recipient")
    image_url: Optional[str] = Field(default=None, alias="imageUrl", description="Public media URL")
    already_sent_phones: List[str] = Field(
        default_factory=list,
        alias="alreadySentPhones",
        description="Resume token from a previous run"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "message": "Hi {name}! Doors open at 7.",
                "imageUrl": "https://example.com/flyer.png",
                "alreadySentPhones": ["14045550100"]
            }
        }

    def to_campaign_request(self) -> CampaignRequest:
        return CampaignRequest(
            message_template=self.message or None,
            media_url=self.image_url or None,
            already_sent_keys=frozenset(normalize_sent_keys(self.already_sent_phones)),
        )


class DispatchOutcomeSchema(BaseModel):
    name: str
    raw_phone: Optional[str] = Field(default=None, alias="rawPhone")
    phone: str
    phone_key: str = Field(alias="phoneKey")
    status: str
    message_id: Optional[str] = Field(default=None, alias="messageId")
    provider_status: Optional[str] = Field(default=None, alias="providerStatus")
    error_code: Optional[int] = Field(default=None, alias="errorCode")
    error: Optional[str] = None
    critical: bool = False

    class Config:
        populate_by_name = True

    @classmethod
    def from_outcome(cls, outcome: DispatchOutcome) -> "DispatchOutcomeSchema":
        return cls(
            name=outcome.display_name,
            raw_phone=outcome.raw_phone_text,
            phone=outcome.phone,
            phone_key=outcome.dedup_key,
            status=outcome.status.value,
            message_id=outcome.provider_message_id,
            provider_status=outcome.provider_status,
            error_code=outcome.error_code,
            error=outcome.error_message,
            critical=outcome.critical,
        )


class CampaignSummarySchema(BaseModel):
    total: int
    duplicates: int
    invalid: int
    unique: int
    succeeded: int
    failed: int
    critical: int
    duration_ms: int = Field(alias="durationMs")

    class Config:
        populate_by_name = True


class SendMessagesResponse(BaseModel):
    success: bool = True
    campaign_id: str = Field(alias="campaignId")
    results: List[DispatchOutcomeSchema]
    sent_phone_keys: List[str] = Field(alias="sentPhoneKeys")
    summary: CampaignSummarySchema

    class Config:
        populate_by_name = True

    @classmethod
    def from_report(cls, report: CampaignReport) -> "SendMessagesResponse":
        summary = report.summary
        return cls(
            success=True,
            campaign_id=report.campaign_id,
            results=[DispatchOutcomeSchema.from_outcome(outcome) for outcome in report.outcomes],
            sent_phone_keys=list(report.sent_dedup_keys),
            summary=CampaignSummarySchema(
                total=summary.total,
                duplicates=summary.duplicates,
                invalid=summary.invalid,
                unique=summary.unique,
                succeeded=summary.succeeded,
                failed=summary.failed,
                critical=summary.critical,
                duration_ms=summary.duration_ms,
            ),
        )


class SingleSendRequest(BaseModel):
    """Single-recipient credential sanity check."""
    phone: str
    message: str = Field(..., min_length=1)


class SingleSendResponse(BaseModel):
    success: bool = True
    id: str
    provider_status: Optional[str] = Field(default=None, alias="providerStatus")

    class Config:
        populate_by_name = True


class AuthCheckResponse(BaseModel):
    success: bool = True
    status: str = "Authenticated"
    sid: Optional[str] = None
