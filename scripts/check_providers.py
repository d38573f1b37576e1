"""
Check Twilio and monday.com setup

Run this script to verify credentials, preview the eligible recipients on
the configured board, and optionally send one test SMS.
Nothing is sent to the board's recipients.

Usage: python scripts/check_providers.py
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from textblast.campaign.recipients import build_eligible
from textblast.core.config import settings
from textblast.core.exceptions import TextBlastError
from textblast.services.monday_service import MondayService
from textblast.services.twilio_service import TwilioService
from textblast.utils.phone_utils import normalize_phone


async def check_twilio(twilio: TwilioService) -> bool:
    """Verify Twilio credentials"""
    print("=" * 60)
    print("  Twilio")
    print("=" * 60 + "\n")

    print(f"Account SID: {settings.TWILIO_ACCOUNT_SID[:10]}..." if settings.TWILIO_ACCOUNT_SID else "Account SID: ❌ Not set")
    print(f"Auth Token: {'✅ Set' if settings.TWILIO_AUTH_TOKEN else '❌ Not set'}")
    print(f"From: {settings.TWILIO_FROM}")

    if not twilio.is_configured():
        print("\n⚠️  Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM in .env")
        return False

    try:
        account = await twilio.verify_credentials()
    except TextBlastError as e:
        print(f"\n❌ Credential check failed: {e.message}")
        return False

    print(f"\n✅ Authenticated as {account['friendly_name']} ({account['status']})\n")
    return True


async def preview_board(monday: MondayService):
    """Show how the board would be deduplicated"""
    print("=" * 60)
    print("  monday.com board")
    print("=" * 60 + "\n")

    try:
        records = await monday.fetch_records()
    except TextBlastError as e:
        print(f"❌ {e.message}")
        return

    eligible, counts = build_eligible(records)
    print(f"Records:    {len(records)}")
    print(f"Eligible:   {counts.unique}")
    print(f"Duplicates: {counts.duplicates}")
    print(f"Invalid:    {counts.invalid}")
    batches = -(-counts.unique // settings.CAMPAIGN_BATCH_SIZE)
    print(f"Batches:    {batches} of up to {settings.CAMPAIGN_BATCH_SIZE}\n")

    for recipient in eligible[:5]:
        print(f"  {recipient.display_name:<30} {recipient.canonical_phone}")
    if len(eligible) > 5:
        print(f"  ... and {len(eligible) - 5} more")
    print()


async def send_test_message(twilio: TwilioService):
    """Send one SMS to a number typed by the operator"""
    raw = input("Enter a US phone number to text: ")
    phone = normalize_phone(raw)

    if not phone:
        print("❌ Phone must be 10 digits, or 11 digits starting with 1")
        return

    print(f"\n📤 Sending test message to {phone}...")

    try:
        result = await twilio.send_message(
            to_phone=phone,
            message="🧪 Test message from textblast. If you received this, Twilio is working! ✅"
        )
    except TextBlastError as e:
        print(f"\n❌ Failed to send message: {e.message}")
        return

    print(f"\n✅ Message sent! SID={result.sid} status={result.status}")


async def main():
    print("\n🧪 textblast provider check\n")

    twilio = TwilioService()
    monday = MondayService()

    try:
        twilio_ok = await check_twilio(twilio)
        await preview_board(monday)

        if twilio_ok and input("Send a test message? (y/n): ").lower() == "y":
            await send_test_message(twilio)
    finally:
        await twilio.aclose()
        await monday.aclose()

    print("\n" + "=" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
