"""
textblast/services/monday_service.py

Purpose: Recipient source - monday.com board

- Queries the configured board through the monday.com GraphQL API
- Maps board items to RawRecord (item name + phone column text)
- Reads a single page; the page is the whole record set for a run
"""

import httpx
from typing import Any, Dict, List, Optional
from textblast.core.config import settings, Settings
from textblast.core.exceptions import UpstreamFetchError
from textblast.core.logging import get_logger
from textblast.models.campaign import RawRecord

logger = get_logger(__name__)


BOARD_ITEMS_QUERY = """
query ($boardIds: [ID!], $limit: Int!) {
  boards(ids: $boardIds) {
    items_page(limit: $limit) {
      items {
        name
        column_values {
          id
          text
        }
      }
    }
  }
}
"""


class MondayService:
    """
    Service class for reading campaign recipients from a monday.com board.
    """

    def __init__(self, config: Settings = settings, client: Optional[httpx.AsyncClient] = None):
        self.api_url = config.MONDAY_API_URL
        self.api_key = config.MONDAY_API_KEY
        self.board_id = config.MONDAY_BOARD_ID
        self.phone_column_id = config.MONDAY_PHONE_COLUMN_ID
        self.page_limit = config.MONDAY_PAGE_LIMIT
        self._timeout = config.MONDAY_TIMEOUT
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def is_configured(self) -> bool:
        return bool(self.api_key and self.board_id)

    async def fetch_records(self) -> List[RawRecord]:
        """
        Fetches board items as raw records.

        Returns:
            Records in board order

        Raises:
            UpstreamFetchError: If the board cannot be read
        """
        if not self.is_configured():
            raise UpstreamFetchError("monday.com API key or board id is not configured")

        logger.info(f"Fetching recipients from board {self.board_id}")

        try:
            response = await self._get_client().post(
                self.api_url,
                json={
                    "query": BOARD_ITEMS_QUERY,
                    "variables": {"boardIds": [str(self.board_id)], "limit": self.page_limit},
                },
                headers={
                    "Authorization": self.api_key,
                    "Content-Type": "application/json",
                },
            )
        except httpx.TimeoutException:
            logger.error("monday.com API timeout")
            raise UpstreamFetchError("monday.com is taking too long to respond")
        except httpx.RequestError as e:
            logger.error(f"Network error fetching board: {e}")
            raise UpstreamFetchError("Unable to connect to monday.com")

        if response.status_code != 200:
            logger.error(f"monday.com API error: {response.status_code} - {response.text[:200]}")
            raise UpstreamFetchError(
                f"monday.com API returned status {response.status_code}",
                details={"status_code": response.status_code}
            )

        try:
            payload = response.json()
        except ValueError:
            raise UpstreamFetchError("monday.com returned a non-JSON response")

        items = self._extract_items(payload)
        records = [self._to_record(item) for item in items]

        logger.info(f"Fetched {len(records)} records from board {self.board_id}")
        return records

    def _extract_items(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise UpstreamFetchError("Unexpected monday.com response")

        if payload.get("errors"):
            messages = [
                error.get("message", "unknown error") if isinstance(error, dict) else str(error)
                for error in payload["errors"]
            ]
            logger.error(f"monday.com GraphQL errors: {messages}")
            raise UpstreamFetchError("monday.com query failed", details={"errors": messages})

        try:
            boards = payload["data"]["boards"]
            items = boards[0]["items_page"]["items"]
        except (KeyError, IndexError, TypeError):
            raise UpstreamFetchError(f"Board {self.board_id} not found or response malformed")

        if not isinstance(items, list):
            raise UpstreamFetchError("Unexpected monday.com items payload")

        return items

    def _to_record(self, item: Dict[str, Any]) -> RawRecord:
        if not isinstance(item, dict):
            raise UpstreamFetchError("Unexpected monday.com item payload")

        columns = item.get("column_values") or []
        if not isinstance(columns, list):
            raise UpstreamFetchError("Unexpected monday.com column payload")

        phone_text = None
        for column in columns:
            if not isinstance(column, dict):
                raise UpstreamFetchError("Unexpected monday.com column payload")
            if column.get("id") == self.phone_column_id:
                phone_text = column.get("text")
                break

        return RawRecord(display_name=item.get("name") or "", raw_phone_text=phone_text)


_monday_service: Optional[MondayService] = None


def get_monday_service() -> MondayService:
    """Get or create the shared monday.com service instance."""
    global _monday_service
    if _monday_service is None:
        _monday_service = MondayService()
    return _monday_service


async def close_monday_service():
    """Close the monday.com HTTP client."""
    global _monday_service
    if _monday_service:
        await _monday_service.aclose()
        _monday_service = None
