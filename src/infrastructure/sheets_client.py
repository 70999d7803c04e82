"""Google Sheets client wrapper for the values API."""

import asyncio
import logging
from typing import Any

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
VALUE_INPUT_OPTION = "USER_ENTERED"


class SheetsConnectionError(RuntimeError):
    """Raised when the spreadsheet cannot be reached at startup."""


def column_letter(index: int) -> str:
    """Convert a zero-based column index to its A1 column letters.

    Args:
        index: Zero-based column index (0 -> A, 25 -> Z, 26 -> AA)

    Returns:
        str: Column letters
    """
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")

    letters = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def sheet_range(worksheet: str, cells: str | None = None) -> str:
    """Build an A1 range, quoting the worksheet name when needed."""
    name = worksheet
    if not worksheet.replace("_", "").isalnum():
        name = "'" + worksheet.replace("'", "''") + "'"
    return f"{name}!{cells}" if cells else name


class SheetsClient:
    """Async wrapper around the synchronous Google Sheets v4 client.

    Every request runs in a worker thread. Requests are serialized because the
    underlying httplib2 transport is not thread-safe.
    """

    def __init__(self, service: Any, spreadsheet_id: str) -> None:
        """Initialize Sheets client.

        Args:
            service: Discovery resource built for sheets v4
            spreadsheet_id: ID of the spreadsheet to operate on
        """
        self.spreadsheet_id = spreadsheet_id
        self._service = service
        self._lock = asyncio.Lock()

    @classmethod
    def from_service_account_file(
        cls, key_file: str, spreadsheet_id: str
    ) -> "SheetsClient":
        """Authenticate with a service-account key file.

        Raises:
            SheetsConnectionError: If the credentials cannot be loaded
        """
        try:
            credentials = service_account.Credentials.from_service_account_file(
                key_file, scopes=SHEETS_SCOPES
            )
        except (OSError, ValueError, GoogleAuthError) as e:
            raise SheetsConnectionError(
                f"Sheets API authentication failed using {key_file}: {e}"
            ) from e

        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        logger.info("Sheets API authentication successful")
        return cls(service, spreadsheet_id)

    async def _execute(self, request: Any) -> dict[str, Any]:
        async with self._lock:
            return await asyncio.to_thread(request.execute)

    async def verify_connection(self) -> str:
        """Check that the spreadsheet is reachable and return its title.

        Raises:
            SheetsConnectionError: If the spreadsheet cannot be opened
        """
        try:
            response = await self._execute(
                self._service.spreadsheets().get(
                    spreadsheetId=self.spreadsheet_id, fields="properties.title"
                )
            )
        except HttpError as e:
            status = e.resp.status
            hint = ""
            if status == 403:
                hint = " Share the sheet with the service account as an Editor."
            elif status == 404:
                hint = " Spreadsheet not found, check the ID."
            raise SheetsConnectionError(
                f"Error connecting to spreadsheet {self.spreadsheet_id} "
                f"(HTTP {status}).{hint}"
            ) from e
        except Exception as e:
            raise SheetsConnectionError(
                f"Error connecting to spreadsheet {self.spreadsheet_id}: {e}"
            ) from e

        title = response.get("properties", {}).get("title", "")
        logger.info(f"Connected to spreadsheet: {title}")
        return title

    async def get_values(self, range_a1: str) -> list[list[Any]]:
        """Read the cell values of a range.

        Returns:
            list[list[Any]]: Rows of cells; trailing empty cells are omitted
        """
        response = await self._execute(
            self._service.spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=range_a1)
        )
        return response.get("values", [])

    async def append_row(self, range_a1: str, row: list[Any]) -> None:
        """Append a row after the last row of the table in range_a1."""
        await self._execute(
            self._service.spreadsheets()
            .values()
            .append(
                spreadsheetId=self.spreadsheet_id,
                range=range_a1,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": [row]},
            )
        )

    async def batch_update(self, data: dict[str, list[list[Any]]]) -> None:
        """Write several ranges in one request.

        Args:
            data: Mapping of A1 range to the rows of values written there
        """
        await self._execute(
            self._service.spreadsheets()
            .values()
            .batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={
                    "valueInputOption": VALUE_INPUT_OPTION,
                    "data": [
                        {"range": range_a1, "values": values}
                        for range_a1, values in data.items()
                    ],
                },
            )
        )

    async def close(self) -> None:
        """Close the underlying HTTP transport."""
        await asyncio.to_thread(self._service.close)
        logger.info("Sheets client closed")
