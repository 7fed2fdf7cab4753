"""Capability interface for the remote Drive/Sheets service.

The dispatcher, resolver, and resource browser only talk to the remote
service through this protocol, so tests can substitute an in-memory fake.
Payloads are the raw JSON dictionaries returned by the Drive v3 and
Sheets v4 REST APIs.
"""

from typing import Any, Protocol

GOOGLE_APPS_PREFIX = "application/vnd.google-apps"
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"


class WorkspaceAPI(Protocol):
    """Operations the server needs from Google Drive and Google Sheets."""

    async def list_files(
        self,
        query: str | None = None,
        page_size: int = 10,
        fields: str | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        """List files; returns {"files": [...], "nextPageToken": ...}."""
        ...

    async def get_file_metadata(self, file_id: str, fields: str = "id,name,mimeType") -> dict[str, Any]:
        """Get a file's metadata."""
        ...

    async def export_file(self, file_id: str, mime_type: str) -> bytes:
        """Export a native Google file to a concrete media type."""
        ...

    async def download_file(self, file_id: str) -> bytes:
        """Download a file's full byte content."""
        ...

    async def create_file(self, name: str, mime_type: str) -> dict[str, Any]:
        """Create an empty file; returns {"id", "name"}."""
        ...

    async def delete_file(self, file_id: str) -> None:
        """Permanently delete a file."""
        ...

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        """Get spreadsheet metadata including sheets[].properties."""
        ...

    async def get_values(self, spreadsheet_id: str, cell_range: str) -> list[list[Any]]:
        """Get cell values for an A1 range; empty list when no data."""
        ...

    async def update_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[Any]]
    ) -> dict[str, Any]:
        """Overwrite a range with raw (unparsed) values."""
        ...

    async def append_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[Any]]
    ) -> dict[str, Any]:
        """Append rows after the table anchored at a range, inserting new rows."""
        ...

    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Apply structural requests atomically."""
        ...

    async def create_spreadsheet(
        self, title: str, sheet_title: str = "Sheet1", locale: str = "en_US"
    ) -> dict[str, Any]:
        """Create a spreadsheet; returns {"spreadsheetId", "properties": {...}}."""
        ...
