"""Spreadsheet identifier resolution.

Titles are matched exactly (no case or whitespace normalization). When
several spreadsheets share a title, whichever the Drive API lists first
wins. Lookups are never cached, so renames and deletes are seen at once.
"""

import logging

from gdrive_mcp.api.base import SPREADSHEET_MIME_TYPE, WorkspaceAPI
from gdrive_mcp.server.errors import NotFoundError, PreconditionError

logger = logging.getLogger(__name__)


def escape_query_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


async def find_file_id_by_name(
    api: WorkspaceAPI, name: str, mime_type: str | None = None
) -> str | None:
    """Return the ID of the first file named exactly `name`, or None."""
    query = f"name = '{escape_query_literal(name)}'"
    if mime_type:
        query += f" and mimeType = '{mime_type}'"

    response = await api.list_files(query=query, page_size=1, fields="files(id, name)")
    files = response.get("files") or []
    if not files:
        return None
    return files[0].get("id")


class SpreadsheetResolver:
    """Turns a spreadsheet title or ID into the ID spreadsheet calls need."""

    def __init__(self, api: WorkspaceAPI) -> None:
        self.api = api

    async def resolve(self, title: str | None = None, spreadsheet_id: str | None = None) -> str:
        """Resolve a spreadsheet reference.

        Args:
            title: Exact spreadsheet name in Drive.
            spreadsheet_id: Explicit spreadsheet ID; returned unchanged.

        Returns:
            The spreadsheet ID.

        Raises:
            PreconditionError: If neither title nor spreadsheet_id is given.
            NotFoundError: If no spreadsheet has the given title.
        """
        if spreadsheet_id:
            return spreadsheet_id

        if not title:
            raise PreconditionError("Provide either the spreadsheet title or spreadsheetId.")

        resolved = await find_file_id_by_name(self.api, title, mime_type=SPREADSHEET_MIME_TYPE)
        if resolved is None:
            raise NotFoundError(f'No spreadsheet found with name "{title}".')

        logger.debug("Resolved spreadsheet %r to %s", title, resolved)
        return resolved
