"""Tool catalog for the Drive/Sheets MCP server.

Spreadsheet tools accept either `spreadsheetId` or the spreadsheet's
exact `title`; the id wins when both are given.
"""

from enum import Enum

from mcp.types import Tool


class ToolName(str, Enum):
    """Names of every tool the server exposes."""

    SEARCH = "search"
    READ_SHEETS = "read_sheets"
    UPDATE_GOOGLE_SHEET_RANGE = "update_google_sheet_range"
    APPEND_GOOGLE_SHEET_ROW = "append_google_sheet_row"
    DELETE_GOOGLE_SHEET_ROW = "delete_google_sheet_row"
    CREATE_GOOGLE_SHEET = "create_google_sheet"
    DELETE_GOOGLE_DRIVE_FILE = "delete_google_drive_file"


_SPREADSHEET_REFERENCE = {
    "title": {
        "type": "string",
        "description": "Exact name of the spreadsheet in Google Drive (alternative to spreadsheetId)",
    },
    "spreadsheetId": {
        "type": "string",
        "description": "Spreadsheet ID from the URL (alternative to title)",
    },
}


TOOLS: list[Tool] = [
    Tool(
        name=ToolName.SEARCH.value,
        description="Search for files in Google Drive by full-text content",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Free-text search query",
                },
            },
            "required": ["query"],
        },
    ),
    Tool(
        name=ToolName.READ_SHEETS.value,
        description=(
            "Read values from a Google Sheets spreadsheet. Returns the given range, "
            "or A1:Z20 of the first tab when no range is specified."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                **_SPREADSHEET_REFERENCE,
                "range": {
                    "type": "string",
                    "description": "Optional A1 range (e.g. 'Sheet1!A1:D10')",
                },
                "columnName": {
                    "type": "string",
                    "description": "Optional header name to return a single column (e.g. 'Phone Number')",
                },
            },
            "required": [],
        },
    ),
    Tool(
        name=ToolName.UPDATE_GOOGLE_SHEET_RANGE.value,
        description="Overwrite a range of a Google Sheets spreadsheet with a single row of values.",
        inputSchema={
            "type": "object",
            "properties": {
                **_SPREADSHEET_REFERENCE,
                "range": {
                    "type": "string",
                    "description": "A1 range to overwrite (e.g. 'Sheet1!A2:D2')",
                },
                "values": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Cell values for one row, stored as entered (no formula parsing)",
                },
            },
            "required": ["range", "values"],
        },
    ),
    Tool(
        name=ToolName.APPEND_GOOGLE_SHEET_ROW.value,
        description="Append one row of values below the data of a tab in a Google Sheets spreadsheet.",
        inputSchema={
            "type": "object",
            "properties": {
                **_SPREADSHEET_REFERENCE,
                "range": {
                    "type": "string",
                    "description": "Anchor range (e.g. 'Sheet1!A1'); the row is inserted after the table found there",
                },
                "values": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Cell values for exactly one row",
                },
            },
            "required": ["range", "values"],
        },
    ),
    Tool(
        name=ToolName.DELETE_GOOGLE_SHEET_ROW.value,
        description="Remove a row, by zero-based position, from a tab in a Google Sheets spreadsheet.",
        inputSchema={
            "type": "object",
            "properties": {
                **_SPREADSHEET_REFERENCE,
                "sheetName": {
                    "type": "string",
                    "description": "Exact (case-sensitive) name of the tab holding the row (e.g. 'Sheet1')",
                },
                "rowIndex": {
                    "type": "integer",
                    "description": "Zero-based index of the row to delete",
                },
            },
            "required": ["sheetName", "rowIndex"],
        },
    ),
    Tool(
        name=ToolName.CREATE_GOOGLE_SHEET.value,
        description="Create a new Google Sheets spreadsheet with the specified name.",
        inputSchema={
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Name of the new spreadsheet",
                },
            },
            "required": ["title"],
        },
    ),
    Tool(
        name=ToolName.DELETE_GOOGLE_DRIVE_FILE.value,
        description="Delete a file from Google Drive by ID or exact name.",
        inputSchema={
            "type": "object",
            "properties": {
                "fileId": {
                    "type": "string",
                    "description": "File ID (optional if name is provided)",
                },
                "name": {
                    "type": "string",
                    "description": "Exact file name, used when fileId is not given",
                },
            },
            "required": [],
        },
    ),
]
