"""MCP server implementation for Google Drive and Google Sheets.

Resources:
- gdrive:///<file id> for every Drive file, listed 10 per page
- Native Docs/Sheets/Slides/Drawings are exported (Markdown, CSV, text, PNG)

Tools (7):
- search: Full-text search across Drive
- read_sheets: Read a range or a single column of a spreadsheet
- update_google_sheet_range: Overwrite a range with one row
- append_google_sheet_row: Append one row below a table
- delete_google_sheet_row: Delete a row by zero-based index
- create_google_sheet: Create a spreadsheet
- delete_google_drive_file: Delete a Drive file by ID or name

Transport: Stdio
Authentication: OAuth 2.0 with automatic token refresh
"""

from gdrive_mcp.server.gdrive_server import GDriveServer, main


def create_server() -> GDriveServer:
    """Create a Drive/Sheets MCP server.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GDriveServer()


__all__ = ["create_server", "GDriveServer", "main"]
