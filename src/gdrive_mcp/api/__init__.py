"""Remote Drive/Sheets service access."""

from gdrive_mcp.api.base import GOOGLE_APPS_PREFIX, SPREADSHEET_MIME_TYPE, WorkspaceAPI
from gdrive_mcp.api.google_api import GoogleWorkspaceAPI

__all__ = [
    "GOOGLE_APPS_PREFIX",
    "SPREADSHEET_MIME_TYPE",
    "GoogleWorkspaceAPI",
    "WorkspaceAPI",
]
