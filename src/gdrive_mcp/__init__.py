"""Google Drive and Google Sheets MCP server.

Lets an MCP client search, read, create, update, and delete Drive files
and spreadsheet data.
"""

from gdrive_mcp.__version__ import __version__

__all__ = ["__version__"]
