"""Drive files exposed as MCP resources.

Resource URIs are "gdrive:///" followed by the Drive file ID.
"""

import logging

from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    ErrorData,
    ListResourcesResult,
    ReadResourceResult,
    Resource,
    TextResourceContents,
)

from gdrive_mcp.api.base import WorkspaceAPI
from gdrive_mcp.server.content import (
    DEFAULT_MIME_TYPE,
    export_mime_type,
    is_native_type,
    normalize,
)
from gdrive_mcp.server.errors import PreconditionError, describe_error

logger = logging.getLogger(__name__)

URI_SCHEME = "gdrive:///"
PAGE_SIZE = 10
LIST_FIELDS = "nextPageToken, files(id, name, mimeType)"

# Prefix and media type of the diagnostic item returned for a failed read
READ_ERROR_MARKER = "[gdrive-mcp error]"
READ_ERROR_MIME_TYPE = "text/plain; charset=utf-8; x-gdrive-mcp=error"


def file_uri(file_id: str) -> str:
    """Build the resource URI for a Drive file."""
    return f"{URI_SCHEME}{file_id}"


def file_id_from_uri(uri: str) -> str:
    """Recover the Drive file ID from a resource URI.

    Raises:
        PreconditionError: If the URI does not use the gdrive scheme.
    """
    if not uri.startswith(URI_SCHEME) or len(uri) == len(URI_SCHEME):
        raise PreconditionError(f'Not a Google Drive resource URI: "{uri}"')
    return uri[len(URI_SCHEME) :]


class ResourceBrowser:
    """Lists Drive files page by page and reads their content."""

    def __init__(self, api: WorkspaceAPI) -> None:
        self.api = api

    async def list(self, cursor: str | None = None) -> ListResourcesResult:
        """List one page of Drive files.

        Args:
            cursor: nextCursor from the previous page, if any.

        Raises:
            McpError: If the Drive listing fails.
        """
        try:
            response = await self.api.list_files(
                page_size=PAGE_SIZE, fields=LIST_FIELDS, page_token=cursor or None
            )
        except Exception as e:
            logger.exception("Error listing Drive files")
            raise McpError(
                ErrorData(code=INTERNAL_ERROR, message=f"Error listing files: {describe_error(e)}")
            ) from e

        resources = [
            Resource(
                uri=file_uri(item["id"]),
                name=item.get("name") or item["id"],
                mimeType=item.get("mimeType"),
            )
            for item in response.get("files") or []
        ]
        return ListResourcesResult(
            resources=resources,
            nextCursor=response.get("nextPageToken") or None,
        )

    async def read(self, uri: str) -> ReadResourceResult:
        """Read a Drive file, exporting native Google types first.

        Failures are returned as a single text item describing the error.
        """
        try:
            file_id = file_id_from_uri(uri)
            metadata = await self.api.get_file_metadata(file_id, fields="mimeType")
            mime_type = metadata.get("mimeType") or DEFAULT_MIME_TYPE

            if is_native_type(mime_type):
                target = export_mime_type(mime_type)
                payload = await self.api.export_file(file_id, target)
                contents = normalize(uri, payload, target)
            else:
                payload = await self.api.download_file(file_id)
                contents = normalize(uri, payload, mime_type)
        except PreconditionError as e:
            return self._error_result(uri, str(e))
        except Exception as e:
            logger.exception("Error reading resource %s", uri)
            return self._error_result(uri, describe_error(e))

        return ReadResourceResult(contents=[contents])

    def _error_result(self, uri: str, detail: str) -> ReadResourceResult:
        """Build the single diagnostic item returned for a failed read."""
        text = f'{READ_ERROR_MARKER} Error reading "{uri}": {detail}'
        return ReadResourceResult(
            contents=[TextResourceContents(uri=uri, mimeType=READ_ERROR_MIME_TYPE, text=text)]
        )
