"""Conversion of Drive file payloads into MCP resource contents."""

import base64

from mcp.types import BlobResourceContents, TextResourceContents

from gdrive_mcp.api.base import GOOGLE_APPS_PREFIX

DEFAULT_MIME_TYPE = "application/octet-stream"

# Native Google types have no byte content and must be exported
EXPORT_MIME_TYPES = {
    "application/vnd.google-apps.document": "text/markdown",
    "application/vnd.google-apps.spreadsheet": "text/csv",
    "application/vnd.google-apps.presentation": "text/plain",
    "application/vnd.google-apps.drawing": "image/png",
}
DEFAULT_EXPORT_MIME_TYPE = "text/plain"


def is_native_type(mime_type: str) -> bool:
    """Check whether a media type is a native Google Workspace type."""
    return mime_type.startswith(GOOGLE_APPS_PREFIX)


def export_mime_type(mime_type: str) -> str:
    """Pick the interchange type a native Google file is exported as."""
    return EXPORT_MIME_TYPES.get(mime_type, DEFAULT_EXPORT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """Check whether content of this media type is returned as text."""
    return mime_type.startswith("text/") or mime_type == "application/json"


def normalize(
    uri: str, payload: bytes | str, mime_type: str
) -> TextResourceContents | BlobResourceContents:
    """Wrap a payload as exactly one resource content item.

    Text types are decoded as UTF-8; everything else is base64 encoded.

    Args:
        uri: Resource URI the content belongs to.
        payload: Raw bytes (or already-decoded text) from Drive.
        mime_type: Media type of the payload.

    Returns:
        TextResourceContents or BlobResourceContents.
    """
    if is_text_type(mime_type):
        if isinstance(payload, bytes):
            text = payload.decode("utf-8", errors="replace")
        else:
            text = payload
        return TextResourceContents(uri=uri, mimeType=mime_type, text=text)

    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    blob = base64.b64encode(payload).decode("ascii")
    return BlobResourceContents(uri=uri, mimeType=mime_type, blob=blob)
