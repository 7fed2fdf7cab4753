"""httpx implementation of WorkspaceAPI against the Drive v3 and Sheets v4 REST APIs.

Every request carries a bearer token from the shared credential context
(TokenStorage + OAuthManager). Expired tokens are refreshed through the
OAuthManager before the request is sent.
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from gdrive_mcp.auth import OAuthManager, TokenStatus, TokenStorage
from gdrive_mcp.config import SERVICE_NAME

logger = logging.getLogger(__name__)

DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"
SHEETS_API_BASE = "https://sheets.googleapis.com/v4"

# Raw values are stored as typed, without formula or number parsing
VALUE_INPUT_OPTION = "RAW"


def _id_path(resource_id: str) -> str:
    """Percent-encode a file or spreadsheet ID as a single URL path segment.

    Raises:
        ValueError: If the ID is empty or a dot segment.
    """
    if resource_id in ("", ".", ".."):
        raise ValueError(f"Invalid Google Drive ID: '{resource_id}'")
    return quote(resource_id, safe="")


def _range_path(cell_range: str) -> str:
    """Percent-encode an A1 range for use as a URL path segment."""
    return quote(cell_range, safe="!:")


class GoogleWorkspaceAPI:
    """Drive/Sheets client using a shared httpx.AsyncClient.

    Attributes:
        storage: TokenStorage for retrieving OAuth tokens.
        manager: OAuthManager for token refresh operations.
    """

    def __init__(
        self,
        storage: TokenStorage | None = None,
        manager: OAuthManager | None = None,
    ) -> None:
        self.storage = storage or TokenStorage()
        self.manager = manager or OAuthManager(storage=self.storage)
        self._http_client: httpx.AsyncClient | None = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client with connection pooling."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary.

        Raises:
            RuntimeError: If no token is available or refresh fails.
        """
        status = self.storage.get_status(SERVICE_NAME)

        if status == TokenStatus.MISSING:
            raise RuntimeError(
                f"No OAuth token found for service '{SERVICE_NAME}'. "
                "Please authenticate first using: gdrive-mcp setup"
            )

        if status == TokenStatus.INVALID:
            raise RuntimeError(
                f"OAuth token for service '{SERVICE_NAME}' is invalid or corrupted. "
                "Please re-authenticate using: gdrive-mcp setup"
            )

        if status == TokenStatus.EXPIRED:
            logger.info("Token expired, attempting refresh...")
            token = await self.manager.refresh_if_needed()
            if token is None:
                raise RuntimeError(
                    "Token refresh failed. Please re-authenticate using: gdrive-mcp setup"
                )
            return token.access_token

        stored = self.storage.retrieve(SERVICE_NAME)
        if stored is None:
            raise RuntimeError("Unexpected error: token retrieval failed")

        return stored.token.access_token

    async def _make_raw_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make an authenticated request and return the raw response.

        Raises:
            httpx.HTTPStatusError: If the API answers with an error status.
        """
        access_token = await self._get_access_token()
        client = await self._get_http_client()

        response = await client.request(
            method=method,
            url=url,
            params=params,
            json=json_data,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        response.raise_for_status()
        return response

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON body.

        Empty bodies (e.g. 204 from DELETE) decode to an empty dict.
        """
        response = await self._make_raw_request(method, url, params=params, json_data=json_data)
        if not response.content:
            return {}
        result: dict[str, Any] = response.json()
        return result

    # Drive

    async def list_files(
        self,
        query: str | None = None,
        page_size: int = 10,
        fields: str | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"pageSize": page_size}
        if query:
            params["q"] = query
        if fields:
            params["fields"] = fields
        if page_token:
            params["pageToken"] = page_token
        return await self._make_request("GET", f"{DRIVE_API_BASE}/files", params=params)

    async def get_file_metadata(
        self, file_id: str, fields: str = "id,name,mimeType"
    ) -> dict[str, Any]:
        return await self._make_request(
            "GET", f"{DRIVE_API_BASE}/files/{_id_path(file_id)}", params={"fields": fields}
        )

    async def export_file(self, file_id: str, mime_type: str) -> bytes:
        response = await self._make_raw_request(
            "GET",
            f"{DRIVE_API_BASE}/files/{_id_path(file_id)}/export",
            params={"mimeType": mime_type},
        )
        return response.content

    async def download_file(self, file_id: str) -> bytes:
        response = await self._make_raw_request(
            "GET", f"{DRIVE_API_BASE}/files/{_id_path(file_id)}", params={"alt": "media"}
        )
        return response.content

    async def create_file(self, name: str, mime_type: str) -> dict[str, Any]:
        return await self._make_request(
            "POST",
            f"{DRIVE_API_BASE}/files",
            params={"fields": "id,name"},
            json_data={"name": name, "mimeType": mime_type},
        )

    async def delete_file(self, file_id: str) -> None:
        await self._make_raw_request("DELETE", f"{DRIVE_API_BASE}/files/{_id_path(file_id)}")

    # Sheets

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        return await self._make_request(
            "GET",
            f"{SHEETS_API_BASE}/spreadsheets/{_id_path(spreadsheet_id)}",
            params={"fields": "spreadsheetId,properties.title,sheets.properties"},
        )

    async def get_values(self, spreadsheet_id: str, cell_range: str) -> list[list[Any]]:
        response = await self._make_request(
            "GET",
            f"{SHEETS_API_BASE}/spreadsheets/{_id_path(spreadsheet_id)}"
            f"/values/{_range_path(cell_range)}",
        )
        values: list[list[Any]] = response.get("values", [])
        return values

    async def update_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[Any]]
    ) -> dict[str, Any]:
        return await self._make_request(
            "PUT",
            f"{SHEETS_API_BASE}/spreadsheets/{_id_path(spreadsheet_id)}"
            f"/values/{_range_path(cell_range)}",
            params={"valueInputOption": VALUE_INPUT_OPTION},
            json_data={"range": cell_range, "values": values},
        )

    async def append_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[Any]]
    ) -> dict[str, Any]:
        return await self._make_request(
            "POST",
            f"{SHEETS_API_BASE}/spreadsheets/{_id_path(spreadsheet_id)}"
            f"/values/{_range_path(cell_range)}:append",
            params={"valueInputOption": VALUE_INPUT_OPTION, "insertDataOption": "INSERT_ROWS"},
            json_data={"values": values},
        )

    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        return await self._make_request(
            "POST",
            f"{SHEETS_API_BASE}/spreadsheets/{_id_path(spreadsheet_id)}:batchUpdate",
            json_data={"requests": requests},
        )

    async def create_spreadsheet(
        self, title: str, sheet_title: str = "Sheet1", locale: str = "en_US"
    ) -> dict[str, Any]:
        body = {
            "properties": {"title": title, "locale": locale},
            "sheets": [{"properties": {"title": sheet_title}}],
        }
        return await self._make_request("POST", f"{SHEETS_API_BASE}/spreadsheets", json_data=body)
