"""Shared pytest fixtures for gdrive-mcp tests.

This module provides reusable fixtures for token storage, OAuth, and an
in-memory stand-in for the Drive/Sheets API.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from gdrive_mcp.auth.models import OAuthToken, StoredToken, TokenMetadata

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer credentials out of tests."""
    for name in (
        "GDRIVE_CREDENTIALS_PATH",
        "GDRIVE_OAUTH_PATH",
        "GOOGLE_OAUTH_CLIENT_ID",
        "GOOGLE_OAUTH_CLIENT_SECRET",
        "GOOGLE_OAUTH_REDIRECT_URI",
        "GDRIVE_MCP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def valid_token() -> OAuthToken:
    """Create a valid, non-expired OAuth token."""
    return OAuthToken(
        access_token="test_access_token_abc123",
        refresh_token="test_refresh_token_xyz789",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scopes=[
            "https://www.googleapis.com/auth/drive",
            "https://www.googleapis.com/auth/spreadsheets",
        ],
        token_type="Bearer",
    )


@pytest.fixture
def expired_token() -> OAuthToken:
    """Create an expired OAuth token."""
    return OAuthToken(
        access_token="expired_access_token",
        refresh_token="test_refresh_token",
        expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        scopes=["https://www.googleapis.com/auth/drive"],
        token_type="Bearer",
    )


@pytest.fixture
def token_metadata() -> TokenMetadata:
    """Create token metadata for testing."""
    return TokenMetadata(
        service_name="gdrive-mcp",
        provider="google",
        created_at=datetime.now(timezone.utc) - timedelta(days=1),
    )


@pytest.fixture
def stored_token(valid_token: OAuthToken, token_metadata: TokenMetadata) -> StoredToken:
    """Create a complete stored token for testing."""
    return StoredToken(version=1, metadata=token_metadata, token=valid_token)


# =============================================================================
# Token Storage / OAuth Fixtures
# =============================================================================


@pytest.fixture
def temp_token_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for token storage tests."""
    token_dir = tmp_path / ".gdrive-mcp"
    token_dir.mkdir(parents=True, mode=0o700)
    return token_dir


@pytest.fixture
def temp_token_path(temp_token_dir: Path) -> Path:
    """Get the path for a temporary tokens.json file."""
    return temp_token_dir / "tokens.json"


@pytest.fixture
def token_storage(temp_token_path: Path):
    """Create a TokenStorage instance with temporary storage."""
    from gdrive_mcp.auth.token_storage import TokenStorage

    return TokenStorage(token_path=temp_token_path)


@pytest.fixture
def oauth_manager(token_storage):
    """Create an OAuthManager with temporary storage and test client credentials."""
    from gdrive_mcp.auth.oauth_manager import OAuthManager

    return OAuthManager(
        storage=token_storage,
        client_id="test_client_id",
        client_secret="test_client_secret",  # pragma: allowlist secret
    )


@pytest.fixture
def mock_google_credentials() -> MagicMock:
    """Create a mock Google OAuth2 Credentials object."""
    mock_creds = MagicMock()
    mock_creds.token = "mock_access_token"
    mock_creds.refresh_token = "mock_refresh_token"
    mock_creds.expiry = datetime.now(timezone.utc) + timedelta(hours=1)
    mock_creds.expired = False
    mock_creds.valid = True
    mock_creds.scopes = ["https://www.googleapis.com/auth/drive"]
    return mock_creds


# =============================================================================
# In-memory Drive/Sheets API
# =============================================================================


class FakeWorkspaceAPI:
    """In-memory WorkspaceAPI that records every call.

    Attributes:
        calls: (method name, kwargs) for every call, in order.
        files: Drive files as {"id", "name", "mimeType"} dicts.
        contents: Raw bytes per file ID (downloads and exports).
        spreadsheets: Spreadsheet metadata per ID.
        values: Cell rows per (spreadsheet ID, range).
        failures: Method name -> exception raised when it is called.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.files: list[dict[str, Any]] = []
        self.contents: dict[str, bytes] = {}
        self.spreadsheets: dict[str, dict[str, Any]] = {}
        self.values: dict[tuple[str, str], list[list[Any]]] = {}
        self.failures: dict[str, Exception] = {}
        self.next_page_token: str | None = None
        self.created_spreadsheet: dict[str, Any] = {
            "spreadsheetId": "new_sheet_id",
            "properties": {"title": "Untitled"},
        }

    def _record(self, method: str, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))
        if method in self.failures:
            raise self.failures[method]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def list_files(
        self,
        query: str | None = None,
        page_size: int = 10,
        fields: str | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        self._record(
            "list_files", query=query, page_size=page_size, fields=fields, page_token=page_token
        )
        files = self.files
        if query and query.startswith("name = '"):
            # name = '<name>'[ and mimeType = '<type>']
            wanted = query[len("name = '") :].split("'", 1)[0]
            files = [f for f in files if f["name"] == wanted]
            if " and mimeType = '" in query:
                mime = query.split(" and mimeType = '", 1)[1].rstrip("'")
                files = [f for f in files if f["mimeType"] == mime]
        result: dict[str, Any] = {"files": files[:page_size]}
        if self.next_page_token:
            result["nextPageToken"] = self.next_page_token
        return result

    async def get_file_metadata(self, file_id: str, fields: str = "id,name,mimeType") -> dict[str, Any]:
        self._record("get_file_metadata", file_id=file_id, fields=fields)
        for f in self.files:
            if f["id"] == file_id:
                return dict(f)
        raise RuntimeError(f"File not found: {file_id}")

    async def export_file(self, file_id: str, mime_type: str) -> bytes:
        self._record("export_file", file_id=file_id, mime_type=mime_type)
        return self.contents[file_id]

    async def download_file(self, file_id: str) -> bytes:
        self._record("download_file", file_id=file_id)
        return self.contents[file_id]

    async def create_file(self, name: str, mime_type: str) -> dict[str, Any]:
        self._record("create_file", name=name, mime_type=mime_type)
        return {"id": "created_file_id", "name": name}

    async def delete_file(self, file_id: str) -> None:
        self._record("delete_file", file_id=file_id)

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        self._record("get_spreadsheet", spreadsheet_id=spreadsheet_id)
        if spreadsheet_id not in self.spreadsheets:
            raise RuntimeError(f"Requested entity was not found: {spreadsheet_id}")
        return self.spreadsheets[spreadsheet_id]

    async def get_values(self, spreadsheet_id: str, cell_range: str) -> list[list[Any]]:
        self._record("get_values", spreadsheet_id=spreadsheet_id, cell_range=cell_range)
        return self.values.get((spreadsheet_id, cell_range), [])

    async def update_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[Any]]
    ) -> dict[str, Any]:
        self._record(
            "update_values", spreadsheet_id=spreadsheet_id, cell_range=cell_range, values=values
        )
        return {"updatedRange": cell_range}

    async def append_values(
        self, spreadsheet_id: str, cell_range: str, values: list[list[Any]]
    ) -> dict[str, Any]:
        self._record(
            "append_values", spreadsheet_id=spreadsheet_id, cell_range=cell_range, values=values
        )
        return {"updates": {"updatedRange": cell_range}}

    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        self._record("batch_update", spreadsheet_id=spreadsheet_id, requests=requests)
        return {"spreadsheetId": spreadsheet_id, "replies": [{}]}

    async def create_spreadsheet(
        self, title: str, sheet_title: str = "Sheet1", locale: str = "en_US"
    ) -> dict[str, Any]:
        self._record("create_spreadsheet", title=title, sheet_title=sheet_title, locale=locale)
        return self.created_spreadsheet


@pytest.fixture
def fake_api() -> FakeWorkspaceAPI:
    """Create an empty in-memory Drive/Sheets API."""
    return FakeWorkspaceAPI()


@pytest.fixture
def budget_api(fake_api: FakeWorkspaceAPI) -> FakeWorkspaceAPI:
    """In-memory API holding one "Budget" spreadsheet with a contact table."""
    fake_api.files = [
        {
            "id": "sheet_budget",
            "name": "Budget",
            "mimeType": "application/vnd.google-apps.spreadsheet",
        },
        {"id": "doc_notes", "name": "Notes", "mimeType": "application/vnd.google-apps.document"},
    ]
    fake_api.spreadsheets["sheet_budget"] = {
        "spreadsheetId": "sheet_budget",
        "sheets": [
            {"properties": {"sheetId": 0, "title": "Sheet1", "index": 0}},
            {"properties": {"sheetId": 1234, "title": "Archive", "index": 1}},
        ],
    }
    fake_api.values[("sheet_budget", "Sheet1!A1:Z20")] = [
        ["Name", "Email", "Phone Number"],
        ["Ana", "ana@example.com", "555-0100"],
        ["Bruno", "bruno@example.com"],
    ]
    return fake_api


# =============================================================================
# CLI Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
