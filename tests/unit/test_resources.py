"""Unit tests for Drive resource listing and reading."""

import base64

import httpx
import pytest
from mcp.shared.exceptions import McpError
from mcp.types import BlobResourceContents, TextResourceContents

from gdrive_mcp.server.errors import PreconditionError
from gdrive_mcp.server.resources import (
    READ_ERROR_MARKER,
    READ_ERROR_MIME_TYPE,
    ResourceBrowser,
    file_id_from_uri,
    file_uri,
)


@pytest.mark.unit
class TestResourceUris:
    """Tests for gdrive:/// URI helpers."""

    def test_should_build_and_parse_uri(self) -> None:
        assert file_uri("abc123") == "gdrive:///abc123"
        assert file_id_from_uri("gdrive:///abc123") == "abc123"

    @pytest.mark.parametrize("uri", ["gdrive:///", "https://drive.google.com/x", "abc123"])
    def test_should_reject_foreign_uris(self, uri: str) -> None:
        with pytest.raises(PreconditionError):
            file_id_from_uri(uri)


@pytest.mark.unit
class TestListResources:
    """Tests for ResourceBrowser.list()."""

    @pytest.mark.asyncio
    async def test_should_list_first_page(self, budget_api) -> None:
        budget_api.next_page_token = "page-2"

        result = await ResourceBrowser(budget_api).list()

        assert [str(r.uri) for r in result.resources] == [
            "gdrive:///sheet_budget",
            "gdrive:///doc_notes",
        ]
        assert [r.name for r in result.resources] == ["Budget", "Notes"]
        assert result.resources[1].mimeType == "application/vnd.google-apps.document"
        assert result.nextCursor == "page-2"
        assert budget_api.calls[0][1]["page_size"] == 10
        assert budget_api.calls[0][1]["page_token"] is None

    @pytest.mark.asyncio
    async def test_should_pass_cursor_as_page_token(self, budget_api) -> None:
        result = await ResourceBrowser(budget_api).list("page-2")

        assert budget_api.calls[0][1]["page_token"] == "page-2"
        assert result.nextCursor is None

    @pytest.mark.asyncio
    async def test_should_return_empty_page(self, fake_api) -> None:
        result = await ResourceBrowser(fake_api).list()

        assert result.resources == []
        assert result.nextCursor is None

    @pytest.mark.asyncio
    async def test_should_raise_protocol_error_on_failure(self, fake_api) -> None:
        fake_api.failures["list_files"] = httpx.ConnectError("network down")

        with pytest.raises(McpError, match="network down"):
            await ResourceBrowser(fake_api).list()


@pytest.mark.unit
class TestReadResource:
    """Tests for ResourceBrowser.read()."""

    @pytest.mark.asyncio
    async def test_should_export_docs_as_markdown(self, budget_api) -> None:
        budget_api.contents["doc_notes"] = b"# Notes\n"

        result = await ResourceBrowser(budget_api).read("gdrive:///doc_notes")

        assert len(result.contents) == 1
        contents = result.contents[0]
        assert isinstance(contents, TextResourceContents)
        assert contents.mimeType == "text/markdown"
        assert contents.text == "# Notes\n"
        assert ("export_file", {"file_id": "doc_notes", "mime_type": "text/markdown"}) in (
            budget_api.calls
        )

    @pytest.mark.asyncio
    async def test_should_export_sheets_as_csv(self, budget_api) -> None:
        budget_api.contents["sheet_budget"] = b"Name,Email\nAna,ana@example.com\n"

        result = await ResourceBrowser(budget_api).read("gdrive:///sheet_budget")

        assert result.contents[0].mimeType == "text/csv"
        assert result.contents[0].text.startswith("Name,Email")

    @pytest.mark.asyncio
    async def test_should_export_drawings_as_png_blob(self, fake_api) -> None:
        """Verify drawings are the one native type exported as binary."""
        png = b"\x89PNG\r\n\x1a\n\x00\x00"
        fake_api.files = [
            {"id": "draw1", "name": "Diagram", "mimeType": "application/vnd.google-apps.drawing"}
        ]
        fake_api.contents["draw1"] = png

        result = await ResourceBrowser(fake_api).read("gdrive:///draw1")

        assert ("export_file", {"file_id": "draw1", "mime_type": "image/png"}) in fake_api.calls
        contents = result.contents[0]
        assert isinstance(contents, BlobResourceContents)
        assert contents.mimeType == "image/png"
        assert base64.b64decode(contents.blob) == png

    @pytest.mark.asyncio
    async def test_should_download_binary_as_blob(self, fake_api) -> None:
        fake_api.files = [{"id": "pdf1", "name": "Report.pdf", "mimeType": "application/pdf"}]
        fake_api.contents["pdf1"] = b"%PDF-1.7\x00\xff"

        result = await ResourceBrowser(fake_api).read("gdrive:///pdf1")

        contents = result.contents[0]
        assert isinstance(contents, BlobResourceContents)
        assert contents.mimeType == "application/pdf"
        assert base64.b64decode(contents.blob) == b"%PDF-1.7\x00\xff"
        assert "export_file" not in fake_api.call_names()

    @pytest.mark.asyncio
    async def test_should_download_plain_text_as_text(self, fake_api) -> None:
        fake_api.files = [{"id": "txt1", "name": "todo.txt", "mimeType": "text/plain"}]
        fake_api.contents["txt1"] = b"buy milk"

        result = await ResourceBrowser(fake_api).read("gdrive:///txt1")

        assert result.contents[0].text == "buy milk"

    @pytest.mark.asyncio
    async def test_should_describe_failure_as_text(self, fake_api) -> None:
        """Verify a missing file yields one diagnostic item rather than raising."""
        result = await ResourceBrowser(fake_api).read("gdrive:///missing")

        assert len(result.contents) == 1
        assert isinstance(result.contents[0], TextResourceContents)
        assert "missing" in result.contents[0].text

    @pytest.mark.asyncio
    async def test_should_mark_failed_read_apart_from_text_content(self, fake_api) -> None:
        """Verify a failed download of a text file is flagged as an error item."""
        fake_api.files = [{"id": "f", "name": "notes.txt", "mimeType": "text/plain"}]
        fake_api.failures["download_file"] = RuntimeError("permission denied")

        result = await ResourceBrowser(fake_api).read("gdrive:///f")

        contents = result.contents[0]
        assert contents.mimeType == READ_ERROR_MIME_TYPE
        assert contents.mimeType != "text/plain"
        assert contents.text == (
            f'{READ_ERROR_MARKER} Error reading "gdrive:///f": permission denied'
        )

    @pytest.mark.asyncio
    async def test_should_describe_bad_uri_without_remote_calls(self, fake_api) -> None:
        result = await ResourceBrowser(fake_api).read("https://example.com/file")

        assert "Not a Google Drive resource URI" in result.contents[0].text
        assert fake_api.calls == []
