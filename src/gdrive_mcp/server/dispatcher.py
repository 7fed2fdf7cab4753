"""Tool call dispatch for the Drive/Sheets MCP server.

Every call returns a CallToolResult. Errors detected locally (missing
arguments, unknown titles, unknown tools) and faults raised by the remote
API are all turned into an isError result with a single diagnostic line.
"""

import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

from mcp.types import CallToolResult, TextContent

from gdrive_mcp.api.base import WorkspaceAPI
from gdrive_mcp.server.errors import (
    NotFoundError,
    PreconditionError,
    ToolError,
    UnknownToolError,
    describe_error,
)
from gdrive_mcp.server.resolver import (
    SpreadsheetResolver,
    escape_query_literal,
    find_file_id_by_name,
)
from gdrive_mcp.server.tools import ToolName

logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE = 10
SEARCH_FIELDS = "files(id, name, mimeType, modifiedTime, size)"

DEFAULT_READ_CELLS = "A1:Z20"
DEFAULT_LOCALE = "en_US"
DEFAULT_SHEET_TITLE = "Sheet1"

# Sheet titles that can appear unquoted in A1 notation
_PLAIN_SHEET_TITLE = re.compile(r"^[A-Za-z0-9_]+$")

ToolHandler = Callable[[dict[str, Any]], Awaitable[str]]


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    """Build a single-item text CallToolResult."""
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def a1_range(sheet_title: str, cells: str) -> str:
    """Qualify a cell block with a sheet title, quoting the title if needed."""
    if _PLAIN_SHEET_TITLE.match(sheet_title):
        return f"{sheet_title}!{cells}"
    escaped = sheet_title.replace("'", "''")
    return f"'{escaped}'!{cells}"


def _optional_str(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise PreconditionError(f'Argument "{key}" must be a string.')
    return value


def _require_str(arguments: dict[str, Any], key: str) -> str:
    value = _optional_str(arguments, key)
    if value is None:
        raise PreconditionError(f'Missing required argument "{key}".')
    return value


def _require_row_index(arguments: dict[str, Any]) -> int:
    value = arguments.get("rowIndex")
    if value is None or isinstance(value, bool):
        raise PreconditionError('Missing required argument "rowIndex".')
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise PreconditionError('Argument "rowIndex" must be a whole number.')
    if value < 0:
        raise PreconditionError('Argument "rowIndex" must be zero or greater.')
    return value


def _require_row(arguments: dict[str, Any]) -> list[Any]:
    """Validate `values` as exactly one row of cell values."""
    values = arguments.get("values")
    if not isinstance(values, list) or not values:
        raise PreconditionError('Argument "values" must be a non-empty list of cell values.')
    if any(isinstance(cell, (list, dict)) for cell in values):
        raise PreconditionError('Argument "values" must be a single row of cell values.')
    return values


def _spreadsheet_ref(arguments: dict[str, Any]) -> str:
    """Describe the spreadsheet an invocation targets, for diagnostics."""
    if arguments.get("spreadsheetId"):
        return str(arguments["spreadsheetId"])
    if arguments.get("title"):
        return f'"{arguments["title"]}"'
    return "(unspecified)"


def _cell_text(cell: Any) -> str:
    return "" if cell is None else str(cell)


class ToolDispatcher:
    """Routes tool calls to handlers and normalizes their outcome.

    Attributes:
        api: Remote Drive/Sheets capability.
        resolver: Spreadsheet title/ID resolver.
    """

    def __init__(self, api: WorkspaceAPI, resolver: SpreadsheetResolver | None = None) -> None:
        self.api = api
        self.resolver = resolver or SpreadsheetResolver(api)
        self._handlers: dict[ToolName, ToolHandler] = {
            ToolName.SEARCH: self._search,
            ToolName.READ_SHEETS: self._read_sheets,
            ToolName.UPDATE_GOOGLE_SHEET_RANGE: self._update_sheet_range,
            ToolName.APPEND_GOOGLE_SHEET_ROW: self._append_sheet_row,
            ToolName.DELETE_GOOGLE_SHEET_ROW: self._delete_sheet_row,
            ToolName.CREATE_GOOGLE_SHEET: self._create_sheet,
            ToolName.DELETE_GOOGLE_DRIVE_FILE: self._delete_drive_file,
        }

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Run a tool and return its result.

        Args:
            name: Tool name.
            arguments: Untyped tool arguments.

        Returns:
            CallToolResult; isError is set on any failure.
        """
        try:
            tool = ToolName(name)
        except ValueError:
            logger.warning("Unknown tool requested: %s", name)
            return text_result(str(UnknownToolError(name)), is_error=True)

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return text_result("Tool arguments must be an object.", is_error=True)

        handler = self._handlers[tool]
        try:
            text = await handler(arguments)
        except ToolError as e:
            logger.info("Tool %s failed: %s", name, e)
            return text_result(str(e), is_error=True)
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return text_result(
                f"{self._failure_context(tool, arguments)}: {describe_error(e)}",
                is_error=True,
            )

        return text_result(text)

    def _failure_context(self, tool: ToolName, arguments: dict[str, Any]) -> str:
        """Name the attempted operation and its target."""
        ref = _spreadsheet_ref(arguments)
        if tool == ToolName.SEARCH:
            return f'Error searching files for "{arguments.get("query")}"'
        if tool == ToolName.READ_SHEETS:
            cell_range = arguments.get("range")
            suffix = f' range "{cell_range}"' if cell_range else ""
            return f"Error reading spreadsheet {ref}{suffix}"
        if tool == ToolName.UPDATE_GOOGLE_SHEET_RANGE:
            return f'Error updating range "{arguments.get("range")}" in spreadsheet {ref}'
        if tool == ToolName.APPEND_GOOGLE_SHEET_ROW:
            return f'Error appending row at "{arguments.get("range")}" in spreadsheet {ref}'
        if tool == ToolName.DELETE_GOOGLE_SHEET_ROW:
            return (
                f'Error deleting row {arguments.get("rowIndex")} from tab '
                f'"{arguments.get("sheetName")}" in spreadsheet {ref}'
            )
        if tool == ToolName.CREATE_GOOGLE_SHEET:
            return f'Error creating spreadsheet "{arguments.get("title")}"'
        target = arguments.get("fileId") or f'"{arguments.get("name")}"'
        return f"Error deleting file {target}"

    async def _resolve_spreadsheet(self, arguments: dict[str, Any]) -> str:
        return await self.resolver.resolve(
            title=_optional_str(arguments, "title"),
            spreadsheet_id=_optional_str(arguments, "spreadsheetId"),
        )

    async def _search(self, arguments: dict[str, Any]) -> str:
        query = _require_str(arguments, "query")
        predicate = f"fullText contains '{escape_query_literal(query)}'"

        response = await self.api.list_files(
            query=predicate, page_size=SEARCH_PAGE_SIZE, fields=SEARCH_FIELDS
        )
        files = response.get("files") or []

        lines = [f"Found {len(files)} files:"]
        lines.extend(f"{item.get('name')} ({item.get('mimeType')})" for item in files)
        return "\n".join(lines)

    async def _read_sheets(self, arguments: dict[str, Any]) -> str:
        column_name = _optional_str(arguments, "columnName")
        cell_range = _optional_str(arguments, "range")
        spreadsheet_id = await self._resolve_spreadsheet(arguments)

        if cell_range is None:
            metadata = await self.api.get_spreadsheet(spreadsheet_id)
            sheets = metadata.get("sheets") or []
            if not sheets:
                raise NotFoundError(
                    f"Spreadsheet {_spreadsheet_ref(arguments)} has no sheets to read."
                )
            first_title = sheets[0].get("properties", {}).get("title")
            if not first_title:
                raise NotFoundError(
                    f"First sheet of spreadsheet {_spreadsheet_ref(arguments)} has no title."
                )
            cell_range = a1_range(first_title, DEFAULT_READ_CELLS)

        rows = await self.api.get_values(spreadsheet_id, cell_range)
        if not rows:
            return "The worksheet is empty or the range did not return data."

        if column_name is not None:
            headers = [_cell_text(cell) for cell in rows[0]]
            if column_name not in headers:
                raise NotFoundError(
                    f'Column "{column_name}" not found in spreadsheet '
                    f"{_spreadsheet_ref(arguments)}."
                )
            index = headers.index(column_name)
            # Data rows start on sheet row 2, below the header
            lines = [
                f"{i}: {_cell_text(row[index]) if index < len(row) else ''}"
                for i, row in enumerate(rows[1:], start=2)
            ]
            formatted = f'Column "{column_name}":\n' + "\n".join(lines)
        else:
            formatted = "\n".join(
                f"{i}: {' | '.join(_cell_text(cell) for cell in row)}"
                for i, row in enumerate(rows, start=1)
            )

        return f"Spreadsheet content ({cell_range}):\n\n{formatted}"

    async def _update_sheet_range(self, arguments: dict[str, Any]) -> str:
        cell_range = _require_str(arguments, "range")
        row = _require_row(arguments)
        spreadsheet_id = await self._resolve_spreadsheet(arguments)

        await self.api.update_values(spreadsheet_id, cell_range, [row])
        return f'Range "{cell_range}" successfully updated in spreadsheet.'

    async def _append_sheet_row(self, arguments: dict[str, Any]) -> str:
        cell_range = _require_str(arguments, "range")
        row = _require_row(arguments)
        spreadsheet_id = await self._resolve_spreadsheet(arguments)

        await self.api.append_values(spreadsheet_id, cell_range, [row])
        return f'Row successfully added to worksheet in range "{cell_range}".'

    async def _delete_sheet_row(self, arguments: dict[str, Any]) -> str:
        sheet_name = _require_str(arguments, "sheetName")
        row_index = _require_row_index(arguments)
        spreadsheet_id = await self._resolve_spreadsheet(arguments)

        metadata = await self.api.get_spreadsheet(spreadsheet_id)
        sheet_id = None
        for sheet in metadata.get("sheets") or []:
            props = sheet.get("properties", {})
            if props.get("title") == sheet_name:
                sheet_id = props.get("sheetId")
                break

        if sheet_id is None:
            raise NotFoundError(
                f'Tab "{sheet_name}" not found in spreadsheet {_spreadsheet_ref(arguments)}.'
            )

        await self.api.batch_update(
            spreadsheet_id,
            [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": row_index,
                            "endIndex": row_index + 1,
                        }
                    }
                }
            ],
        )
        return f'Row {row_index + 1} removed from tab "{sheet_name}".'

    async def _create_sheet(self, arguments: dict[str, Any]) -> str:
        title = _require_str(arguments, "title")

        response = await self.api.create_spreadsheet(
            title, sheet_title=DEFAULT_SHEET_TITLE, locale=DEFAULT_LOCALE
        )
        created_title = response.get("properties", {}).get("title", title)
        return (
            f'Spreadsheet "{created_title}" created successfully! '
            f'ID: {response.get("spreadsheetId")}'
        )

    async def _delete_drive_file(self, arguments: dict[str, Any]) -> str:
        file_id = _optional_str(arguments, "fileId")
        name = _optional_str(arguments, "name")

        if file_id is None and name is not None:
            file_id = await find_file_id_by_name(self.api, name)
            if file_id is None:
                raise NotFoundError(f'File named "{name}" not found.')

        if file_id is None:
            raise PreconditionError("You must provide the fileId or file name.")

        await self.api.delete_file(file_id)
        return f"File deleted successfully! ID: {file_id}"
