"""
Spreadsheet parsing — turns an uploaded file into header-keyed rows.

Supports delimited text (.csv) and tabular binary workbooks (.xlsx via
openpyxl, .xls via xlrd).  Only the first sheet of a workbook is read
and the first row is always the header.

Every cell value is returned as a string; blank cells are omitted from
the row and rows with no values at all are dropped.
"""

from __future__ import annotations

import csv
import io
import os
from datetime import date, datetime
from typing import Any

import xlrd
from openpyxl import load_workbook

from heartsmiles.core.constants import EXTENSION_FORMATS, FileFormat
from heartsmiles.core.logging import get_logger
from heartsmiles.pipeline.errors import ParseError, UnsupportedFormatError

logger = get_logger(__name__)

Row = dict[str, str]


# ═══════════════════════════════════════════════════════════
#  Sheet Adapters — uniform interface over xlrd / openpyxl
# ═══════════════════════════════════════════════════════════

class XlrdSheetAdapter:
    """Adapter for xlrd sheets (0-based indexing)."""

    def __init__(self, workbook) -> None:
        self._wb = workbook
        self._s = workbook.sheet_by_index(0)
        self._datemode = workbook.datemode
        self.nrows = self._s.nrows
        self.ncols = self._s.ncols

    def raw_value(self, r: int, c: int) -> Any:
        cell = self._s.cell(r, c)
        if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            return None
        if cell.ctype == xlrd.XL_CELL_DATE:
            return xlrd.xldate_as_datetime(cell.value, self._datemode)
        if cell.ctype == xlrd.XL_CELL_BOOLEAN:
            return bool(cell.value)
        return cell.value if cell.value != "" else None

    def iter_rows(self):
        for r in range(self.nrows):
            yield [self.raw_value(r, c) for c in range(self.ncols)]

    def close(self) -> None:
        self._wb.release_resources()


class OpenpyxlSheetAdapter:
    """Adapter for openpyxl worksheets."""

    def __init__(self, workbook) -> None:
        self._wb = workbook
        self._ws = workbook.worksheets[0]

    def iter_rows(self):
        for values in self._ws.iter_rows(values_only=True):
            yield list(values)

    def close(self) -> None:
        self._wb.close()


def _load_sheet(path: str):
    """Load the first sheet of an XLS or XLSX workbook."""
    if path.lower().endswith(".xls"):
        return XlrdSheetAdapter(xlrd.open_workbook(path))

    return OpenpyxlSheetAdapter(load_workbook(path, read_only=True, data_only=True))


# ═══════════════════════════════════════════════════════════
#  Cell / header normalisation
# ═══════════════════════════════════════════════════════════

def _cell_text(value: Any) -> str | None:
    """Render a cell as text; None for blank cells."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet numbers come back as floats (12345 -> 12345.0)
        return str(int(value))
    text = str(value).strip()
    return text or None


def _header_names(header_cells: list[Any]) -> list[str]:
    """Turn the header row into unique column names."""
    names: list[str] = []
    seen: dict[str, int] = {}
    for index, cell in enumerate(header_cells):
        name = _cell_text(cell) or f"column_{index + 1}"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def _rows_from_matrix(matrix) -> list[Row]:
    iterator = iter(matrix)
    header_cells = next(iterator, None)
    if header_cells is None:
        return []
    headers = _header_names(header_cells)

    rows: list[Row] = []
    for cells in iterator:
        row: Row = {}
        for header, cell in zip(headers, cells):
            text = _cell_text(cell)
            if text is not None:
                row[header] = text
        if row:
            rows.append(row)
    return rows


# ═══════════════════════════════════════════════════════════
#  Format readers
# ═══════════════════════════════════════════════════════════

def _read_text(path: str) -> str:
    """Decode a delimited file as UTF-8, falling back to Windows-1252."""
    with open(path, "rb") as handle:
        raw = handle.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("UTF-8 decode failed, falling back to cp1252", path=os.path.basename(path))
        return raw.decode("cp1252", errors="replace")


def _parse_delimited(path: str) -> list[Row]:
    reader = csv.reader(io.StringIO(_read_text(path), newline=""))
    return _rows_from_matrix(reader)


def _parse_workbook(path: str) -> list[Row]:
    sheet = _load_sheet(path)
    try:
        return _rows_from_matrix(sheet.iter_rows())
    finally:
        sheet.close()


def parse_file(path: str) -> list[Row]:
    """
    Read `path` into a list of rows keyed by the header row.

    Raises:
        UnsupportedFormatError: extension is not .csv, .xlsx or .xls
        ParseError: the file exists but cannot be read as its format
    """
    extension = os.path.splitext(path)[1].lower()
    file_format = EXTENSION_FORMATS.get(extension)
    if file_format is None:
        raise UnsupportedFormatError(
            "Unsupported file format",
            details={"extension": extension},
        )

    if file_format == FileFormat.DELIMITED_TEXT:
        try:
            rows = _parse_delimited(path)
        except (OSError, csv.Error) as exc:
            raise ParseError(
                f"Error parsing CSV file: {exc}",
                details={"path": path},
            ) from exc
    else:
        try:
            rows = _parse_workbook(path)
        except Exception as exc:
            # xlrd/openpyxl/zipfile raise a wide range of types for corrupt input
            raise ParseError(
                f"Error parsing Excel file: {exc}",
                details={"path": path},
            ) from exc

    logger.info(
        "File parsed",
        path=os.path.basename(path),
        format=file_format.value,
        rows=len(rows),
    )
    return rows
