"""Spreadsheet readers that turn uploaded files into header -> value rows.

``.csv`` files go through :mod:`csv`; ``.xlsx`` workbooks are read with
openpyxl in read-only, cached-values mode so formulas are never evaluated.
"""

from __future__ import annotations

import csv
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

SPREADSHEET_EXTENSIONS: tuple[str, ...] = ("csv", "xlsx")


class SpreadsheetReadError(Exception):
    """Raised when an uploaded spreadsheet cannot be read."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{Path(path).name}: {message}")
        self.path = Path(path)


def _header_names(raw_headers: Sequence[Any]) -> List[str]:
    """Trim headers, name blank ones by position, and suffix repeats (Remarks, Remarks_1)."""
    names: List[str] = []
    seen: Dict[str, int] = {}
    for index, raw in enumerate(raw_headers, start=1):
        header = "" if raw is None else str(raw).strip().lstrip("\ufeff")
        if not header:
            header = f"Column {index}"
        if header in seen:
            seen[header] += 1
            header = f"{header}_{seen[header]}"
        else:
            seen[header] = 0
        names.append(header)
    return names


def _row_is_blank(values: Iterable[Any]) -> bool:
    return all(value is None or (isinstance(value, str) and value.strip() == "") for value in values)


def _rows_from_matrix(matrix: Iterable[Sequence[Any]], header_row: int) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    headers: Optional[List[str]] = None
    for line_number, values in enumerate(matrix, start=1):
        if line_number < header_row:
            continue
        if headers is None:
            headers = _header_names(values)
            continue
        values = list(values)
        if _row_is_blank(values):
            continue
        if len(values) < len(headers):
            values.extend([None] * (len(headers) - len(values)))
        rows.append({header: values[index] for index, header in enumerate(headers)})
    return rows


def read_csv_rows(path: Path | str, *, header_row: int = 1, encoding: str = "utf-8-sig") -> List[Dict[str, Any]]:
    path = Path(path)
    try:
        with path.open("r", encoding=encoding, newline="") as handle:
            return _rows_from_matrix(csv.reader(handle), header_row)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise SpreadsheetReadError(path, f"could not read CSV ({exc})") from exc


def read_xlsx_rows(path: Path | str, *, header_row: int = 1, sheet: Optional[str] = None) -> List[Dict[str, Any]]:
    path = Path(path)
    try:
        workbook = load_workbook(path, data_only=True, read_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise SpreadsheetReadError(path, f"could not open workbook ({exc})") from exc

    try:
        if sheet is not None:
            if sheet not in workbook.sheetnames:
                raise SpreadsheetReadError(path, f"sheet '{sheet}' not found")
            worksheet = workbook[sheet]
        else:
            worksheet = workbook.worksheets[0]
        return _rows_from_matrix(worksheet.iter_rows(values_only=True), header_row)
    finally:
        workbook.close()


def read_rows(
    path: Path | str,
    *,
    header_row: int = 1,
    sheet: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Read ``path`` into a list of ``{header: cell}`` rows, skipping fully blank lines."""
    path = Path(path)
    if header_row < 1:
        raise SpreadsheetReadError(path, "header row must be 1 or greater")
    extension = path.suffix.lower().lstrip(".")
    if extension == "csv":
        return read_csv_rows(path, header_row=header_row)
    if extension == "xlsx":
        return read_xlsx_rows(path, header_row=header_row, sheet=sheet)
    raise SpreadsheetReadError(path, f"unsupported file type '.{extension}' (expected .csv or .xlsx)")
