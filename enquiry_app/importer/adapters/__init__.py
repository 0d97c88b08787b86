"""File adapters feeding the enquiry import pipeline."""

from .spreadsheet import SPREADSHEET_EXTENSIONS, SpreadsheetReadError, read_rows

__all__ = ["SPREADSHEET_EXTENSIONS", "SpreadsheetReadError", "read_rows"]
