"""Spreadsheet package validation (structure + XML well-formedness)."""

from __future__ import annotations

from ...families import WORKBOOK
from .base import BaseValidator


class WorkbookValidator(BaseValidator):
    main_content_types = tuple(sorted(WORKBOOK.main_content_types))
