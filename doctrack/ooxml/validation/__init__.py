"""Validator exports for lightweight package checks."""

from .base import BaseValidator
from .document import DocumentValidator
from .workbook import WorkbookValidator

VALIDATORS = {
    "document": DocumentValidator,
    "workbook": WorkbookValidator,
}


def validator_for(family):
    return VALIDATORS[family.name]


__all__ = [
    "BaseValidator",
    "DocumentValidator",
    "WorkbookValidator",
    "validator_for",
]
