"""Word-processing package validation (structure + XML well-formedness)."""

from __future__ import annotations

from ...families import DOCUMENT
from .base import BaseValidator


class DocumentValidator(BaseValidator):
    main_content_types = tuple(sorted(DOCUMENT.main_content_types))
