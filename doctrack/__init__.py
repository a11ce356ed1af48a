"""Insert tracking relationships and edit metadata in Office Open XML packages."""

from .editor import insert_template_relationship, insert_tracking_relationship
from .inspector import list_external_relationships
from .metadata import apply_metadata
from .workflow import EditConfig, apply_edits, open_package

__version__ = "0.1.0"

__all__ = [
    "EditConfig",
    "apply_edits",
    "apply_metadata",
    "insert_template_relationship",
    "insert_tracking_relationship",
    "list_external_relationships",
    "open_package",
]
