"""Lightweight structural checks for Office packages."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ...errors import DoctrackError
from ...utilities import XMLEditor


class BaseValidator:
    """Basic structural checks for a cloned package."""

    required_files: Iterable[str] = ("[Content_Types].xml", "_rels/.rels")
    main_content_types: Tuple[str, ...] = ()

    def __init__(self, package, verbose: bool = False):
        self.package = package
        self.verbose = verbose
        self.errors: List[str] = []

    def validate(self) -> bool:
        self.errors = []
        if not self._check_required_files(self.required_files):
            return False
        main = self._check_main_part()
        if main is None:
            return False
        return self._parse_xml_files(list(self.required_files) + [main.lstrip("/")])

    def _report(self, message: str) -> None:
        self.errors.append(message)
        if self.verbose:
            print(message)

    def _check_required_files(self, rel_paths: Iterable[str]) -> bool:
        present = {name.lower() for name in self.package.entry_names()}
        missing = [p for p in rel_paths if p.lower() not in present]
        if missing:
            self._report(f"Missing required files: {missing}")
            return False
        return True

    def _check_main_part(self) -> Optional[str]:
        main = self.package.main_partname
        if main is None:
            self._report("Package has no officeDocument relationship to an existing part")
            return None
        content_type = self.package.content_types.content_type_for(main)
        if self.main_content_types and content_type not in self.main_content_types:
            self._report(f"Unexpected content type for {main}: {content_type}")
            return None
        return main

    def _parse_xml_files(self, rel_paths: Iterable[str]) -> bool:
        for rel_path in rel_paths:
            if not rel_path.endswith((".xml", ".rels")):
                continue
            blob = self.package.read(rel_path)
            if blob is None:
                continue
            try:
                XMLEditor(blob, rel_path)
            except DoctrackError as exc:
                self._report(str(exc))
                return False
        return True
