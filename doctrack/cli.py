#!/usr/bin/env python3
"""
Insert tracking URLs into Office Open XML documents, attach remote
templates, edit core metadata, and inspect external targets.
"""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path
from typing import List, Optional

from .errors import ConfigurationError, MetadataWarning, format_error, format_warnings
from .families import family_for_type, format_type_table
from .inspector import format_report
from .workflow import EditConfig, apply_edits, load_metadata, open_package, validate_output

HEADING = "Tool to manipulate and insert tracking pixels into Office Open XML documents."


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        print(f"[Error] {message}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="doctrack", description=HEADING)
    parser.add_argument("-i", "--input", help="Input filename.")
    parser.add_argument("-o", "--output", help="Output filename.")
    parser.add_argument("-m", "--metadata", help="Metadata to supply (json file).")
    parser.add_argument("-u", "--url", help="URL to insert.")
    parser.add_argument(
        "-e", "--template", action="store_true", help="If set, enables template URL injection."
    )
    parser.add_argument("-t", "--type", help="Document type, see --list-types.")
    parser.add_argument(
        "-l", "--list-types", action="store_true", help="Lists available document types."
    )
    parser.add_argument("-s", "--inspect", action="store_true", help="Inspect external targets.")
    parser.add_argument(
        "--validate", action="store_true", help="Check the saved output and delete it if invalid."
    )
    return parser


def run(args: argparse.Namespace) -> int:
    if args.list_types:
        sys.stdout.write(format_type_table())
        return 0

    if not args.input:
        raise ConfigurationError("Specify -i, --input.")
    if not args.type:
        raise ConfigurationError(
            "Specify -t, --type. Just use either Document or Workbook if you want to insert URLs."
        )
    family = family_for_type(args.type)
    if not args.inspect and not args.output:
        raise ConfigurationError("Specify -o, --output.")

    package = open_package(args.input, family)
    if args.inspect:
        print(format_report(package))
        return 0

    config = EditConfig(
        metadata=load_metadata(args.metadata) if args.metadata else None,
        url=args.url,
        template=args.template,
    )
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", MetadataWarning)
        apply_edits(config, package)
    for line in format_warnings(w.message for w in caught):
        print(line, file=sys.stderr)

    output_path = package.save(args.output)

    if args.validate:
        problems = validate_output(output_path, family)
        if problems:
            Path(output_path).unlink(missing_ok=True)
            for problem in problems:
                print(f"Validation error: {problem}", file=sys.stderr)
            print("[Error] Output failed validation and was removed.", file=sys.stderr)
            return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except Exception as exc:
        print(format_error(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
