#!/usr/bin/env python3
"""
po2json - PO to JSON message catalog converter

Converts GNU gettext .po files into JSON objects of the form
`{"<key><index>": {"message": "..."}}`, with keys restricted to lowercase
ASCII letters, digits and `_<code point>_` escapes.

Commands:
    convert  - Convert a .po file to .json
    inspect  - Parse a .po file and report statistics and problems

Example:
    po2json convert --input messages.po --flag-unreviewed
    po2json convert --input messages.po --minify --stdout
    po2json inspect --input messages.po
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import find_config
from .converter import Converter, ConversionReport, LINE_ENDING_NAMES
from .parser import CatalogParser, detect_line_ending, validate_content

logger = logging.getLogger(__name__)


def _read_input(path_arg: str, encoding: str = "utf-8"):
    """Read the input file, returning (text, None) or (None, error dict)."""
    input_path = Path(path_arg)

    if not input_path.exists():
        return None, {
            "status": "error",
            "error_type": "FILE_NOT_FOUND",
            "error": f"Input file not found: {path_arg}",
            "suggestion": "Check the path passed to --input",
        }

    try:
        # Decode bytes directly so CRLF/CR line endings survive
        text = input_path.read_bytes().decode(encoding)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        return None, {
            "status": "error",
            "error_type": "FILE_READ_ERROR",
            "error": f"Cannot read input file: {e}",
            "suggestion": "Ensure the file is readable and use --encoding for non UTF-8 catalogs",
        }

    if not text.strip():
        return None, {
            "status": "error",
            "error_type": "EMPTY_FILE",
            "error": f"Input file is empty: {path_arg}",
            "suggestion": "File must contain msgid/msgstr entries",
        }

    return text, None


def cmd_convert(args) -> dict:
    """Convert a PO file to JSON."""
    options = find_config(args.input, args.config)
    options = options.merge_flags(
        minify=args.minify,
        expand_for_display=args.expand,
        flag_unreviewed=args.flag_unreviewed,
    )
    encoding = args.encoding or options.encoding

    text, error = _read_input(args.input, encoding)
    if error:
        return error

    converter = Converter(
        minify=options.minify,
        expand_for_display=options.expand_for_display,
        flag_unreviewed=options.flag_unreviewed,
    )
    output = converter.convert(text)
    report: ConversionReport = converter.report

    result = {
        "status": "ok",
        "stats": report.to_dict(),
        "options": {
            "minify": options.minify,
            "expand_for_display": options.expand_for_display,
            "flag_unreviewed": options.flag_unreviewed,
        },
    }

    if args.stdout:
        result["output"] = output
        result["summary"] = f"Converted {report.fragments} entries from {Path(args.input).name}"
        return result

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else input_path.with_suffix(options.output_suffix)
    # Keep the input's own line endings
    output_path.write_bytes(output.encode(encoding))
    logger.info("Wrote %s", output_path)

    result["output_file"] = str(output_path)
    result["summary"] = (
        f"Converted {report.fragments} entries from {report.messages} messages. "
        f"Output written to {output_path.name}"
    )
    return result


def cmd_inspect(args) -> dict:
    """Parse a PO file and report what the conversion would see."""
    text, error = _read_input(args.input, args.encoding or "utf-8")
    if error:
        return error

    line_ending = detect_line_ending(text)
    parser = CatalogParser()
    catalog = parser.parse(text, line_ending)

    plural = sum(1 for m in catalog if len(m.translations) > 1)
    with_context = sum(1 for m in catalog if m.context)
    fuzzy = sum(1 for m in catalog if m.needs_review)
    untranslated = sum(1 for m in catalog if any(not t for t in m.translations))
    problems = validate_content(text)

    return {
        "status": "ok" if not problems and not parser.diagnostics else "warning",
        "stats": {
            "messages": len(catalog),
            "entries": sum(len(m.translations) for m in catalog),
            "plural": plural,
            "with_context": with_context,
            "fuzzy": fuzzy,
            "untranslated": untranslated,
            "line_ending": LINE_ENDING_NAMES[line_ending],
        },
        "diagnostics": [d.to_dict() for d in parser.diagnostics],
        "validation_errors": problems,
        "summary": (
            f"{len(catalog)} messages, {fuzzy} fuzzy, {untranslated} untranslated. "
            f"{len(parser.diagnostics) + len(problems)} problem(s) found."
        ),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="po2json",
        description="po2json - PO to JSON message catalog converter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert next to the input (messages.po -> messages.json)
  po2json convert --input messages.po

  # Minified output printed inside the status JSON
  po2json convert --input messages.po --minify --stdout

  # Mark fuzzy/untranslated strings and pad values for layout testing
  po2json convert --input messages.po --flag-unreviewed --expand

  # Report statistics and problems without writing anything
  po2json inspect --input messages.po

Config file (.po2json.yaml next to the input, or --config):
  minify: false
  expand_for_display: false
  flag_unreviewed: true
  encoding: utf-8
  output_suffix: .json
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # convert command
    convert_parser = subparsers.add_parser("convert", help="Convert a .po file to .json")
    convert_parser.add_argument("--input", "-i", required=True, help="Input .po file")
    convert_parser.add_argument("--output", "-o", help="Output file (default: input name with .json)")
    convert_parser.add_argument("--minify", "-m", action="store_true", help="Minify output")
    convert_parser.add_argument("--expand", "-e", action="store_true",
                                help="Pad values with hyphens to simulate longer translations")
    convert_parser.add_argument("--flag-unreviewed", "-r", action="store_true",
                                help="Wrap fuzzy and untranslated values in '# ... #'")
    convert_parser.add_argument("--stdout", action="store_true", help="Return output instead of writing a file")
    convert_parser.add_argument("--encoding", help="Input/output encoding (default: utf-8)")
    convert_parser.add_argument("--config", "-c", help="YAML config file with default options")

    # inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Report statistics and problems of a .po file")
    inspect_parser.add_argument("--input", "-i", required=True, help="Input .po file")
    inspect_parser.add_argument("--encoding", help="Input encoding (default: utf-8)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "convert":
            result = cmd_convert(args)
        elif args.command == "inspect":
            result = cmd_inspect(args)
        print(json.dumps(result, indent=2, ensure_ascii=False))
    except Exception as e:
        print(json.dumps({
            "status": "error",
            "error": str(e),
            "error_type": type(e).__name__,
        }), file=sys.stderr)
        sys.exit(1)

    if result.get("status") == "error":
        sys.exit(1)


if __name__ == "__main__":
    main()
