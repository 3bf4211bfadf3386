#!/usr/bin/env python3
"""
PO to JSON conversion entry point.

Ties the parser and the message serializer together. Reading the PO file and
writing the JSON file is left to the caller (see cli.py).

Usage:
    from po2json import convert
    json_text = convert(po_text, minify=True)
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .message import OutputStyle
from .parser import CatalogParser, Diagnostic, detect_line_ending

logger = logging.getLogger(__name__)


LINE_ENDING_NAMES = {
    "\r\n": "CRLF",
    "\n": "LF",
    "\r": "CR",
}


@dataclass
class ConversionReport:
    """Summary of one conversion, handed to completion callbacks."""
    messages: int = 0
    fragments: int = 0
    unreviewed: int = 0
    line_ending: str = "\n"
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "messages": self.messages,
            "entries": self.fragments,
            "unreviewed": self.unreviewed,
            "line_ending": LINE_ENDING_NAMES.get(self.line_ending, repr(self.line_ending)),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class Converter:
    """
    Converts PO text to a JSON object string.

    Options are fixed per instance; every call parses with a fresh
    CatalogParser so instances can be reused.
    """

    def __init__(
        self,
        minify: bool = False,
        expand_for_display: bool = False,
        flag_unreviewed: bool = False,
        on_complete: Optional[Callable[[ConversionReport], None]] = None,
    ):
        """
        Initialize converter.

        Args:
            minify: Drop all structural whitespace and line breaks
            expand_for_display: Pad values with hyphens for layout testing
            flag_unreviewed: Wrap fuzzy/untranslated values in `# ... #`
            on_complete: Called with the ConversionReport after each conversion
        """
        self.minify = minify
        self.expand_for_display = expand_for_display
        self.flag_unreviewed = flag_unreviewed
        self.on_complete = on_complete
        self.report: Optional[ConversionReport] = None

    def convert(self, text: str) -> str:
        """
        Convert PO content to JSON.

        Raises:
            FormatError: If the content has no line terminator
        """
        line_ending = detect_line_ending(text)
        style = OutputStyle.for_input(line_ending, self.minify)

        parser = CatalogParser()
        catalog = parser.parse(text, line_ending)
        output = parser.serialize(
            catalog,
            style,
            expand_for_display=self.expand_for_display,
            flag_unreviewed=self.flag_unreviewed,
        )

        report = ConversionReport(
            messages=len(catalog),
            line_ending=line_ending,
            diagnostics=list(parser.diagnostics),
        )
        for message in catalog:
            for _, reviewed in message.values():
                report.fragments += 1
                if not reviewed:
                    report.unreviewed += 1

        self.report = report
        logger.debug("Converted %d messages into %d entries", report.messages, report.fragments)

        if self.on_complete is not None:
            self.on_complete(report)

        return output


def convert(
    file: str,
    minify: bool = False,
    expand_for_display: bool = False,
    flag_unreviewed: bool = False,
    on_complete: Optional[Callable[[ConversionReport], None]] = None,
) -> str:
    """
    Convert PO file content to a JSON object string.

    Args:
        file: Raw PO file content (not a path)
        minify: Drop all structural whitespace and line breaks
        expand_for_display: Pad values with hyphens for layout testing
        flag_unreviewed: Wrap fuzzy/untranslated values in `# ... #`
        on_complete: Optional callback receiving the ConversionReport

    Returns:
        JSON text with `{"<key><index>": {"message": "..."}}` members
    """
    converter = Converter(
        minify=minify,
        expand_for_display=expand_for_display,
        flag_unreviewed=flag_unreviewed,
        on_complete=on_complete,
    )
    return converter.convert(file)
