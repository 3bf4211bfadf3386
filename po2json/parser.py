#!/usr/bin/env python3
"""
GNU gettext PO catalog parser.

Walks a PO file line by line and folds the lines into an ordered list of
Message records. The walk keeps exactly one record open; whether a `msgctxt`
or `msgid` line opens a new record or merges into the open one follows the
rules below, which decide which catalogs convert identically and must not
be tightened:

- `msgctxt` / `msgid` merge into the open record while it has no identifier
- `msgid_plural` carries no data
- `msgstr` / `msgstr[N]` append a translation to the open record
- bare `"..."` lines continue whichever field was written last

The first `msgstr` of the file closes the header entry, which is dropped.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .message import Message, OutputStyle

logger = logging.getLogger(__name__)


FUZZY_MARKER = "#, fuzzy"
OBSOLETE_PREFIX = "#~"

LINE_ENDINGS = ("\r\n", "\n", "\r")


class FormatError(ValueError):
    """Raised when the input cannot be split into lines."""


class LineKind(Enum):
    FUZZY = "fuzzy"
    OBSOLETE = "obsolete"
    COMMENT = "comment"
    BLANK = "blank"
    CONTEXT = "msgctxt"
    IDENTIFIER = "msgid"
    PLURAL_IDENTIFIER = "msgid_plural"
    TRANSLATION = "msgstr"
    CONTINUATION = "continuation"


# msgid "..." / msgid_plural "..." / msgstr "..." / msgstr[N] "..." / msgctxt "..."
STRUCTURAL_PATTERN = re.compile(
    r'^msg(?P<kind>id_plural|id|str\[(?P<index>\d+)\]|str|ctxt)\s*"(?P<text>.*)"\s*$'
)

_KINDS = {
    'id': LineKind.IDENTIFIER,
    'id_plural': LineKind.PLURAL_IDENTIFIER,
    'str': LineKind.TRANSLATION,
    'ctxt': LineKind.CONTEXT,
}


@dataclass
class Line:
    """A classified input line."""
    kind: LineKind
    text: str = ""
    index: Optional[int] = None  # plural index of msgstr[N]


@dataclass
class Diagnostic:
    """Non-fatal irregularity found while parsing."""
    line_num: int
    error_type: str
    message: str
    suggestion: str = ""

    def to_dict(self) -> dict:
        return {
            "line": self.line_num,
            "type": self.error_type,
            "message": self.message,
            "fix": self.suggestion,
        }


def detect_line_ending(text: str) -> str:
    """
    Find the line ending used by the text.

    The first line break decides: `\\r\\n`, `\\n` or a lone `\\r`.

    Raises:
        FormatError: If the text contains no line break at all
    """
    match = re.search(r'\r\n|\n|\r', text)
    if not match:
        raise FormatError("No valid line terminator found (expected \\n, \\r\\n or \\r)")
    return match.group(0)


def strip_quotes(text: str) -> str:
    """Remove one pair of surrounding double quotes, if present."""
    text = text.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    return text


def classify_line(line: str) -> Line:
    """Classify a single line of a PO file."""
    stripped = line.strip()

    if stripped == FUZZY_MARKER:
        return Line(LineKind.FUZZY)

    if stripped.startswith('#'):
        if stripped.startswith(OBSOLETE_PREFIX):
            return Line(LineKind.OBSOLETE)
        return Line(LineKind.COMMENT)

    if not stripped:
        return Line(LineKind.BLANK)

    match = STRUCTURAL_PATTERN.match(stripped)
    if match:
        kind = match.group('kind')
        index = match.group('index')
        if index is not None:
            return Line(LineKind.TRANSLATION, match.group('text'), int(index))
        return Line(_KINDS[kind], match.group('text'))

    return Line(LineKind.CONTINUATION, strip_quotes(stripped))


class CatalogParser:
    """
    Single-pass PO parser.

    Each call to parse() starts from fresh state; diagnostics of the last
    run are kept on the instance.
    """

    def __init__(self):
        self.catalog: list[Message] = []
        self.diagnostics: list[Diagnostic] = []
        self._current: Optional[Message] = None
        self._ignoring = True
        self._in_header = False
        self._line_num = 0

    def parse(self, text: str, line_ending: Optional[str] = None) -> list[Message]:
        """
        Parse PO content into Message records.

        Args:
            text: Raw PO file content
            line_ending: Line ending to split on (detected when omitted)

        Returns:
            Messages in catalog order

        Raises:
            FormatError: If no line ending can be detected
        """
        if line_ending is None:
            line_ending = detect_line_ending(text)

        self.catalog = []
        self.diagnostics = []
        self._current = None
        self._ignoring = True
        self._in_header = False

        for self._line_num, raw in enumerate(text.split(line_ending), 1):
            self._feed(classify_line(raw))

        logger.debug("Parsed %d messages, %d diagnostics",
                     len(self.catalog), len(self.diagnostics))
        return self.catalog

    def _feed(self, line: Line) -> None:
        kind = line.kind
        if kind is not LineKind.CONTINUATION:
            self._in_header = False

        if kind is LineKind.FUZZY:
            if not self._ignoring:
                self._open(Message(needs_review=True))

        elif kind is LineKind.OBSOLETE:
            self._rollback()

        elif kind in (LineKind.COMMENT, LineKind.BLANK):
            pass

        elif self._ignoring:
            if kind is LineKind.TRANSLATION:
                # Header msgstr: its metadata lines follow as continuations
                self._ignoring = False
                self._in_header = True
                self._current = None

        elif kind is LineKind.CONTEXT:
            self._mergeable_record().set_context(line.text)

        elif kind is LineKind.IDENTIFIER:
            self._mergeable_record().set_identifier(line.text)

        elif kind is LineKind.PLURAL_IDENTIFIER:
            if self._current is not None:
                self._current.open_plural_identifier()

        elif kind is LineKind.TRANSLATION:
            self._attach_translation(line)

        elif kind is LineKind.CONTINUATION:
            self._continue(line.text)

    def _open(self, message: Message) -> Message:
        self.catalog.append(message)
        self._current = message
        return message

    def _mergeable_record(self) -> Message:
        """Return the open record if it has no identifier yet, else a new one."""
        if self._current is not None and not self._current.has_identifier:
            return self._current
        return self._open(Message())

    def _rollback(self) -> None:
        """Drop a fuzzy-only record that turned out to precede an obsolete entry."""
        current = self._current
        if current is None or not current.is_blank:
            return
        # The open record is always the last one appended
        self.catalog.pop()
        self._current = None
        logger.debug("Line %d: dropped empty record before obsolete entry", self._line_num)

    def _attach_translation(self, line: Line) -> None:
        if self._current is None:
            self._report(
                "ORPHAN_TRANSLATION",
                "msgstr without a preceding msgid, translation dropped",
                "Add the msgid line for this translation",
            )
            return
        self._current.add_translation(line.text)

    def _continue(self, text: str) -> None:
        if self._current is None:
            if self._in_header:
                return
            self._report(
                "UNEXPECTED_TEXT",
                "Text outside of any entry ignored",
                "Remove the line or start it with msgid/msgstr",
            )
            return
        if not self._current.append(text):
            logger.debug("Line %d: continuation of untracked field discarded", self._line_num)

    def _report(self, error_type: str, message: str, suggestion: str) -> None:
        diagnostic = Diagnostic(self._line_num, error_type, message, suggestion)
        self.diagnostics.append(diagnostic)
        logger.warning("Line %d: %s", self._line_num, message)

    @staticmethod
    def serialize(
        catalog: list[Message],
        style: Optional[OutputStyle] = None,
        expand_for_display: bool = False,
        flag_unreviewed: bool = False,
    ) -> str:
        """
        Serialize messages as a JSON object string.

        Args:
            catalog: Parsed messages
            style: Structural whitespace
            expand_for_display: Pad values with hyphens
            flag_unreviewed: Mark unreviewed values

        Returns:
            JSON object text, `{}` for an empty catalog
        """
        style = style or OutputStyle()
        fragments = []
        for message in catalog:
            fragments.extend(message.render(style, expand_for_display, flag_unreviewed))

        if not fragments:
            return "{}"

        separator = "," + style.newline
        return "{" + style.newline + separator.join(fragments) + style.newline + "}"


def validate_content(content: str) -> list[str]:
    """Validate PO file format."""
    errors = []

    if 'msgid' not in content:
        errors.append("No msgid entries found")

    # Check for unmatched quotes
    for i, line in enumerate(content.splitlines(), 1):
        if line.startswith(('msgid', 'msgstr', 'msgctxt')):
            quote_count = line.count('"') - line.count('\\"')
            if quote_count % 2 != 0:
                errors.append(f"Line {i}: Unmatched quotes")

    return errors
