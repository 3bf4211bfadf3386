#!/usr/bin/env python3
"""
Message record for PO to JSON conversion.

A Message accumulates one translatable unit while the parser walks the
catalog (context, identifier, translations) and renders itself as JSON
object fragments keyed by a normalized identifier:

```
msgctxt "menu"
msgid "Open"
msgstr "Ouvrir"
```

becomes

```
"menu_4__79_pen0": {
	"message": "Ouvrir"
}
```
"""

import json
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# Separates context from identifier in keys (ASCII "end of transmission")
CONTEXT_SEPARATOR = "\x04"

# Escaped line breaks as written inside PO strings
ESCAPED_LINE_BREAKS = {
    '\\n': '_10_',
    '\\r': '_13_',
}

_KEY_TOKEN_PATTERN = re.compile(r'\\[nr]|[^a-z0-9]')
_PO_ESCAPE_PATTERN = re.compile(r'\\(.)', re.DOTALL)

_PO_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    '\\': '\\',
}


class Field(Enum):
    """Field of a Message that most recently received content."""
    IDENTIFIER = "identifier"
    CONTEXT = "context"
    TRANSLATION = "translation"
    PLURAL_IDENTIFIER = "plural_identifier"  # not stored


@dataclass
class OutputStyle:
    """
    Structural whitespace used when serializing.

    Attributes:
        newline: Line separator (the input's own line ending, or "" when minified)
        indent: Indentation before the "message" member
        space: Space after colons
    """
    newline: str = "\n"
    indent: str = "\t"
    space: str = " "

    @classmethod
    def for_input(cls, line_ending: str, minify: bool = False) -> "OutputStyle":
        """Build the style for a catalog using the given line ending."""
        if minify:
            return cls(newline="", indent="", space="")
        return cls(newline=line_ending)


def normalize_key(text: str) -> str:
    """
    Normalize raw PO text into a key made of [a-z0-9_] only.

    Escaped line breaks become `_10_` / `_13_`; every other character outside
    [a-z0-9], uppercase letters included, becomes `_<code point>_`.
    """
    def substitute(match: re.Match) -> str:
        token = match.group(0)
        if token in ESCAPED_LINE_BREAKS:
            return ESCAPED_LINE_BREAKS[token]
        return f"_{ord(token)}_"

    return _KEY_TOKEN_PATTERN.sub(substitute, text)


def unescape_po_string(s: str) -> str:
    """Decode PO escapes; unknown escapes keep their backslash."""
    def substitute(match: re.Match) -> str:
        char = match.group(1)
        return _PO_ESCAPES.get(char, match.group(0))

    return _PO_ESCAPE_PATTERN.sub(substitute, s)


def display_padding(length: int) -> int:
    """
    Number of hyphens that models worst-case translation expansion.

    Short UI strings grow proportionally more than long ones when translated,
    so the factor 3/ln(L) + 0.7 shrinks with length.
    """
    if length <= 1:
        return 0
    padding = round((3 / math.log(length) + 0.7) * length - length)
    return max(padding, 0)


@dataclass
class Message:
    """
    One translatable string and its translations.

    Attributes:
        identifier: Raw msgid text (PO escapes kept)
        context: Raw msgctxt text, empty when the message has no context
        translations: Raw msgstr texts in catalog order (0 = singular)
        needs_review: True when the entry carried a fuzzy marker
        last_touched: Field that continuation lines are appended to
    """
    identifier: str = ""
    context: str = ""
    translations: list[str] = field(default_factory=list)
    needs_review: bool = False
    last_touched: Optional[Field] = None

    @property
    def has_identifier(self) -> bool:
        return bool(self.identifier)

    @property
    def is_blank(self) -> bool:
        """True when neither identifier nor context received any content."""
        return not self.identifier and not self.context

    def set_context(self, text: str) -> None:
        self.context = text
        self.last_touched = Field.CONTEXT

    def set_identifier(self, text: str) -> None:
        self.identifier = text
        self.last_touched = Field.IDENTIFIER

    def open_plural_identifier(self) -> None:
        self.last_touched = Field.PLURAL_IDENTIFIER

    def add_translation(self, text: str) -> None:
        self.translations.append(text)
        self.last_touched = Field.TRANSLATION

    def append(self, text: str) -> bool:
        """
        Append a continuation line to the most recently written field.

        Returns:
            True if the text was stored, False if the open field is not
            tracked (plural identifier) or nothing was written yet
        """
        if self.last_touched is Field.IDENTIFIER:
            self.identifier += text
        elif self.last_touched is Field.CONTEXT:
            self.context += text
        elif self.last_touched is Field.TRANSLATION:
            self.translations[-1] += text
        else:
            return False
        return True

    @property
    def key(self) -> str:
        """Normalized key without the translation index suffix."""
        if self.context:
            return normalize_key(self.context + CONTEXT_SEPARATOR + self.identifier)
        return normalize_key(self.identifier)

    def values(self, flag_unreviewed: bool = False) -> list[tuple[str, bool]]:
        """
        Decoded value of every translation with its review state.

        An empty translation falls back to the identifier and marks this and
        all following translations of the record as unreviewed.
        """
        result = []
        reviewed = not self.needs_review
        for text in self.translations:
            if not text:
                text = self.identifier
                reviewed = False
            if flag_unreviewed and not reviewed:
                text = f"# {text} #"
            result.append((unescape_po_string(text), reviewed))
        return result

    def render(
        self,
        style: Optional[OutputStyle] = None,
        expand_for_display: bool = False,
        flag_unreviewed: bool = False,
    ) -> list[str]:
        """
        Render one JSON object member per translation.

        Args:
            style: Structural whitespace (defaults to LF, tab, space)
            expand_for_display: Pad values with hyphens for layout testing
            flag_unreviewed: Wrap unreviewed values in `# ... #`

        Returns:
            List of `"<key><index>": {"message": "<value>"}` fragments
        """
        style = style or OutputStyle()
        key = self.key
        fragments = []

        for index, (value, _) in enumerate(self.values(flag_unreviewed)):
            if expand_for_display:
                value += "-" * display_padding(len(value))
            encoded = json.dumps(value, ensure_ascii=False)
            fragments.append(
                f'"{key}{index}":{style.space}{{{style.newline}'
                f'{style.indent}"message":{style.space}{encoded}{style.newline}'
                f'}}'
            )

        return fragments
