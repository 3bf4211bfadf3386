#!/usr/bin/env python3
"""
Tests for the PO catalog parser.

Covers line classification, line ending detection, header suppression,
record-splitting rules, fuzzy/obsolete handling and diagnostics.
"""

import pytest

from po2json.message import Field
from po2json.parser import (
    CatalogParser,
    FormatError,
    LineKind,
    classify_line,
    detect_line_ending,
    strip_quotes,
    validate_content,
)


HEADER = '''msgid ""
msgstr ""
"Project-Id-Version: Test 1.0\\n"
"Content-Type: text/plain; charset=UTF-8\\n"

'''


@pytest.fixture
def parser():
    """Fixture to create a CatalogParser instance."""
    return CatalogParser()


def test_detect_line_ending_variants():
    """Test 1: The first line break decides the line ending."""
    assert detect_line_ending("a\nb") == "\n"
    assert detect_line_ending("a\r\nb\nc") == "\r\n"
    assert detect_line_ending("a\rb") == "\r"
    assert detect_line_ending("a\nb\r\nc") == "\n"


def test_detect_line_ending_missing():
    """Test 2: Text without a line break is rejected."""
    with pytest.raises(FormatError):
        detect_line_ending('msgid "x"')


def test_classify_structural_lines():
    """Test 3: msg* lines are classified with their raw payload."""
    assert classify_line('msgid "Hello"').kind is LineKind.IDENTIFIER
    assert classify_line('msgid_plural "Hellos"').kind is LineKind.PLURAL_IDENTIFIER
    assert classify_line('msgctxt "menu"').kind is LineKind.CONTEXT

    line = classify_line('msgstr "a \\"b\\""')
    assert line.kind is LineKind.TRANSLATION
    assert line.text == 'a \\"b\\"'
    assert line.index is None

    plural = classify_line('msgstr[2] "x"')
    assert plural.kind is LineKind.TRANSLATION
    assert plural.index == 2
    assert plural.text == "x"


def test_classify_comments():
    """Test 4: Fuzzy marker, obsolete lines and plain comments."""
    assert classify_line("#, fuzzy").kind is LineKind.FUZZY
    assert classify_line("#, fuzzy, c-format").kind is LineKind.COMMENT
    assert classify_line('#~ msgid "old"').kind is LineKind.OBSOLETE
    assert classify_line("#: src/main.c:42").kind is LineKind.COMMENT
    assert classify_line("# translator note").kind is LineKind.COMMENT


def test_classify_blank_and_continuation():
    """Test 5: Blank lines and quoted continuation lines."""
    assert classify_line("").kind is LineKind.BLANK
    assert classify_line("   ").kind is LineKind.BLANK

    line = classify_line('"more text"')
    assert line.kind is LineKind.CONTINUATION
    assert line.text == "more text"


def test_strip_quotes_removes_one_pair():
    """Test 6: Only the outer quotes are removed."""
    assert strip_quotes('"a"') == "a"
    assert strip_quotes('"\\""') == '\\"'
    assert strip_quotes("plain") == "plain"


def test_header_is_skipped(parser):
    """Test 7: The header entry produces no record."""
    catalog = parser.parse(HEADER + 'msgid "hello"\nmsgstr "bonjour"\n')

    assert len(catalog) == 1
    assert catalog[0].identifier == "hello"
    assert catalog[0].translations == ["bonjour"]
    assert parser.diagnostics == []


def test_first_entry_is_treated_as_header(parser):
    """Test 8: Without a header, the first msgid/msgstr pair is skipped."""
    catalog = parser.parse('msgid "first"\nmsgstr "premier"\n\nmsgid "second"\nmsgstr "deuxieme"\n')

    assert [m.identifier for m in catalog] == ["second"]


def test_fuzzy_header_does_not_open_record(parser):
    """Test 9: A fuzzy marker on the header is ignored."""
    catalog = parser.parse("#, fuzzy\n" + HEADER + 'msgid "hello"\nmsgstr "bonjour"\n')

    assert len(catalog) == 1
    assert catalog[0].needs_review is False


def test_multiline_strings(parser):
    """Test 10: Continuation lines extend identifier and translation."""
    content = HEADER + 'msgid ""\n"multi "\n"line"\nmsgstr ""\n"plusieurs "\n"lignes"\n'
    catalog = parser.parse(content)

    assert len(catalog) == 1
    assert catalog[0].identifier == "multi line"
    assert catalog[0].translations == ["plusieurs lignes"]


def test_context_attaches_to_following_identifier(parser):
    """Test 11: msgctxt and msgid end up in one record."""
    catalog = parser.parse(HEADER + 'msgctxt "menu"\nmsgid "open"\nmsgstr "ouvrir"\n')

    assert len(catalog) == 1
    assert catalog[0].context == "menu"
    assert catalog[0].identifier == "open"


def test_reissued_context_replaces_previous(parser):
    """Test 12: A second msgctxt before any msgid stays in the same record."""
    catalog = parser.parse(HEADER + 'msgctxt "a"\nmsgctxt "b"\nmsgid "x"\nmsgstr "y"\n')

    assert len(catalog) == 1
    assert catalog[0].context == "b"


def test_identifier_after_identifier_opens_new_record(parser):
    """Test 13: A msgid following a complete record starts a new one."""
    content = HEADER + 'msgid "one"\nmsgstr "un"\nmsgid "two"\nmsgstr "deux"\n'
    catalog = parser.parse(content)

    assert [m.identifier for m in catalog] == ["one", "two"]


def test_context_after_identifier_opens_new_record(parser):
    """Test 14: A msgctxt following a record with an identifier starts a new one."""
    content = HEADER + 'msgid "one"\nmsgstr "un"\nmsgctxt "ctx"\nmsgid "one"\nmsgstr "un"\n'
    catalog = parser.parse(content)

    assert len(catalog) == 2
    assert catalog[0].context == ""
    assert catalog[1].context == "ctx"


def test_plural_translations_in_encounter_order(parser):
    """Test 15: msgstr[N] lines are appended in order, msgid_plural is dropped."""
    content = HEADER + (
        'msgid "file"\n'
        'msgid_plural "files"\n'
        'msgstr[0] "fichier"\n'
        'msgstr[1] "fichiers"\n'
    )
    catalog = parser.parse(content)

    assert len(catalog) == 1
    assert catalog[0].identifier == "file"
    assert catalog[0].translations == ["fichier", "fichiers"]


def test_plural_identifier_continuation_is_not_stored(parser):
    """Test 16: Continuation of a multi-line msgid_plural does not leak into msgid."""
    content = HEADER + (
        'msgid "file"\n'
        'msgid_plural ""\n'
        '"files"\n'
        'msgstr[0] "fichier"\n'
        'msgstr[1] "fichiers"\n'
    )
    catalog = parser.parse(content)

    assert catalog[0].identifier == "file"
    assert catalog[0].last_touched is Field.TRANSLATION


def test_fuzzy_marker_flags_record(parser):
    """Test 17: The fuzzy marker opens a record that needs review."""
    content = HEADER + '#, fuzzy\nmsgid "draft"\nmsgstr "brouillon"\n'
    catalog = parser.parse(content)

    assert len(catalog) == 1
    assert catalog[0].needs_review is True
    assert catalog[0].identifier == "draft"


def test_fuzzy_obsolete_record_is_rolled_back(parser):
    """Test 18: A fuzzy marker followed by an obsolete entry leaves nothing."""
    content = HEADER + '#, fuzzy\n#~ msgid "old"\n#~ msgstr "vieux"\n'
    catalog = parser.parse(content)

    assert catalog == []


def test_rollback_keeps_complete_records(parser):
    """Test 19: Obsolete lines do not remove a record that has an identifier."""
    content = HEADER + 'msgid "kept"\nmsgstr "garde"\n\n#~ msgid "old"\n#~ msgstr "vieux"\n'
    catalog = parser.parse(content)

    assert [m.identifier for m in catalog] == ["kept"]


def test_context_only_obsolete_stub_is_kept(parser):
    """Test 20: Records holding only a context survive the obsolete rollback."""
    content = HEADER + '#, fuzzy\nmsgctxt "ctx"\n#~ msgid "old"\n'
    catalog = parser.parse(content)

    assert len(catalog) == 1
    assert catalog[0].context == "ctx"
    assert catalog[0].translations == []


def test_comments_and_blank_lines_are_ignored(parser):
    """Test 21: Reference and translator comments do not create records."""
    content = HEADER + (
        "# translator note\n"
        "#. extracted\n"
        "#: src/main.c:42\n"
        "\n"
        'msgid "hello"\n'
        'msgstr "bonjour"\n'
    )
    catalog = parser.parse(content)

    assert len(catalog) == 1


def test_orphan_translation_is_reported(parser):
    """Test 22: msgstr with no open record is dropped with a diagnostic."""
    catalog = parser.parse(HEADER + 'msgstr "orphan"\n\nmsgid "hello"\nmsgstr "bonjour"\n')

    assert [m.identifier for m in catalog] == ["hello"]
    assert len(parser.diagnostics) == 1
    assert parser.diagnostics[0].error_type == "ORPHAN_TRANSLATION"
    assert parser.diagnostics[0].line_num == 6


def test_text_outside_entries_is_reported(parser):
    """Test 23: Garbage before the first entry is dropped with a diagnostic."""
    catalog = parser.parse(HEADER + 'garbage\nmsgid "hello"\nmsgstr "bonjour"\n')

    assert len(catalog) == 1
    assert catalog[0].identifier == "hello"
    assert parser.diagnostics[0].error_type == "UNEXPECTED_TEXT"
    assert parser.diagnostics[0].to_dict()["line"] == 6


def test_header_metadata_lines_are_not_reported(parser):
    """Test 24: Header continuation lines are dropped silently."""
    parser.parse(HEADER + 'msgid "hello"\nmsgstr "bonjour"\n')
    assert parser.diagnostics == []


def test_crlf_input(parser):
    """Test 25: CRLF catalogs split on CRLF."""
    content = HEADER.replace("\n", "\r\n") + 'msgid "hello"\r\nmsgstr "bonjour"\r\n'
    catalog = parser.parse(content)

    assert catalog[0].translations == ["bonjour"]


def test_parse_resets_state(parser):
    """Test 26: A parser instance can be reused without leaking records."""
    content = HEADER + 'msgid "hello"\nmsgstr "bonjour"\n'
    parser.parse(content)
    catalog = parser.parse(content)

    assert len(catalog) == 1


def test_duplicates_are_kept(parser):
    """Test 27: Duplicate entries are kept as separate records."""
    content = HEADER + 'msgid "a"\nmsgstr "x"\n\nmsgid "a"\nmsgstr "y"\n'
    catalog = parser.parse(content)

    assert [m.translations for m in catalog] == [["x"], ["y"]]


def test_serialize_empty_catalog():
    """Test 28: No entries serialize to an empty object."""
    assert CatalogParser.serialize([]) == "{}"


def test_serialize_joins_fragments(parser):
    """Test 29: Fragments are joined by a comma and the line ending."""
    catalog = parser.parse(HEADER + 'msgid "a"\nmsgstr "x"\n\nmsgid "b"\nmsgstr "y"\n')
    output = CatalogParser.serialize(catalog)

    assert output == (
        '{\n'
        '"a0": {\n\t"message": "x"\n},\n'
        '"b0": {\n\t"message": "y"\n}\n'
        '}'
    )


def test_validate_content():
    """Test 30: Quote balance and missing msgid are reported."""
    assert validate_content(HEADER + 'msgid "ok"\nmsgstr "fine"\n') == []
    assert validate_content("nothing here\n") == ["No msgid entries found"]

    errors = validate_content('msgid "broken\nmsgstr "x"\n')
    assert errors == ["Line 1: Unmatched quotes"]
