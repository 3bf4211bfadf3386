"""
po2json - PO to JSON message catalog converter

Converts GNU gettext .po catalogs into JSON objects whose keys are normalized
message identifiers and whose values are `{"message": "..."}` records.

Quick start:
    po2json convert --input messages.po
    po2json convert --input messages.po --minify --flag-unreviewed
"""

__version__ = "1.0.0"

from .converter import ConversionReport, Converter, convert
from .message import Message, OutputStyle, normalize_key
from .parser import CatalogParser, Diagnostic, FormatError

__all__ = [
    "convert",
    "Converter",
    "ConversionReport",
    "CatalogParser",
    "Diagnostic",
    "FormatError",
    "Message",
    "OutputStyle",
    "normalize_key",
]
