#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/codecs/__init__.py
"""Built-in codec catalog.

The catalog is grouped by concern:

- :mod:`recoder.codecs.escaping` - percent, form, underscore, base64, SHA-1
- :mod:`recoder.codecs.quoting` - string literals and markup escaping
- :mod:`recoder.codecs.identifiers` - identifier casing and reserved words
- :mod:`recoder.codecs.layout` - indentation, truncation, padding, formatting

The registry loads :data:`BUILTIN_CODECS` lazily on first use.

"""

from __future__ import annotations

from recoder.codecs.escaping import ESCAPING_CODECS
from recoder.codecs.identifiers import IDENTIFIER_CODECS
from recoder.codecs.layout import LAYOUT_CODECS
from recoder.codecs.quoting import QUOTING_CODECS
from recoder.metadata import CodecMetadata

BUILTIN_CODECS: list[CodecMetadata] = [
    *ESCAPING_CODECS,
    *QUOTING_CODECS,
    *IDENTIFIER_CODECS,
    *LAYOUT_CODECS,
]

__all__ = ["BUILTIN_CODECS"]
