#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/recoder/codec_registry.py
"""Codec registry mapping ordered tag pairs to codec functions.

The registry is populated lazily on first use with the built-in codec
catalog and with third-party codecs advertised through the
``recoder.codecs`` entry point group. Population happens exactly once
behind a lock; after that the registry is only read and lookups take no
lock.

Examples
--------
Look up a codec using the global registry instance (preferred):

    >>> from recoder.codec_registry import codec_registry
    >>> from recoder.constants import FormatTag
    >>> codec = codec_registry.get_codec(FormatTag.UTF8, FormatTag.XML)
    >>> codec.name
    'UTF8->XML'

Register a custom codec:

    >>> codec_registry.register(my_codec_metadata)

Use an isolated registry, e.g. in tests:

    >>> registry = CodecRegistry(include_builtins=False)
    >>> registry.register(my_codec_metadata)

Notes
-----
Registration is meant to happen during start-up. Mutating the registry
while other threads recode text is not supported.

"""

from __future__ import annotations

import importlib.metadata
import logging
import threading
from typing import Optional

from recoder.constants import CODEC_ENTRY_POINT_GROUP, FormatTag
from recoder.exceptions import NoTransformAvailableError
from recoder.logging_utils import sanitize_for_log
from recoder.metadata import CodecMetadata

logger = logging.getLogger(__name__)


class CodecRegistry:
    """Registry of codecs keyed by ``(source_tag, target_tag)``.

    Parameters
    ----------
    include_builtins : bool, default True
        Load the built-in codec catalog on first use
    discover : bool, default True
        Scan the ``recoder.codecs`` entry point group on first use

    """

    def __init__(self, include_builtins: bool = True, discover: bool = True) -> None:
        self._codecs: dict[tuple[FormatTag, FormatTag], CodecMetadata] = {}
        self._include_builtins = include_builtins
        self._discover = discover
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        """Whether the one-time population has run."""
        return self._initialized

    def _ensure_initialized(self) -> None:
        """Populate the registry once, even under concurrent first use."""
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            if self._include_builtins:
                from recoder.codecs import BUILTIN_CODECS

                for metadata in BUILTIN_CODECS:
                    self._store(metadata)
                logger.debug(f"Loaded {len(BUILTIN_CODECS)} built-in codec(s)")
            if self._discover:
                self.discover_plugins()
            self._initialized = True

    def _store(self, metadata: CodecMetadata) -> None:
        if metadata.key in self._codecs:
            logger.warning(f"Codec '{metadata.name}' already registered, overwriting")
        self._codecs[metadata.key] = metadata
        logger.debug(f"Registered codec: {metadata.name}")

    def register(self, metadata: CodecMetadata) -> None:
        """Register a codec.

        Built-in codecs are loaded first, so a registered codec replaces a
        built-in one for the same tag pair.

        Parameters
        ----------
        metadata : CodecMetadata
            Codec to register

        Notes
        -----
        If a codec for the same tag pair is already registered, it is
        overwritten and a warning is logged.

        """
        self._ensure_initialized()
        self._store(metadata)

    def unregister(self, source: FormatTag, target: FormatTag) -> bool:
        """Remove the codec for a tag pair.

        Returns
        -------
        bool
            True if a codec was removed, False if none was registered

        """
        self._ensure_initialized()
        metadata = self._codecs.pop((source, target), None)
        if metadata is None:
            return False
        logger.debug(f"Unregistered codec: {metadata.name}")
        return True

    def lookup(self, source: FormatTag, target: FormatTag) -> Optional[CodecMetadata]:
        """Return the codec for a tag pair, or None if there is none.

        Identity pairs are never registered; the composer handles them.

        """
        self._ensure_initialized()
        return self._codecs.get((source, target))

    def get_codec(self, source: FormatTag, target: FormatTag) -> CodecMetadata:
        """Return the codec for a tag pair.

        Parameters
        ----------
        source : FormatTag
            Tag recoded from
        target : FormatTag
            Tag recoded to

        Returns
        -------
        CodecMetadata
            The registered codec

        Raises
        ------
        NoTransformAvailableError
            If no codec is registered for the pair

        """
        metadata = self.lookup(source, target)
        if metadata is None:
            raise NoTransformAvailableError(source.value, target.value)
        return metadata

    def has_codec(self, source: FormatTag, target: FormatTag) -> bool:
        """Check whether a codec is registered for a tag pair."""
        return self.lookup(source, target) is not None

    def list_codecs(
        self, source: Optional[FormatTag] = None, target: Optional[FormatTag] = None
    ) -> list[CodecMetadata]:
        """List registered codecs, optionally filtered by tag.

        Parameters
        ----------
        source : FormatTag, optional
            Only codecs recoding from this tag
        target : FormatTag, optional
            Only codecs recoding to this tag

        Returns
        -------
        list[CodecMetadata]
            Matching codecs sorted by name

        """
        self._ensure_initialized()
        codecs = [
            metadata
            for metadata in self._codecs.values()
            if (source is None or metadata.source is source) and (target is None or metadata.target is target)
        ]
        return sorted(codecs, key=lambda metadata: metadata.name)

    def discover_plugins(self) -> int:
        """Discover and register codecs from entry points.

        Each entry point in the ``recoder.codecs`` group must load either a
        :class:`CodecMetadata` or a list of them. Entry points that fail to
        load or return something else are skipped with a warning.

        Returns
        -------
        int
            Number of codecs discovered and registered

        """
        discovered_count = 0

        for ep in importlib.metadata.entry_points().select(group=CODEC_ENTRY_POINT_GROUP):
            try:
                loaded = ep.load()
            except Exception as e:
                logger.warning(f"Failed to load codec entry point '{ep.name}': {sanitize_for_log(e)}")
                continue

            candidates = loaded if isinstance(loaded, (list, tuple)) else [loaded]
            for metadata in candidates:
                if not isinstance(metadata, CodecMetadata):
                    logger.warning(f"Entry point '{ep.name}' did not return CodecMetadata, skipping")
                    continue
                self._store(metadata)
                discovered_count += 1
            logger.debug(f"Discovered codecs from entry point: {ep.name}")

        if discovered_count:
            logger.info(f"Discovered {discovered_count} codec(s) from entry points")
        return discovered_count

    def clear(self) -> None:
        """Remove every codec and mark the registry uninitialized.

        This is primarily useful for testing; the next lookup repopulates
        the registry.

        """
        with self._init_lock:
            self._codecs.clear()
            self._initialized = False
        logger.debug("Cleared codec registry")

    def __len__(self) -> int:
        self._ensure_initialized()
        return len(self._codecs)

    def __contains__(self, key: object) -> bool:
        self._ensure_initialized()
        return key in self._codecs


# Global registry instance (preferred access pattern)
codec_registry = CodecRegistry()

__all__ = [
    "CodecRegistry",
    "codec_registry",
]
