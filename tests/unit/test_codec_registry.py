"""Unit tests for the codec registry."""

import importlib.metadata
import logging
from unittest.mock import MagicMock

import pytest

from recoder.codec_registry import CodecRegistry, codec_registry
from recoder.codecs import BUILTIN_CODECS
from recoder.constants import FormatTag
from recoder.exceptions import NoTransformAvailableError
from recoder.metadata import CodecMetadata


def _shout(source, sink, state):
    sink.write(source.read_remaining().upper())


def _codec(source=FormatTag.UTF8, target=FormatTag.UC) -> CodecMetadata:
    return CodecMetadata(source=source, target=target, func=_shout, description="Shout")


class _EntryPoints:
    def __init__(self, entry_points):
        self._entry_points = entry_points

    def select(self, group):
        assert group == "recoder.codecs"
        return self._entry_points


def _entry_point(name, loaded=None, error=None):
    entry_point = MagicMock()
    entry_point.name = name
    if error is not None:
        entry_point.load.side_effect = error
    else:
        entry_point.load.return_value = loaded
    return entry_point


@pytest.mark.unit
class TestCodecRegistry:
    """Tests for registration and lookup."""

    def test_builtins_loaded_lazily(self, builtin_registry):
        assert not builtin_registry.initialized
        assert builtin_registry.has_codec(FormatTag.UTF8, FormatTag.XML)
        assert builtin_registry.initialized
        assert len(builtin_registry) == len(BUILTIN_CODECS)

    def test_get_codec_for_missing_pair(self, builtin_registry):
        with pytest.raises(NoTransformAvailableError) as exc_info:
            builtin_registry.get_codec(FormatTag.UTF8, FormatTag.WIKI)
        assert exc_info.value.source_tag == "UTF8"
        assert exc_info.value.target_tag == "WIKI"

    def test_lookup_missing_pair_returns_none(self, empty_registry):
        assert empty_registry.lookup(FormatTag.UTF8, FormatTag.XML) is None

    def test_register_and_unregister(self, empty_registry):
        codec = _codec()
        empty_registry.register(codec)
        assert empty_registry.get_codec(FormatTag.UTF8, FormatTag.UC) is codec
        assert (FormatTag.UTF8, FormatTag.UC) in empty_registry
        assert empty_registry.unregister(FormatTag.UTF8, FormatTag.UC) is True
        assert empty_registry.unregister(FormatTag.UTF8, FormatTag.UC) is False

    def test_register_overrides_builtin(self, builtin_registry, caplog):
        replacement = _codec(FormatTag.UTF8, FormatTag.XML)
        with caplog.at_level(logging.WARNING, logger="recoder.codec_registry"):
            builtin_registry.register(replacement)
        assert builtin_registry.get_codec(FormatTag.UTF8, FormatTag.XML) is replacement
        assert "already registered" in caplog.text

    def test_list_codecs_filters(self, builtin_registry):
        from_mc = builtin_registry.list_codecs(source=FormatTag.MC)
        assert from_mc
        assert all(codec.source is FormatTag.MC for codec in from_mc)

        to_utf8 = builtin_registry.list_codecs(target=FormatTag.UTF8)
        assert {codec.source for codec in to_utf8} >= {FormatTag.URI, FormatTag.XML, FormatTag.BASE64}

        exact = builtin_registry.list_codecs(source=FormatTag.UTF8, target=FormatTag.INDENT)
        assert [codec.name for codec in exact] == ["UTF8->INDENT"]

    def test_list_codecs_sorted_by_name(self, builtin_registry):
        names = [codec.name for codec in builtin_registry.list_codecs()]
        assert names == sorted(names)

    def test_clear_repopulates_on_next_use(self, builtin_registry):
        builtin_registry.register(_codec())
        builtin_registry.clear()
        assert not builtin_registry.initialized
        assert not builtin_registry.has_codec(FormatTag.UTF8, FormatTag.UC)
        assert builtin_registry.has_codec(FormatTag.UTF8, FormatTag.XML)

    def test_markup_tags_have_no_codecs(self, builtin_registry):
        for tag in (FormatTag.DOCBOOK, FormatTag.WIKI, FormatTag.JAVADOC):
            assert builtin_registry.list_codecs(target=tag) == []

    def test_global_registry_has_builtins(self):
        assert codec_registry.has_codec(FormatTag.URI, FormatTag.UTF8)


@pytest.mark.unit
class TestPluginDiscovery:
    """Tests for entry point discovery."""

    def test_discovers_single_and_list_entry_points(self, monkeypatch):
        single = _codec(FormatTag.UTF8, FormatTag.UC)
        several = [_codec(FormatTag.LC, FormatTag.UCU), _codec(FormatTag.LC, FormatTag.MC)]
        entry_points = _EntryPoints([_entry_point("single", single), _entry_point("several", several)])
        monkeypatch.setattr(importlib.metadata, "entry_points", lambda: entry_points)

        registry = CodecRegistry(include_builtins=False, discover=True)
        assert len(registry) == 3
        assert registry.get_codec(FormatTag.LC, FormatTag.MC) is several[1]

    def test_broken_entry_points_are_skipped(self, monkeypatch, caplog):
        entry_points = _EntryPoints(
            [
                _entry_point("broken", error=ImportError("missing module")),
                _entry_point("wrong", loaded="not a codec"),
                _entry_point("good", _codec()),
            ]
        )
        monkeypatch.setattr(importlib.metadata, "entry_points", lambda: entry_points)

        registry = CodecRegistry(include_builtins=False, discover=False)
        with caplog.at_level(logging.WARNING, logger="recoder.codec_registry"):
            assert registry.discover_plugins() == 1
        assert "broken" in caplog.text
        assert "wrong" in caplog.text
        assert registry.has_codec(FormatTag.UTF8, FormatTag.UC)
