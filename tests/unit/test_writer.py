"""Unit tests for the streaming recoding writer.

The central property: for stream-safe pipelines, the text that reaches the
downstream sink does not depend on how the input is split into writes.
"""

import io
import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from recoder.api import recode_by_string
from recoder.exceptions import NoTransformAvailableError, WriterStateError
from recoder.writer import RecodingWriter

INDENT_RECIPE = 'UTF8/INDENT(">",1)'
ESCAPE_THEN_INDENT_RECIPE = 'UTF8/XML//UTF8/INDENT("  ",2)'

MULTILINE_TEXT = "alpha\nbe<ta>\n\ngamma & delta\nlast"

line_texts = st.text(alphabet=st.sampled_from(list("ab<&\n ")), max_size=40)


def _write_pieces(recipe: str, pieces: list[str]) -> str:
    sink = io.StringIO()
    with RecodingWriter(sink, recipe, close_downstream=False) as writer:
        for piece in pieces:
            writer.write(piece)
    return sink.getvalue()


def _split(text: str, cuts: list[int]) -> list[str]:
    bounds = [0, *sorted(set(cuts)), len(text)]
    return [text[start:end] for start, end in zip(bounds, bounds[1:])]


@pytest.mark.unit
class TestChunkInvariance:
    """Output is the same however the text is split into writes."""

    @pytest.mark.parametrize("recipe", [INDENT_RECIPE, ESCAPE_THEN_INDENT_RECIPE])
    def test_every_single_split_point(self, recipe):
        expected = recode_by_string(MULTILINE_TEXT, recipe)
        for cut in range(len(MULTILINE_TEXT) + 1):
            pieces = [MULTILINE_TEXT[:cut], MULTILINE_TEXT[cut:]]
            assert _write_pieces(recipe, pieces) == expected, f"split at {cut}"

    @pytest.mark.parametrize("recipe", [INDENT_RECIPE, ESCAPE_THEN_INDENT_RECIPE])
    def test_one_character_per_write(self, recipe):
        assert _write_pieces(recipe, list(MULTILINE_TEXT)) == recode_by_string(MULTILINE_TEXT, recipe)

    def test_indent_expected_output(self):
        assert _write_pieces(INDENT_RECIPE, ["one\ntw", "o\n", "three"]) == ">one\n>two\n>three"

    def test_newline_at_chunk_end_defers_prefix(self):
        assert _write_pieces(INDENT_RECIPE, ["a\n", ""]) == ">a\n"
        assert _write_pieces(INDENT_RECIPE, ["a\n", "b"]) == ">a\n>b"

    def test_blank_lines_are_indented(self):
        assert _write_pieces(INDENT_RECIPE, ["\n", "\n"]) == ">\n>\n"

    @given(line_texts, st.lists(st.integers(min_value=0, max_value=40), max_size=8))
    def test_indent_arbitrary_splits(self, text, cuts):
        cuts = [cut for cut in cuts if cut <= len(text)]
        expected = recode_by_string(text, INDENT_RECIPE)
        assert _write_pieces(INDENT_RECIPE, _split(text, cuts)) == expected

    @given(line_texts, st.lists(st.integers(min_value=0, max_value=40), max_size=8))
    def test_escape_then_indent_arbitrary_splits(self, text, cuts):
        cuts = [cut for cut in cuts if cut <= len(text)]
        expected = recode_by_string(text, ESCAPE_THEN_INDENT_RECIPE)
        assert _write_pieces(ESCAPE_THEN_INDENT_RECIPE, _split(text, cuts)) == expected


@pytest.mark.unit
class TestRecodingWriter:
    """Tests for writer configuration and lifecycle."""

    def test_unconfigured_writer_passes_text_through(self, recording_sink):
        writer = RecodingWriter(recording_sink)
        writer.write("a<b")
        assert recording_sink.writes == ["a<b"]
        assert writer.pipeline is None
        assert writer.is_identity

    def test_identity_pipeline_passes_text_through(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/UTF8")
        writer.write("a<b")
        assert recording_sink.writes == ["a<b"]
        assert writer.is_identity
        assert writer.pipeline.to_recipe() == "UTF8/UTF8"

    def test_write_returns_input_length(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/XML")
        assert writer.write("<") == 1
        assert recording_sink.writes == ["&lt;"]

    def test_empty_write_emits_nothing(self, recording_sink):
        writer = RecodingWriter(recording_sink, INDENT_RECIPE)
        assert writer.write("") == 0
        assert recording_sink.writes == []

    def test_configure_after_construction(self, recording_sink):
        writer = RecodingWriter(recording_sink)
        writer.configure("UTF8/XML")
        writer.write("&")
        assert recording_sink.getvalue() == "&amp;"

    def test_configure_twice_rejected(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/XML")
        with pytest.raises(WriterStateError, match="already configured"):
            writer.configure("UTF8/JSON")

    def test_configure_after_write_rejected(self, recording_sink):
        writer = RecodingWriter(recording_sink)
        writer.write("text")
        with pytest.raises(WriterStateError, match="first write"):
            writer.configure("UTF8/XML")

    def test_configure_with_missing_codec_fails_before_writing(self, recording_sink):
        writer = RecodingWriter(recording_sink)
        with pytest.raises(NoTransformAvailableError):
            writer.configure("UTF8/WIKI")
        assert recording_sink.writes == []

    def test_non_stream_safe_pipeline_warns(self, recording_sink, caplog):
        with caplog.at_level(logging.WARNING, logger="recoder.writer"):
            RecodingWriter(recording_sink, "UTF8/ABBREV(3)")
        assert "UTF8->ABBREV" in caplog.text

    def test_non_stream_safe_pipeline_recodes_each_write(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/ABBREV(3)")
        writer.write("abcdef")
        writer.write("gh")
        assert recording_sink.getvalue() == "abc...gh"

    def test_close_closes_downstream(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/XML")
        writer.close()
        assert recording_sink.closed
        assert writer.closed

    def test_close_can_keep_downstream_open(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/XML", close_downstream=False)
        writer.close()
        assert not recording_sink.closed
        assert recording_sink.flushes == 1

    def test_close_is_idempotent(self, recording_sink):
        writer = RecodingWriter(recording_sink)
        writer.close()
        writer.close()
        assert recording_sink.closed

    def test_write_after_close_rejected(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/XML")
        writer.close()
        with pytest.raises(WriterStateError):
            writer.write("x")
        assert not writer.writable()

    def test_configure_after_close_rejected(self, recording_sink):
        writer = RecodingWriter(recording_sink)
        writer.close()
        with pytest.raises(WriterStateError):
            writer.configure("UTF8/XML")

    def test_flush_forwards_to_downstream(self, recording_sink):
        writer = RecodingWriter(recording_sink, "UTF8/XML")
        writer.flush()
        assert recording_sink.flushes == 1

    def test_context_manager_closes(self, recording_sink):
        with RecodingWriter(recording_sink, "UTF8/XML") as writer:
            writer.writelines(["<", ">"])
        assert recording_sink.getvalue() == "&lt;&gt;"
        assert recording_sink.closed

    def test_writers_can_be_stacked(self):
        sink = io.StringIO()
        inner = RecodingWriter(sink, INDENT_RECIPE, close_downstream=False)
        with RecodingWriter(inner, "UTF8/XML") as outer:
            outer.write("a<b\nc")
        assert sink.getvalue() == ">a&lt;b\n>c"
        assert inner.closed

    def test_repr_shows_recipe(self):
        writer = RecodingWriter(io.StringIO(), "UTF8/XML")
        assert "UTF8/XML" in repr(writer)
