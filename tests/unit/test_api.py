"""Unit tests for the high-level recoding functions."""

import io

import pytest

import recoder
from recoder.api import recode, recode_by_string, recode_pair
from recoder.constants import FormatTag
from recoder.exceptions import NoTransformAvailableError, UnknownFormatTagError
from recoder.pipeline import RecodingPipeline, RecodingStep
from recoder.state import RecodingTargetState


@pytest.mark.unit
class TestRecode:
    """Tests for recode()."""

    def test_returns_string_without_sink(self):
        assert recode("a b", "UTF8/URI") == "a%20b"

    def test_accepts_built_pipeline(self):
        pipeline = RecodingPipeline((RecodingStep(FormatTag.UTF8), RecodingStep(FormatTag.XML)))
        assert recode("<", pipeline) == "&lt;"

    def test_returns_given_sink(self, recording_sink):
        result = recode("<", "UTF8/XML", sink=recording_sink)
        assert result is recording_sink
        assert recording_sink.getvalue() == "&lt;"

    def test_appends_to_sink(self):
        sink = io.StringIO()
        sink.write("x=")
        recode("a&b", "UTF8/XML", sink=sink)
        assert sink.getvalue() == "x=a&amp;b"

    def test_reads_stream(self):
        assert recode(io.StringIO("a b"), "UTF8/URIFORM") == "a+b"

    def test_threads_state(self):
        state = RecodingTargetState()
        first = recode("a", 'UTF8/INDENT(">",1)', state=state)
        second = recode("b\nc", 'UTF8/INDENT(">",1)', state=state)
        assert first + second == ">ab\n>c"

    def test_private_registry(self, empty_registry):
        with pytest.raises(NoTransformAvailableError):
            recode("x", "UTF8/XML", registry=empty_registry)

    def test_identity_pipeline(self, empty_registry):
        assert recode("unchanged", "UTF8/UTF8", registry=empty_registry) == "unchanged"


@pytest.mark.unit
class TestRecodeByString:
    """Tests for recode_by_string()."""

    def test_multi_step_recipe(self):
        assert recode_by_string("hello%20world", "URI/UTF8/ABBREV(5)") == "hello..."

    def test_unknown_tag(self):
        with pytest.raises(UnknownFormatTagError):
            recode_by_string("x", "UTF8/BOGUS")

    def test_missing_codec(self):
        with pytest.raises(NoTransformAvailableError) as exc_info:
            recode_by_string("x", "UTF8/WIKI")
        assert exc_info.value.source_tag == "UTF8"
        assert exc_info.value.target_tag == "WIKI"

    def test_tags_are_case_insensitive(self):
        assert recode_by_string("<", "utf8/xml") == "&lt;"


@pytest.mark.unit
class TestRecodePair:
    """Tests for recode_pair()."""

    def test_with_tag_names(self):
        assert recode_pair("fooBar", "MC", "LCU") == "foo_bar"

    def test_with_tags(self):
        assert recode_pair("fooBar", FormatTag.MC, FormatTag.UCU) == "FOO_BAR"

    def test_same_tag_is_identity(self):
        assert recode_pair("a<b", "XML", "XML") == "a<b"

    def test_options_go_to_target(self):
        assert recode_pair("abcdef", "UTF8", "ABBREV", 2, "!") == "ab!"


@pytest.mark.unit
class TestPackageExports:
    """Tests for the names exported by the package."""

    def test_version(self):
        assert recoder.__version__

    def test_all_names_exist(self):
        for name in recoder.__all__:
            assert hasattr(recoder, name), name
