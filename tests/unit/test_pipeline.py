"""Unit tests for recoding steps, pipelines and the recipe parser."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from recoder.constants import FormatTag
from recoder.exceptions import PipelineSyntaxError, UnknownFormatTagError
from recoder.pipeline import RecodingPipeline, RecodingStep, parse_pipeline, parse_step


@pytest.mark.unit
class TestParseStep:
    """Tests for parsing single recipe tokens."""

    def test_plain_tag(self):
        assert parse_step("URI") == RecodingStep(FormatTag.URI)

    def test_tag_is_case_insensitive(self):
        assert parse_step("utf8").tag is FormatTag.UTF8

    def test_empty_token_is_barrier(self):
        assert parse_step("").is_barrier

    def test_integer_option(self):
        step = parse_step("ABBREV(8)")
        assert step.tag is FormatTag.ABBREV
        assert step.options == (8,)
        assert isinstance(step.options[0], int)

    def test_bracket_options(self):
        assert parse_step("ABBREV[8]").options == (8,)

    def test_quoted_option_loses_quotes(self):
        assert parse_step('INDENT("  ",2)').options == ("  ", 2)

    def test_single_quote_character_is_literal(self):
        assert parse_step('FIXED(4,",R)').options == (4, '"', "R")

    def test_empty_quoted_option(self):
        assert parse_step('ABBREV(3,"")').options == (3, "")

    def test_unquoted_text_option_is_literal(self):
        assert parse_step("FIXED(10,*,R)").options == (10, "*", "R")

    def test_empty_options_keep_positions(self):
        assert parse_step("FIXED(,,R)").options == ("", "", "R")

    def test_signed_number_stays_text(self):
        assert parse_step("ABBREV(-3)").options == ("-3",)

    def test_empty_option_list(self):
        assert parse_step("ABBREV()").options == ()

    def test_unterminated_option_list(self):
        with pytest.raises(PipelineSyntaxError) as exc_info:
            parse_step("ABBREV(8", recipe="UTF8/ABBREV(8")
        assert exc_info.value.token == "ABBREV(8"
        assert exc_info.value.recipe == "UTF8/ABBREV(8"

    def test_unknown_tag(self):
        with pytest.raises(UnknownFormatTagError) as exc_info:
            parse_step("NOPE(1)")
        assert exc_info.value.token == "NOPE"


@pytest.mark.unit
class TestParsePipeline:
    """Tests for parsing whole recipes."""

    def test_steps_in_order(self):
        pipeline = parse_pipeline("URI/UTF8/ABBREV(8)")
        assert [step.tag for step in pipeline] == [FormatTag.URI, FormatTag.UTF8, FormatTag.ABBREV]
        assert pipeline[2].options == (8,)

    def test_barrier_token(self):
        pipeline = parse_pipeline("URI/UTF8//UTF8/ABBREV(8)")
        assert len(pipeline) == 5
        assert pipeline[2].is_barrier

    def test_unknown_tag_is_named(self):
        with pytest.raises(UnknownFormatTagError, match="NOPE"):
            parse_pipeline("URI/NOPE")

    def test_unknown_tag_after_valid_steps_fails_whole_recipe(self):
        with pytest.raises(UnknownFormatTagError):
            parse_pipeline("URI/UTF8/XML/WHAT")

    def test_single_step_is_identity(self):
        assert parse_pipeline("UTF8").is_identity

    def test_empty_recipe_is_a_single_barrier(self):
        pipeline = parse_pipeline("")
        assert len(pipeline) == 1
        assert pipeline.transitions() == []


@pytest.mark.unit
class TestRecodingPipeline:
    """Tests for pipeline structure."""

    def test_transitions_skip_barriers(self):
        pipeline = parse_pipeline("URI/UTF8//UTF8/ABBREV(8)")
        pairs = [(source.tag, target.tag) for source, target in pipeline.transitions()]
        assert pairs == [(FormatTag.URI, FormatTag.UTF8), (FormatTag.UTF8, FormatTag.ABBREV)]

    def test_leading_and_trailing_barriers(self):
        pipeline = parse_pipeline("/URI/UTF8/")
        assert [(s.tag, t.tag) for s, t in pipeline.transitions()] == [(FormatTag.URI, FormatTag.UTF8)]

    def test_consecutive_barriers(self):
        assert parse_pipeline("URI///UTF8").transitions() == []

    def test_identity_detection(self):
        assert parse_pipeline("UTF8/UTF8").is_identity
        assert not parse_pipeline("UTF8/XML").is_identity

    def test_of_accepts_mixed_step_forms(self):
        pipeline = RecodingPipeline.of("URI", FormatTag.UTF8, None, "utf8", (FormatTag.ABBREV, 8))
        assert pipeline == parse_pipeline("URI/UTF8//UTF8/ABBREV(8)")

    def test_of_rejects_unknown_values(self):
        with pytest.raises(TypeError):
            RecodingPipeline.of(3.5)

    def test_slicing_returns_pipeline(self):
        pipeline = parse_pipeline("URI/UTF8/XML")
        assert isinstance(pipeline[1:], RecodingPipeline)
        assert pipeline[1:].to_recipe() == "UTF8/XML"

    def test_pipelines_are_hashable_values(self):
        assert hash(parse_pipeline("UTF8/XML")) == hash(RecodingPipeline.of("UTF8", "XML"))

    def test_to_recipe_quotes_text_options(self):
        pipeline = RecodingPipeline.of("UTF8", (FormatTag.FIXED, 4, "*", "R"))
        assert pipeline.to_recipe() == 'UTF8/FIXED(4,"*","R")'

    def test_to_recipe_rejects_separator_in_option(self):
        step = RecodingStep(FormatTag.REGEXP, ("a/b",))
        with pytest.raises(PipelineSyntaxError):
            step.to_recipe()

    def test_barrier_cannot_carry_options(self):
        with pytest.raises(ValueError):
            RecodingStep(None, (1,))

    @given(
        st.lists(
            st.one_of(
                st.none(),
                st.tuples(
                    st.sampled_from(list(FormatTag)),
                    st.lists(
                        st.one_of(
                            st.integers(min_value=0, max_value=10_000),
                            st.text(
                                alphabet=st.characters(exclude_characters='/,"()[]', exclude_categories=("Cs",)),
                            ),
                        ),
                        max_size=3,
                    ),
                ),
            ),
            min_size=1,
            max_size=6,
        )
    )
    def test_recipe_form_parses_back(self, raw_steps):
        steps = [None if raw is None else (raw[0], *raw[1]) for raw in raw_steps]
        pipeline = RecodingPipeline.of(*steps)
        assert parse_pipeline(pipeline.to_recipe()) == pipeline
