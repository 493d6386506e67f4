"""Unit tests for the escaping codecs."""

import hashlib

import pytest
from hypothesis import given
from hypothesis import strategies as st

from recoder.api import recode_by_string
from recoder.codecs.escaping import (
    decode_base64,
    encode_base64,
    escape_filename_char,
    escape_uri_char,
    escape_vsa,
    escape_vsau,
    sha1_hex,
    unescape_uri,
    unescape_vsa,
)
from recoder.exceptions import RecodingError


@pytest.mark.unit
class TestUri:
    """Tests for URI percent escaping."""

    @pytest.mark.parametrize(
        "char,expected",
        [
            ("a", "a"),
            ("Z", "Z"),
            ("7", "7"),
            ("-", "-"),
            ("~", "~"),
            ("(", "("),
            (" ", "%20"),
            ("/", "%2F"),
            (",", "%2C"),
            ("%", "%25"),
            ("\n", "%0A"),
            ("\x7f", "%7F"),
            ("é", "%E9"),
            ("€", "%{20AC}"),
            ("😀", "%{01F600}"),
        ],
    )
    def test_escape_char(self, char, expected):
        assert escape_uri_char(char) == expected

    def test_decode_both_escape_forms(self):
        assert unescape_uri("a%20b%{20AC}%e9") == "a b€é"

    def test_malformed_escapes_are_kept(self):
        assert unescape_uri("100% %zz %4") == "100% %zz %4"

    def test_escape_beyond_unicode_range(self):
        with pytest.raises(RecodingError):
            unescape_uri("%{FFFFFF}")

    def test_pipeline_reescapes(self):
        assert recode_by_string("%20,%2F", "URI/UTF8/URI") == "%20%2C%2F"

    @given(st.text())
    def test_round_trip(self, text):
        assert unescape_uri("".join(map(escape_uri_char, text))) == text


@pytest.mark.unit
class TestForm:
    """Tests for HTML form encoding."""

    def test_encode(self):
        assert recode_by_string("a b&c=d*", "UTF8/URIFORM") == "a+b%26c%3Dd*"

    def test_decode(self):
        assert recode_by_string("a+b%26c", "URIFORM/UTF8") == "a b&c"

    def test_decode_invalid_utf8(self):
        with pytest.raises(RecodingError):
            recode_by_string("%FF", "URIFORM/UTF8")

    @given(st.text())
    def test_round_trip(self, text):
        assert recode_by_string(recode_by_string(text, "UTF8/URIFORM"), "URIFORM/UTF8") == text


@pytest.mark.unit
class TestVariableNames:
    """Tests for the underscore escaping of variable names."""

    def test_escape_vsa(self):
        assert escape_vsa("1 a.b") == "_31_20a_2Eb"

    def test_vsa_escapes_underscore(self):
        assert escape_vsa("a_b") == "a_5Fb"

    def test_vsau_keeps_underscore(self):
        assert escape_vsau("a_b") == "a_b"

    def test_multibyte_characters_escape_each_byte(self):
        assert escape_vsa("é") == "_C3_A9"

    def test_decode(self):
        assert unescape_vsa("_C3_A9t_C3_A9") == "été"

    def test_decode_invalid_utf8(self):
        with pytest.raises(RecodingError):
            unescape_vsa("_FF")

    @given(st.text())
    def test_round_trip(self, text):
        assert recode_by_string(escape_vsa(text), "VSA/UTF8") == text


@pytest.mark.unit
class TestFilenameAndDigests:
    """Tests for file name escaping, SHA-1 and base64."""

    def test_filename_replaces_unsafe_bytes(self):
        assert recode_by_string("a b/c.txt", "UTF8/FILENAME") == "a_b_c.txt"

    def test_filename_replaces_each_utf8_byte(self):
        assert escape_filename_char("é") == "__"

    def test_sha1_is_uppercase_hex(self):
        expected = hashlib.sha1("hello".encode("utf-8")).hexdigest().upper()
        assert sha1_hex("hello") == expected
        assert recode_by_string("hello", "UTF8/SHA1") == expected

    def test_base64_encode(self):
        assert encode_base64("hé") == "aMOp"

    def test_base64_decode_ignores_whitespace(self):
        assert decode_base64("aM\nOp") == "hé"

    def test_base64_decode_invalid(self):
        with pytest.raises(RecodingError):
            recode_by_string("not base64!", "BASE64/UTF8")

    @given(st.text())
    def test_base64_round_trip(self, text):
        assert recode_by_string(recode_by_string(text, "UTF8/BASE64"), "BASE64/UTF8") == text
