"""Tests for the action codec."""

import pytest
from b64sidecar.modules.actions import (ACTION_HANDLERS, Action, base64_decode,
                                        base64_encode, run_action)
from b64sidecar.modules.errors import DecodeError, UnknownActionError


class TestAction:
    """Test the Action enum."""

    def test_enum_values(self):
        """Test that enum values match the wire names."""
        assert Action.BASE64_ENCODE.value == "base64_encode"
        assert Action.BASE64_DECODE.value == "base64_decode"

    def test_from_string(self):
        assert Action.from_string("base64_encode") is Action.BASE64_ENCODE
        assert Action.from_string("base64_decode") is Action.BASE64_DECODE

    @pytest.mark.parametrize("name", ["foo", "", "BASE64_ENCODE", "base64_encode "])
    def test_from_string_unknown(self, name):
        """Test that anything but the exact names is rejected."""
        with pytest.raises(UnknownActionError) as exc_info:
            Action.from_string(name)
        assert exc_info.value.action == name
        assert exc_info.value.message == f"unknown action: {name}"

    def test_every_action_has_a_handler(self):
        assert set(ACTION_HANDLERS) == set(Action)

    def test_every_action_has_a_description(self):
        for action in Action:
            assert action.description


class TestEncode:
    """Test base64 encoding."""

    def test_hello(self):
        assert base64_encode("hello") == "aGVsbG8="

    def test_empty(self):
        assert base64_encode("") == ""

    def test_uses_standard_alphabet(self):
        """Bytes 0xfb 0xff encode with '+' and '/' rather than URL-safe characters."""
        # "ûÿ" is c3 bb c3 bf in UTF-8
        assert base64_encode("ûÿ") == "w7vDvw=="
        assert base64_encode("??>") == "Pz8+"
        assert base64_encode("???") == "Pz8/"

    def test_unicode_is_encoded_as_utf8(self):
        assert base64_encode("héllo") == "aMOpbGxv"

    def test_lone_surrogate_becomes_replacement_character(self):
        assert base64_encode("\ud800") == "77+9"
        assert base64_encode("a\udfffb") == base64_encode("a\ufffdb")

    def test_deterministic(self):
        assert base64_encode("same input") == base64_encode("same input")


class TestDecode:
    """Test base64 decoding."""

    def test_hello(self):
        assert base64_decode("aGVsbG8=") == "hello"

    def test_empty(self):
        assert base64_decode("") == ""

    def test_line_breaks_are_ignored(self):
        assert base64_decode("aGVs\nbG8=\r\n") == "hello"

    def test_invalid_characters(self):
        with pytest.raises(DecodeError) as exc_info:
            base64_decode("!!!not-base64!!!")
        assert exc_info.value.message.startswith("illegal base64 data")

    def test_url_safe_alphabet_rejected(self):
        with pytest.raises(DecodeError):
            base64_decode("Pz8-")

    def test_missing_padding(self):
        with pytest.raises(DecodeError) as exc_info:
            base64_decode("aGVsbG8")
        assert "multiple of 4" in exc_info.value.message

    def test_embedded_space_rejected(self):
        with pytest.raises(DecodeError):
            base64_decode("aGVs bG8=")

    def test_non_ascii_input(self):
        with pytest.raises(DecodeError):
            base64_decode("éééé")

    def test_invalid_utf8_is_replaced(self):
        """A lone 0xff byte decodes to the replacement character."""
        assert base64_decode("/w==") == "�"


class TestRoundTrip:
    """Decoding an encoded value gives the original text back."""

    @pytest.mark.parametrize(
        "text",
        ["", "a", "ab", "abc", "hello world", "line\nbreaks\r\n", "日本語テキスト", "emoji 🎉", "\x00\x01"],
    )
    def test_round_trip(self, text):
        assert base64_decode(base64_encode(text)) == text

    def test_run_action(self):
        encoded = run_action(Action.BASE64_ENCODE, "hello")
        assert run_action(Action.BASE64_DECODE, encoded) == "hello"
