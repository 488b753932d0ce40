import pytest

from textdecode.classifier import classify
from textdecode.kinds import EncodingKind


@pytest.mark.parametrize(
    "text, expected",
    [
        ("\\72\\101\\108\\108\\111", EncodingKind.DECIMAL),
        ("48656c6c6f", EncodingKind.HEX),
        ("48 65 6c 6c 6f 21", EncodingKind.HEX),
        ("SGVsbG8=", EncodingKind.BASE64),
        ("Hello%20World", EncodingKind.URL),
        ("Khoor", EncodingKind.CAESAR),
        ("Uryyb, jbeyq!", EncodingKind.CAESAR),
    ],
)
def test_classify_literal_shapes(text, expected):
    assert classify(text) is expected


def test_plain_digits_prefer_decimal_over_hex():
    # also a valid hex string and a valid base64 length
    assert classify("12345678") is EncodingKind.DECIMAL


def test_odd_length_hex_falls_through():
    # 9 hex digits: not hex; not base64 (length); no percent -> caesar
    assert classify("48656c6c6") is EncodingKind.CAESAR


def test_hex_checked_before_base64():
    assert classify("deadbeef") is EncodingKind.HEX


def test_base64_requires_length_multiple_of_four():
    assert classify("SGVsbG8") is EncodingKind.CAESAR
    assert classify("SGVsbG8h") is EncodingKind.BASE64


def test_url_requires_percent_and_safe_charset():
    assert classify("a%2Fb") is EncodingKind.URL
    assert classify("a%2F b") is EncodingKind.CAESAR
    assert classify("plain-text_only.~") is EncodingKind.CAESAR


def test_backslashes_alone_are_not_decimal():
    assert classify("\\\\") is EncodingKind.CAESAR


def test_empty_text_falls_back_to_caesar():
    assert classify("") is EncodingKind.CAESAR


def test_classify_is_deterministic():
    samples = ["SGVsbG8=", "12345678", "Khoor", "Hello%20World", "ab cd"]
    first = [classify(s) for s in samples]
    for _ in range(3):
        assert [classify(s) for s in samples] == first
