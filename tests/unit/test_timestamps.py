from __future__ import annotations

import pytest

from linguasync.subtitles.timestamps import decode, encode


def test_encode_pads_fields() -> None:
    assert encode(0) == "00:00:00.000"
    assert encode(3.5) == "00:00:03.500"
    assert encode(3725.042) == "01:02:05.042"


def test_encode_carries_rounded_milliseconds() -> None:
    assert encode(59.9996) == "00:01:00.000"
    assert encode(3599.9999) == "01:00:00.000"


def test_encode_clamps_negative_and_non_finite() -> None:
    assert encode(-4.2) == "00:00:00.000"
    assert encode(float("nan")) == "00:00:00.000"


def test_encode_keeps_wide_hours() -> None:
    assert encode(100 * 3600 + 1.25) == "100:00:01.250"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("00:00:01.000", 1.0),
        ("01:02:05.042", 3725.042),
        ("02:03.500", 123.5),
        ("  00:00:04.250 ", 4.25),
    ],
)
def test_decode_accepts_both_shapes(text: str, expected: float) -> None:
    assert decode(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "12", "a:b:c", "1:2:3:4", "00:00:nan", "00:-01:00.000"])
def test_decode_is_lenient(text: str) -> None:
    assert decode(text) == 0.0


@pytest.mark.parametrize("seconds", [0.0, 0.001, 1.2345, 59.999, 61.5, 4000.123])
def test_round_trip_within_a_millisecond(seconds: float) -> None:
    assert abs(decode(encode(seconds)) - seconds) <= 0.001


def test_decode_examples() -> None:
    assert decode("01:02:03.250") == pytest.approx(3723.25)
    assert decode("02:03.250") == pytest.approx(123.25)
    assert decode("garbage") == 0.0
