import pytest

from utils.errors import InvalidInput, PayloadTooLarge
from utils.media_validation import (
    ensure_frames_present,
    ensure_frames_within_limit,
    estimate_bytes_from_base64,
    strip_data_url_prefix,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("data:image/jpeg;base64,AAAA", "AAAA"),
        ("AAAA", "AAAA"),
        ("data:image/jpeg;base64,", ""),
        (None, ""),
        ("", ""),
    ],
)
def test_strip_data_url_prefix(value, expected):
    assert strip_data_url_prefix(value) == expected


@pytest.mark.parametrize(
    "b64, expected",
    [("", 0), ("AAAA", 3), ("AAA=", 2), ("AA==", 1), ("A" * 700_000, 525_000)],
)
def test_estimate_bytes_from_base64(b64, expected):
    assert estimate_bytes_from_base64(b64) == expected


def test_missing_frame_is_invalid_input():
    with pytest.raises(InvalidInput) as excinfo:
        ensure_frames_present("", "AAAA", "s1")
    assert excinfo.value.session_id == "s1"
    assert excinfo.value.status_code == 400


def test_oversized_frame_reports_sizes():
    with pytest.raises(PayloadTooLarge) as excinfo:
        ensure_frames_within_limit("AAAA", "A" * 700_000, 500 * 1024, "s1")
    assert excinfo.value.detail == {"curBytes": 525_000, "prevBytes": 3, "maxBytesPerImage": 512_000}
    assert excinfo.value.to_body()["sessionId"] == "s1"


def test_frames_at_the_limit_pass():
    limit_b64 = "A" * 682_667
    assert ensure_frames_within_limit(limit_b64, "AAAA", 512_000, "s1") == (512_000, 3)
