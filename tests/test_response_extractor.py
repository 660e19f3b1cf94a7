import pytest

from services.commentary.response_extractor import extract_json_object


def test_extracts_object_wrapped_in_prose():
    raw = 'blah {"commentary":"x","topic":"Sports","confidence":0.8} blah'
    assert extract_json_object(raw) == {"commentary": "x", "topic": "Sports", "confidence": 0.8}


def test_extracts_object_inside_code_fence():
    raw = '```json\n{"commentary": "", "topic": "News", "confidence": 0.1}\n```'
    assert extract_json_object(raw) == {"commentary": "", "topic": "News", "confidence": 0.1}


def test_nested_objects_survive():
    raw = '{"commentary": "a", "advantage": {"red": 0.6, "blue": 0.4, "reason": "r"}}'
    assert extract_json_object(raw)["advantage"] == {"red": 0.6, "blue": 0.4, "reason": "r"}


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "no braces at all",
        "only an opening { here",
        "only a closing } here",
        "} reversed {",
        "{not: valid json}",
        '{"commentary": "x"} and a stray } afterwards',
    ],
)
def test_returns_none_when_no_object_can_be_read(raw):
    assert extract_json_object(raw) is None
