import pytest

from volta.sources import (
    ActiveSession,
    TranscriptSource,
    UnknownSourceError,
    extract_plan_json,
    get_source,
    register_source,
    window_id_from_session_key,
)
from volta.transcript import ParsedEntry


class _FakeSource(TranscriptSource):
    def __init__(self, label, sessions=()):
        self._label = label
        self._sessions = list(sessions)

    @property
    def name(self):
        return self._label

    def discover_sessions(self):
        return list(self._sessions)

    def read_new_entries(self, session, last_offset):
        return [ParsedEntry(role="assistant", content_type="text", text=session.key)], last_offset + 1

    def extract_status_line(self, pane_text):
        return pane_text or None

    def is_interactive_ui(self, pane_text):
        return "?" in pane_text


@pytest.mark.parametrize(
    "key, expected",
    [
        ("tramuntana:@5", "@5"),
        ("session:@12", "@12"),
        ("a:b:@3", "@3"),
        ("nowindow", ""),
    ],
)
def test_window_id_from_session_key(key, expected):
    assert window_id_from_session_key(key) == expected


def test_register_and_get_source():
    session = ActiveSession(key="s:@1", window_id="@1")
    source = _FakeSource("fake-register", [session])
    register_source("fake-register", source)
    found = get_source("fake-register")
    assert found is source
    assert found.discover_sessions() == [session]
    entries, offset = found.read_new_entries(session, 4)
    assert offset == 5
    assert entries[0].text == "s:@1"


def test_register_replaces_existing():
    first = _FakeSource("one")
    second = _FakeSource("two")
    register_source("fake-replace", first)
    register_source("fake-replace", second)
    assert get_source("fake-replace").name == "two"


def test_get_unknown_source_raises():
    with pytest.raises(UnknownSourceError) as info:
        get_source("no-such-source")
    assert "no-such-source" in str(info.value)
    assert isinstance(info.value, LookupError)


def test_transcript_source_is_abstract():
    with pytest.raises(TypeError):
        TranscriptSource()


def test_extract_plan_json_with_surrounding_text():
    assert extract_plan_json('intro PLAN_JSON: [{"a":1}] trailing') == (
        '[{"a":1}]',
        "intro  trailing",
    )


def test_extract_plan_json_only_plan():
    assert extract_plan_json("PLAN_JSON:\n[1, [2]]") == ("[1, [2]]", "")


def test_extract_plan_json_no_marker():
    assert extract_plan_json("just some text [1]") is None


def test_extract_plan_json_incomplete():
    assert extract_plan_json('PLAN_JSON: [{"a":') is None


def test_extract_plan_json_not_array():
    assert extract_plan_json('PLAN_JSON: {"a": 1}') is None


def test_extract_plan_json_brackets_in_strings():
    assert extract_plan_json('PLAN_JSON: ["a]b", ["c"]] done') == ('["a]b", ["c"]]', "done")


def test_extract_plan_json_escaped_quote():
    text = r'PLAN_JSON: ["a\"]"]'
    assert extract_plan_json(text) == (r'["a\"]"]', "")