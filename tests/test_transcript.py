import pytest

from volta.transcript import (
    ContentBlock,
    Entry,
    PendingTool,
    clean_text,
    format_tool_use_summary,
    parse_entries,
    parse_line,
)


def test_parse_line_assistant_text():
    entry = parse_line(b'{"type":"assistant","message":{"content":[{"type":"text","text":"Hello world"}]}}')
    assert entry.type == "assistant"
    assert len(entry.blocks) == 1
    assert entry.blocks[0].type == "text"
    assert entry.blocks[0].text == "Hello world"


def test_parse_line_user_text():
    entry = parse_line('{"type":"user","message":{"content":"fix the bug"}}')
    assert entry.type == "user"
    assert len(entry.blocks) == 1
    assert entry.blocks[0].text == "fix the bug"


def test_parse_line_tool_use():
    entry = parse_line(
        '{"type":"assistant","message":{"content":[{"type":"tool_use","id":"tu_123","name":"Read","input":{"file_path":"/tmp/test.go"}}]}}'
    )
    assert len(entry.blocks) == 1
    block = entry.blocks[0]
    assert block.type == "tool_use"
    assert block.tool_name == "Read"
    assert block.tool_use_id == "tu_123"
    assert block.tool_input == "/tmp/test.go"


def test_parse_line_tool_result():
    entry = parse_line(
        '{"type":"user","message":{"content":[{"type":"tool_result","tool_use_id":"tu_123","content":"file contents here","is_error":false}]}}'
    )
    assert len(entry.blocks) == 1
    block = entry.blocks[0]
    assert block.type == "tool_result"
    assert block.tool_use_id == "tu_123"
    assert block.content == "file contents here"
    assert block.is_error is False


def test_parse_line_tool_result_error():
    entry = parse_line(
        '{"type":"user","message":{"content":[{"type":"tool_result","tool_use_id":"tu_err","content":"command failed","is_error":true}]}}'
    )
    assert entry.blocks[0].is_error is True


def test_parse_line_thinking():
    entry = parse_line(
        '{"type":"assistant","message":{"content":[{"type":"thinking","thinking":"Let me think about this..."}]}}'
    )
    assert len(entry.blocks) == 1
    assert entry.blocks[0].type == "thinking"
    assert entry.blocks[0].text == "Let me think about this..."


def test_parse_line_summary():
    entry = parse_line('{"type":"summary","message":{"content":"summary text"}}')
    assert entry.type == "summary"
    assert entry.blocks == []


def test_parse_line_unknown_type():
    assert parse_line('{"type":"system","message":{}}') is None


def test_parse_line_missing_type():
    assert parse_line('{"message":{}}') is None


def test_parse_line_invalid_json():
    with pytest.raises(ValueError):
        parse_line(b"not json")


def test_parse_line_non_object():
    with pytest.raises(ValueError):
        parse_line("[1, 2, 3]")


def test_parse_line_multiple_blocks():
    entry = parse_line(
        '{"type":"assistant","message":{"content":[{"type":"text","text":"Looking at the file"},{"type":"tool_use","id":"tu_1","name":"Read","input":{"file_path":"main.go"}}]}}'
    )
    assert [b.type for b in entry.blocks] == ["text", "tool_use"]


def test_parse_line_without_message():
    entry = parse_line('{"type":"user"}')
    assert entry.type == "user"
    assert entry.blocks == []


def test_parse_line_skips_unknown_block_types():
    entry = parse_line(
        '{"type":"assistant","message":{"content":[{"type":"image"},{"type":"text","text":"hi"}]}}'
    )
    assert [b.type for b in entry.blocks] == ["text"]


def test_tool_pairing_same_batch():
    pending = {}
    entry1 = parse_line(
        '{"type":"assistant","message":{"content":[{"type":"tool_use","id":"tu_abc","name":"Read","input":{"file_path":"main.go"}}]}}'
    )
    entry2 = parse_line(
        '{"type":"user","message":{"content":[{"type":"tool_result","tool_use_id":"tu_abc","content":"package main\\n"}]}}'
    )
    results = parse_entries([entry1, entry2], pending)
    assert len(results) == 1
    assert results[0].content_type == "tool_result"
    assert results[0].tool_name == "Read"
    assert results[0].tool_input == "main.go"
    assert results[0].text == "package main\n"
    assert pending == {}


def test_tool_pairing_cross_cycle():
    pending = {}
    entry1 = parse_line(
        '{"type":"assistant","message":{"content":[{"type":"tool_use","id":"tu_cross","name":"Bash","input":{"command":"ls"}}]}}'
    )
    first = parse_entries([entry1], pending)
    assert len(pending) == 1
    assert first[0].content_type == "tool_use"
    assert first[0].text == "**Bash**(ls)"
    assert pending["tu_cross"] == PendingTool("tu_cross", "Bash", "ls", "**Bash**(ls)")

    entry2 = parse_line(
        '{"type":"user","message":{"content":[{"type":"tool_result","tool_use_id":"tu_cross","content":"file1\\nfile2\\n"}]}}'
    )
    results = parse_entries([entry2], pending)
    assert len(results) == 1
    assert results[0].tool_name == "Bash"
    assert pending == {}


def test_unmatched_tool_result_is_unknown():
    entry = Entry(
        type="user",
        blocks=[ContentBlock(type="tool_result", tool_use_id="tu_x", content="out", is_error=True)],
    )
    results = parse_entries([entry], {})
    assert len(results) == 1
    assert results[0].tool_name == "unknown"
    assert results[0].is_error is True
    assert results[0].role == "user"


@pytest.mark.parametrize(
    ("name", "tool_input", "expected"),
    [
        ("Read", "main.go", "**Read**(main.go)"),
        ("Bash", "ls -la", "**Bash**(ls -la)"),
        ("Task", "", "**Task**()"),
    ],
)
def test_format_tool_use_summary(name, tool_input, expected):
    assert format_tool_use_summary(name, tool_input) == expected


def test_clean_text_strips_tags():
    assert clean_text("Hello <system-reminder>secret</system-reminder> world") == "Hello  world"


def test_clean_text_preserves_normal():
    assert clean_text("Hello world") == "Hello world"


def test_clean_text_strips_multiline_bash_tags():
    assert clean_text("<bash-stdout attr=1>a\nb</bash-stdout>\n done ") == "done"


def test_parse_entries_text_and_thinking():
    entry = parse_line(
        '{"type":"assistant","message":{"content":[{"type":"thinking","thinking":"deep thought"},{"type":"text","text":"The answer is 42"}]}}'
    )
    results = parse_entries([entry], {})
    assert [r.content_type for r in results] == ["thinking", "text"]
    assert results[1].text == "The answer is 42"
    assert results[1].role == "assistant"


def test_parse_entries_drops_empty_text_and_none():
    entry = parse_line(
        '{"type":"user","message":{"content":[{"type":"text","text":"<system-reminder>x</system-reminder>"}]}}'
    )
    assert parse_entries([None, entry], {}) == []


def test_tool_result_content_array():
    entry = parse_line(
        '{"type":"user","message":{"content":[{"type":"tool_result","tool_use_id":"tu_arr","content":[{"type":"text","text":"line1"},{"type":"text","text":"line2"}]}]}}'
    )
    assert len(entry.blocks) == 1
    assert entry.blocks[0].content == "line1\nline2"