import io
import json

import pytest

from consola.format import FormatOptions, SegmentStyle
from consola.record import ArgValue, LogRecord
from consola.reporters import (
    BasicReporter,
    FancyReporter,
    JsonReporter,
    MemoryReporter,
    Reporter,
    apply_style,
    map_color,
)
from consola.utils import BoxBuilder, strip_ansi


@pytest.fixture(autouse=True)
def _no_columns(monkeypatch):
    monkeypatch.delenv("COLUMNS", raising=False)


def _chain(*messages):
    err = None
    for message in messages:
        new = RuntimeError(message)
        new.__cause__ = err
        err = new
    return err


def _render(reporter, record):
    stream = io.StringIO()
    reporter.emit(record, stream)
    return stream.getvalue()


def test_basic_single_line():
    reporter = BasicReporter(FormatOptions(date=False, colors=True))
    out = _render(reporter, LogRecord.new("info", None, ["Simple log message"]))
    assert out == "\x1b[36;1m[info]\x1b[0m Simple log message\n"
    assert strip_ansi(out) == "[info] Simple log message\n"


def test_basic_without_colors():
    reporter = BasicReporter(FormatOptions(date=False, colors=False))
    out = _render(reporter, LogRecord.new("warn", "db", ["slow"]))
    assert out == "[warn] [db] slow\n"


def test_basic_error_chain_hidden_without_additional():
    reporter = BasicReporter(
        FormatOptions(date=False, colors=True, show_stack=True, error_level=3)
    )
    err = _chain("lowest level error", "middle error", "top error")
    record = LogRecord.new("error", None, ["Error occurred"]).attach_error(err)
    out = _render(reporter, record)
    assert strip_ansi(out) == "[error] Error occurred top error\n"


def test_basic_wraps_when_too_wide():
    reporter = BasicReporter(FormatOptions(date=False, colors=False, columns=10))
    out = _render(reporter, LogRecord.new("info", None, ["hello world"]))
    assert out == "[info]\nhello world\n"


def test_basic_fits_exact_width():
    reporter = BasicReporter(FormatOptions(date=False, colors=False, columns=17))
    out = _render(reporter, LogRecord.new("info", None, ["hello world"]))
    assert out == "[info] hello world\n"


def test_basic_with_date():
    reporter = BasicReporter(FormatOptions(date=True, colors=True))
    out = _render(reporter, LogRecord.new("info", None, ["Message with timestamp"]))
    assert "T" in out
    assert "[info]" in out
    assert "Message with timestamp" in out


def test_no_color_env_disables_styling(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    reporter = BasicReporter(FormatOptions.adaptive())
    out = _render(reporter, LogRecord.new("info", None, ["test message"]))
    assert "\x1b" not in out
    assert "test message" in out


def test_fancy_info_basic():
    reporter = FancyReporter(FormatOptions(date=False))
    out = _render(reporter, LogRecord.new("info", None, ["hello world"]))
    assert out == "\x1b[36;1mℹ\x1b[0m \x1b[1m INFO \x1b[0m hello world\n"
    assert strip_ansi(out) == "ℹ  INFO  hello world\n"


def test_fancy_unicode_fallback():
    reporter = FancyReporter(FormatOptions(date=False, unicode=False))
    out = _render(reporter, LogRecord.new("info", None, ["ASCII fallback test"]))
    assert strip_ansi(out) == "i  INFO  ASCII fallback test\n"


def test_fancy_repetition_count():
    reporter = FancyReporter(FormatOptions(date=False))
    record = LogRecord.new("warn", None, ["Repeated warning"])
    record.repetition_count = 5
    out = _render(reporter, record)
    assert out == (
        "\x1b[33;1m⚠\x1b[0m \x1b[1m WARN \x1b[0m Repeated warning "
        "\x1b[90;2m (x5)\x1b[0m\n"
    )
    assert strip_ansi(out) == "⚠  WARN  Repeated warning  (x5)\n"


def test_fancy_badge_leaves_tag_alone():
    reporter = FancyReporter(FormatOptions(date=False, colors=False))
    out = _render(reporter, LogRecord.new("info", "db", ["msg"]))
    assert out == "ℹ  INFO  [db] msg\n"


def test_fancy_unknown_type_has_no_icon():
    reporter = FancyReporter(FormatOptions(date=False))
    out = _render(reporter, LogRecord.new("custom", None, ["hi"]))
    assert out == "\x1b[1m CUSTOM \x1b[0m hi\n"


def test_fancy_error_chain_limited():
    reporter = FancyReporter(
        FormatOptions(date=False, colors=False, show_stack=True, error_level=2)
    )
    err = _chain("root cause", "middle layer", "top context")
    record = (
        LogRecord.new("error", None, ["processing failed"])
        .attach_error(err)
        .with_additional(["ctx"])
    )
    out = _render(reporter, record)
    assert out == (
        "✖  ERROR  processing failed top context \ntop context "
        "Caused by: middle layer \n(+1 more causes)  [ctx]\n"
    )


def test_fancy_with_box_plain():
    reporter = FancyReporter(FormatOptions(date=False, colors=False, columns=24))
    record = LogRecord.new("box", None, ["Box Title"])
    record.args.extend(
        ArgValue.from_value(line)
        for line in ["Line 1 content", "Line 2 content", "Line 3 content"]
    )
    out = _render(reporter, record)
    expected = BoxBuilder(True).with_width(20).build(
        "Box Title",
        ["Box Title", "Line 1 content", "Line 2 content", "Line 3 content"],
    )
    assert out == "".join(line + "\n" for line in expected)
    assert "Box Title" in out
    assert "Line 2 content" in out


def test_fancy_with_box_colored():
    reporter = FancyReporter(FormatOptions(date=False, colors=True, columns=24))
    record = LogRecord.new("box", None, ["T"])
    out = _render(reporter, record)
    lines = out.splitlines()
    assert len(lines) == 3
    assert all(line.startswith("\x1b[36m") and line.endswith("\x1b[0m") for line in lines)
    assert strip_ansi(lines[0]).startswith("┌")


def test_fancy_reporter_emits_multiple():
    fancy = FancyReporter(FormatOptions(date=False))
    stream = io.StringIO()
    fancy.emit(LogRecord.new("info", None, ["info test"]), stream)
    fancy.emit(LogRecord.new("error", None, ["error test"]), stream)
    output = stream.getvalue()
    assert "info test" in output
    assert "error test" in output
    assert output.count("\n") == 2


def test_fancy_default_is_adaptive(monkeypatch):
    monkeypatch.setenv("COLUMNS", "42")
    assert FancyReporter().opts.columns == 42
    assert FancyReporter.adaptive().opts.columns == 42


def test_json_basic_record():
    reporter = JsonReporter(FormatOptions(date=False))
    out = _render(reporter, LogRecord.new("info", None, ["hello world"]))
    assert out == (
        '{"args":["hello world"],"level":4,"level_name":"info",'
        '"message":"hello world","schema":"consola/v1","type":"info"}\n'
    )


def test_json_full_record():
    reporter = JsonReporter(FormatOptions(date=False))
    record = (
        LogRecord.new("error", "test", ["failed", 5, True])
        .with_additional(["extra"])
        .with_meta([("user", "alice"), ("n", 2)])
        .with_stack(["at main"])
        .with_error_chain(["top", "root"])
    )
    record.repetition_count = 3
    data = json.loads(_render(reporter, record))
    assert data == {
        "schema": "consola/v1",
        "level": 1,
        "level_name": "error",
        "type": "error",
        "tag": "test",
        "message": "failed 5 true",
        "args": ["failed", 5.0, True],
        "additional": ["extra"],
        "repeat": 3,
        "stack": ["at main"],
        "causes": ["top", "root"],
        "meta": {"user": "alice", "n": 2.0},
    }


def test_json_nan_becomes_null_and_date_present():
    reporter = JsonReporter()
    data = json.loads(_render(reporter, LogRecord.new("info", None, [float("nan")])))
    assert data["args"] == [None]
    assert "T" in data["time"]


def test_memory_reporter_captures_records():
    reporter = MemoryReporter()
    assert len(reporter) == 0
    for type_name, message in [("info", "a"), ("warn", "b"), ("error", "c")]:
        reporter.emit(LogRecord.new(type_name, None, [message]), None)
    assert len(reporter) == 3
    records = reporter.get_records()
    assert [r.type_name for r in records] == ["info", "warn", "error"]
    assert [r.message for r in records] == ["a", "b", "c"]
    records[0].message = "changed"
    assert reporter.get_records()[0].message == "a"
    reporter.clear()
    assert len(reporter) == 0


def test_apply_style_and_map_color():
    assert map_color("gray") == "90"
    assert map_color("white") is None
    assert apply_style("x", None) == "x"
    assert apply_style("x", SegmentStyle(fg_color="red", bold=True, underline=True)) == (
        "\x1b[31;1;4mx\x1b[0m"
    )
    assert apply_style("x", SegmentStyle(bg_color="bg_red")) == "x"


def test_reporter_is_abstract():
    with pytest.raises(TypeError):
        Reporter()