import json
from pathlib import Path

from deconstructor.events import (
    DECONSTRUCT,
    DECONSTRUCT_ERROR,
    AnalyticsEvent,
    EventLog,
    format_event,
    get_events_log_path,
    read_events,
)


def test_record_appends_json_lines(tmp_path: Path) -> None:
    path = get_events_log_path(tmp_path / "state")
    log = EventLog(path)
    log.record(DECONSTRUCT, word="telephone")
    log.record(DECONSTRUCT_ERROR, word="qwxz")

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["name"] == "deconstruct"
    assert first["props"] == {"word": "telephone"}
    assert "timestamp" in first


def test_memory_only_log(tmp_path: Path) -> None:
    log = EventLog()
    log.record(DECONSTRUCT, word="a")
    assert log.names() == ["deconstruct"]
    assert log.recorded[0].props == {"word": "a"}


def test_read_events_filters(tmp_path: Path) -> None:
    path = tmp_path / "events.log"
    log = EventLog(path)
    for word in ("a", "b", "c"):
        log.record(DECONSTRUCT, word=word)
    log.record(DECONSTRUCT_ERROR, word="d")

    assert len(read_events(path)) == 4
    assert [e.props["word"] for e in read_events(path, name=DECONSTRUCT)] == ["a", "b", "c"]
    assert [e.props["word"] for e in read_events(path, last_n=2)] == ["c", "d"]
    assert [e.props["word"] for e in read_events(path, last_n=1, name=DECONSTRUCT)] == ["c"]


def test_read_events_last_zero_returns_nothing(tmp_path: Path) -> None:
    path = tmp_path / "events.log"
    EventLog(path).record(DECONSTRUCT, word="a")

    assert read_events(path, last_n=0) == []
    assert read_events(path, last_n=0, name=DECONSTRUCT) == []


def test_read_events_skips_malformed_lines(tmp_path: Path) -> None:
    path = tmp_path / "events.log"
    path.write_text(
        "not json\n"
        "\n"
        '{"name": "missing timestamp"}\n'
        '{"timestamp": "2026-01-01T00:00:00+00:00", "name": "deconstruct", "props": {}}\n',
        encoding="utf-8",
    )
    events = read_events(path)
    assert [e.name for e in events] == ["deconstruct"]


def test_read_events_missing_file(tmp_path: Path) -> None:
    assert read_events(tmp_path / "nope.log") == []


def test_format_event() -> None:
    event = AnalyticsEvent(timestamp="2026-01-01T00:00:00+00:00", name="deconstruct", props={"word": "a"})
    assert format_event(event) == "[2026-01-01T00:00:00+00:00] deconstruct (word=a)"
    bare = AnalyticsEvent(timestamp="t", name="x")
    assert format_event(bare) == "[t] x"
