"""
Append-only analytics event log.

Each analysis outcome and usage-prompt interaction is appended to
<state_dir>/events.log in JSON Lines format.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Event names
DECONSTRUCT = "deconstruct"
REGENERATE_WORD = "regenerate_word"
DECONSTRUCT_ERROR = "deconstruct_error"
EMAIL_PROMPT_SHOWN = "email_prompt_shown"
EMAIL_PROMPT_DISMISSED = "email_prompt_dismissed"


@dataclass
class AnalyticsEvent:
    """A single logged event."""
    timestamp: str
    name: str
    props: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "name": self.name, "props": self.props}

    @classmethod
    def from_dict(cls, data: dict) -> "AnalyticsEvent":
        return cls(
            timestamp=data["timestamp"],
            name=data["name"],
            props=data.get("props", {}),
        )


class EventLog:
    """
    Event sink.

    With a path, events are appended to disk; without one they are only
    kept in memory (tests, dry runs).
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self.recorded: list[AnalyticsEvent] = []

    def record(self, name: str, **props: Any) -> AnalyticsEvent:
        event = AnalyticsEvent(
            timestamp=datetime.now(timezone.utc).isoformat(),
            name=name,
            props=props,
        )
        self.recorded.append(event)

        if self.path is not None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(json.dumps(event.to_dict()) + "\n")
            except OSError as e:
                logger.error("Error writing event log %s: %s", self.path, e)

        return event

    def names(self) -> list[str]:
        return [e.name for e in self.recorded]


def get_events_log_path(state_dir: Path) -> Path:
    return state_dir / "events.log"


def read_events(path: Path, last_n: int | None = None, name: str | None = None) -> list[AnalyticsEvent]:
    """
    Read events from a log file.

    Args:
        path: Path to events.log
        last_n: If specified, return only the last N matching events
        name: Only return events with this name

    Returns:
        Events oldest first
    """
    if not path.exists():
        return []

    events = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                event = AnalyticsEvent.from_dict(json.loads(line))
            except (json.JSONDecodeError, KeyError):
                continue  # Skip malformed lines
            if name is None or event.name == name:
                events.append(event)

    if last_n is not None:
        return events[-last_n:] if last_n > 0 else []
    return events


def format_event(event: AnalyticsEvent) -> str:
    """Format an event for human-readable display."""
    props = ", ".join(f"{k}={v}" for k, v in event.props.items())
    return f"[{event.timestamp}] {event.name}" + (f" ({props})" if props else "")
