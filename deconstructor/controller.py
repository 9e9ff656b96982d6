"""
Analysis controller: owns the current definition and the loading state.

States:
    IDLE     placeholder definition shown, nothing analyzed yet
    LOADING  one request outstanding, input locked
    READY    last request produced a definition
    ERROR    last request failed, previous definition kept

A usage gate counts successful analyses in a durable store and opens a
non-blocking prompt at every fifth success unless the user opted in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .analyze.base import AnalysisResult, AnalysisStatus, Analyzer
from .events import (
    DECONSTRUCT,
    DECONSTRUCT_ERROR,
    EMAIL_PROMPT_DISMISSED,
    EMAIL_PROMPT_SHOWN,
    REGENERATE_WORD,
    EventLog,
)
from .location import word_to_path
from .models import DEFAULT_DEFINITION, Definition
from .storage import DISMISS_COUNT_KEY, OPTED_IN_KEY, WORD_COUNT_KEY, CounterStore, MemoryStore, read_counter

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "The AI doesn't like that one! Try a different word."
DEGRADED_MESSAGE = "The AI had some issues, but here's what it came up with anyway."
DEGRADED_REGENERATE_MESSAGE = "Still having issues, but here's a new attempt!"
REGENERATE_MESSAGE = "Generated a new analysis!"


class AnalysisState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


@dataclass(frozen=True)
class AnalysisRequest:
    """An accepted submission. `seq` increases with every accepted request."""

    seq: int
    word: str
    force_update: bool = False


class UsageGate:
    """Counts successful analyses and decides when to surface the usage prompt.

    Counters are read from the store once, at construction, and written back
    on every change.
    """

    PROMPT_EVERY = 5

    def __init__(self, store: CounterStore, events: EventLog | None = None) -> None:
        self._store = store
        self._events = events
        self.count: int = read_counter(store, WORD_COUNT_KEY)
        self.dismiss_count: int = read_counter(store, DISMISS_COUNT_KEY)
        self.opted_in: bool = bool(store.get(OPTED_IN_KEY, False))
        self.prompt_open = False
        self._last_prompted_at: int | None = None

    def record_success(self) -> bool:
        """Increment the success counter. Returns True if the prompt opened."""
        self.count += 1
        self._store.set(WORD_COUNT_KEY, self.count)

        if self.opted_in or not self._is_threshold(self.count):
            return False
        if self._last_prompted_at == self.count:
            return False

        self._last_prompted_at = self.count
        self.prompt_open = True
        if self._events is not None:
            trigger = "initial" if self.count == self.PROMPT_EVERY else "recurring"
            self._events.record(
                EMAIL_PROMPT_SHOWN,
                trigger=trigger,
                wordCount=self.count,
                dismissCount=self.dismiss_count,
            )
        return True

    def _is_threshold(self, count: int) -> bool:
        return count >= self.PROMPT_EVERY and count % self.PROMPT_EVERY == 0

    def dismiss(self) -> None:
        """Close the prompt without opting in."""
        if not self.prompt_open:
            return
        self.prompt_open = False
        if self.opted_in:
            return
        self.dismiss_count += 1
        self._store.set(DISMISS_COUNT_KEY, self.dismiss_count)
        if self._events is not None:
            self._events.record(EMAIL_PROMPT_DISMISSED, dismissCount=self.dismiss_count, wordCount=self.count)

    def opt_in(self) -> None:
        self.opted_in = True
        self.prompt_open = False
        self._store.set(OPTED_IN_KEY, True)


class AnalysisController:
    """State machine around an external Analyzer."""

    def __init__(
        self,
        analyzer: Analyzer,
        *,
        store: CounterStore | None = None,
        events: EventLog | None = None,
        on_change: Callable[[AnalysisController], None] | None = None,
        on_notify: Callable[[Notification], None] | None = None,
    ) -> None:
        self._analyzer = analyzer
        self.events = events if events is not None else EventLog()
        self.gate = UsageGate(store if store is not None else MemoryStore(), self.events)
        self._on_change = on_change
        self._on_notify = on_notify

        self.state = AnalysisState.IDLE
        self.definition: Definition = DEFAULT_DEFINITION
        self.current_word: str | None = None
        self.has_analyzed = False
        self.analyzed_word: str | None = None
        self.location: str | None = None
        self.notifications: list[Notification] = []

        self._seq = 0
        self._pending: AnalysisRequest | None = None

    @property
    def is_loading(self) -> bool:
        return self.state == AnalysisState.LOADING

    @property
    def pending(self) -> AnalysisRequest | None:
        return self._pending

    def is_regeneration(self, word: str) -> bool:
        """True when `word` names the word currently on display."""
        return (
            self.has_analyzed
            and self.analyzed_word is not None
            and word.strip().lower() == self.analyzed_word.lower()
        )

    # -- transitions -----------------------------------------------------

    def submit(self, word: str) -> bool:
        """Analyze `word`, routed to a regeneration if it is already displayed.

        Returns False when the submission is rejected (empty word or a
        request already outstanding).
        """
        if self.is_regeneration(word):
            return self.regenerate(word)
        return self.run(word)

    def regenerate(self, word: str) -> bool:
        """Force a fresh analysis of the displayed word, bypassing any cache."""
        if not self.is_regeneration(word):
            logger.info("Regeneration of %r refused: not the analyzed word", word)
            return False
        return self.run(word, force_update=True)

    def run(self, word: str, *, force_update: bool = False) -> bool:
        """Issue one request and apply its outcome. Returns False if rejected."""
        request = self.begin(word, force_update=force_update)
        if request is None:
            return False
        self.complete(request, self._call(request))
        return True

    def begin(self, word: str, *, force_update: bool = False) -> AnalysisRequest | None:
        """Accept a submission and enter LOADING, or reject it."""
        word = word.strip()
        if not word:
            logger.debug("Ignoring empty submission")
            return None
        if self.is_loading:
            logger.info("Ignoring %r: a request is already outstanding", word)
            return None

        self._seq += 1
        request = AnalysisRequest(seq=self._seq, word=word, force_update=force_update)
        self._pending = request
        self.state = AnalysisState.LOADING
        logger.debug("Request #%d: %r (force_update=%s)", request.seq, word, force_update)
        self._changed()
        return request

    def complete(self, request: AnalysisRequest, result: AnalysisResult) -> bool:
        """Apply the result of `request`. Returns False if it was stale."""
        if self._pending is None or request.seq != self._pending.seq:
            logger.info("Discarding stale response #%d for %r", request.seq, request.word)
            return False
        self._pending = None

        if request.force_update:
            self.events.record(REGENERATE_WORD, word=request.word)

        if not result.ok or result.definition is None:
            self.state = AnalysisState.ERROR
            self.events.record(DECONSTRUCT_ERROR, word=request.word)
            logger.info("Analysis of %r failed: %s", request.word, result.error)
            self._notify(NotificationLevel.WARNING, FAILURE_MESSAGE)
            self._changed()
            return True

        if result.status == AnalysisStatus.DEGRADED:
            message = DEGRADED_REGENERATE_MESSAGE if request.force_update else DEGRADED_MESSAGE
            self._notify(NotificationLevel.INFO, message)
        elif request.force_update:
            self._notify(NotificationLevel.SUCCESS, REGENERATE_MESSAGE)
        else:
            self._notify(NotificationLevel.SUCCESS, f'Deconstructed "{request.word}".')

        self.events.record(DECONSTRUCT, word=request.word)
        self.gate.record_success()

        self.definition = result.definition
        self.current_word = request.word
        self.analyzed_word = request.word
        self.has_analyzed = True
        self.location = word_to_path(request.word)
        self.state = AnalysisState.READY
        self._changed()
        return True

    def load_static(self, word: str, definition: Definition) -> None:
        """Show a pre-generated definition without contacting the analyzer."""
        self.definition = definition
        self.current_word = word
        self.analyzed_word = word
        self.has_analyzed = True
        self.location = word_to_path(word)
        self.state = AnalysisState.READY
        self._changed()

    def dismiss_prompt(self) -> None:
        self.gate.dismiss()

    # -- internals -------------------------------------------------------

    def _call(self, request: AnalysisRequest) -> AnalysisResult:
        try:
            return self._analyzer.analyze(request.word, force_update=request.force_update)
        except Exception as e:
            logger.warning("Analyzer raised for %r: %s", request.word, e)
            return AnalysisResult.failure(str(e))

    def _notify(self, level: NotificationLevel, message: str) -> None:
        notification = Notification(level=level, message=message)
        self.notifications.append(notification)
        if self._on_notify is not None:
            self._on_notify(notification)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
