"""Pre-generated definitions served from disk."""

from __future__ import annotations

import logging
from pathlib import Path

from ..models import Definition, DefinitionError, load_definition
from .base import AnalysisResult

logger = logging.getLogger(__name__)

_SUFFIXES = (".json", ".yaml", ".yml")


def normalize_word(word: str) -> str:
    return word.strip().lower()


class StaticAnalyzer:
    """Looks words up in a directory of `<word>.json|yaml` files.

    Cannot regenerate: a forced request is reported as a failure.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def words(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            {p.stem.lower() for p in self.directory.iterdir() if p.suffix.lower() in _SUFFIXES}
        )

    def lookup(self, word: str) -> Definition | None:
        key = normalize_word(word)
        for suffix in _SUFFIXES:
            path = self.directory / f"{key}{suffix}"
            if not path.exists():
                continue
            try:
                return load_definition(path)
            except DefinitionError as e:
                logger.warning("Invalid definition for %r in %s: %s", word, path, e)
                return None
        return None

    def analyze(self, word: str, *, force_update: bool = False) -> AnalysisResult:
        if force_update:
            return AnalysisResult.failure("Static definitions cannot be regenerated")
        definition = self.lookup(word)
        if definition is None:
            return AnalysisResult.failure(f"No stored definition for '{normalize_word(word)}'")
        return AnalysisResult.success(definition)
