"""Analysis service HTTP client (small, dependency-free).

Targets the generation endpoint:
  POST {api_url}  body {"word": ..., "update": <force regeneration>}
  200 -> full result, 203 -> degraded result, anything else -> failure
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..models import Definition, DefinitionError
from .base import AnalysisResult

logger = logging.getLogger(__name__)

DEGRADED_STATUS = 203


@dataclass(frozen=True)
class HttpAnalyzerConfig:
    api_url: str
    timeout_s: float = 60.0


class HttpAnalyzer:
    """Minimal client for the word analysis endpoint."""

    def __init__(self, cfg: HttpAnalyzerConfig) -> None:
        self._cfg = cfg

    @property
    def api_url(self) -> str:
        return self._cfg.api_url

    def analyze(self, word: str, *, force_update: bool = False) -> AnalysisResult:
        body = json.dumps({"word": word, "update": force_update}).encode("utf-8")
        req = Request(
            self._cfg.api_url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

        try:
            with urlopen(req, timeout=self._cfg.timeout_s) as resp:
                status = resp.status
                raw = resp.read().decode("utf-8")
        except HTTPError as e:
            detail = _read_error_body(e)
            logger.info("Analysis of %r failed: HTTP %s %s", word, e.code, detail)
            return AnalysisResult.failure(f"HTTP error {e.code}: {detail or e.reason}")
        except URLError as e:
            logger.info("Analysis of %r failed: %s", word, e.reason)
            return AnalysisResult.failure(f"Connection error: {e.reason}")
        except TimeoutError:
            return AnalysisResult.failure(f"Timed out after {self._cfg.timeout_s:g}s")
        except UnicodeDecodeError as e:
            logger.info("Analysis of %r returned a body that is not UTF-8: %s", word, e)
            return AnalysisResult.failure(f"Malformed response: {e}")
        except OSError as e:
            logger.info("Analysis of %r failed while reading the response: %s", word, e)
            return AnalysisResult.failure(f"Connection error: {e}")

        try:
            definition = Definition.from_json(raw)
        except DefinitionError as e:
            logger.info("Analysis of %r returned an unusable payload: %s", word, e)
            return AnalysisResult.failure(f"Malformed response: {e}")

        if status == DEGRADED_STATUS:
            return AnalysisResult.degraded(definition)
        return AnalysisResult.success(definition)


def _read_error_body(e: HTTPError) -> str:
    try:
        return e.read().decode("utf-8", errors="replace").strip()
    except OSError:
        return ""
