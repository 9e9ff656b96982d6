import io
import json
from urllib.error import HTTPError, URLError

import pytest

from deconstructor.analyze import http as http_mod
from deconstructor.analyze.base import AnalysisStatus, Analyzer
from deconstructor.analyze.http import HttpAnalyzer, HttpAnalyzerConfig

API_URL = "http://analysis.test/api"


class _FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc) -> bool:
        return False


@pytest.fixture
def analyzer() -> HttpAnalyzer:
    return HttpAnalyzer(HttpAnalyzerConfig(api_url=API_URL, timeout_s=5))


def _serve(monkeypatch, status: int, body: bytes, seen: list | None = None) -> None:
    def fake_urlopen(req, timeout=None):
        if seen is not None:
            seen.append((req, timeout))
        return _FakeResponse(status, body)

    monkeypatch.setattr(http_mod, "urlopen", fake_urlopen)


def _raise(monkeypatch, exc: BaseException) -> None:
    def fake_urlopen(req, timeout=None):
        raise exc

    monkeypatch.setattr(http_mod, "urlopen", fake_urlopen)


def test_http_analyzer_satisfies_protocol(analyzer) -> None:
    assert isinstance(analyzer, Analyzer)


def test_request_shape(monkeypatch, analyzer, definition_dict) -> None:
    seen: list = []
    _serve(monkeypatch, 200, json.dumps(definition_dict).encode(), seen)

    analyzer.analyze("telephone", force_update=True)

    (req, timeout), = seen
    assert req.full_url == API_URL
    assert req.get_method() == "POST"
    assert json.loads(req.data) == {"word": "telephone", "update": True}
    assert req.get_header("Content-type") == "application/json"
    assert timeout == 5


def test_200_is_success(monkeypatch, analyzer, definition_dict) -> None:
    _serve(monkeypatch, 200, json.dumps(definition_dict).encode())
    result = analyzer.analyze("deconstructor")

    assert result.status == AnalysisStatus.SUCCESS
    assert result.ok
    assert result.definition.final_combination.id == "deconstructor"


def test_203_is_degraded(monkeypatch, analyzer, definition_dict) -> None:
    _serve(monkeypatch, 203, json.dumps(definition_dict).encode())
    result = analyzer.analyze("deconstructor")

    assert result.status == AnalysisStatus.DEGRADED
    assert result.ok
    assert result.definition is not None


def test_http_error_is_failure(monkeypatch, analyzer) -> None:
    _raise(monkeypatch, HTTPError(API_URL, 500, "Internal Server Error", hdrs=None, fp=io.BytesIO(b"generation failed")))
    result = analyzer.analyze("qwxz")

    assert result.status == AnalysisStatus.FAILURE
    assert not result.ok
    assert result.definition is None
    assert "500" in result.error
    assert "generation failed" in result.error


def test_connection_error_is_failure(monkeypatch, analyzer) -> None:
    _raise(monkeypatch, URLError("connection refused"))
    result = analyzer.analyze("telephone")
    assert result.status == AnalysisStatus.FAILURE
    assert "connection refused" in result.error


def test_timeout_is_failure(monkeypatch, analyzer) -> None:
    _raise(monkeypatch, TimeoutError())
    result = analyzer.analyze("telephone")
    assert result.status == AnalysisStatus.FAILURE
    assert "Timed out" in result.error


@pytest.mark.parametrize("body", [b"<html>oops</html>", b"{}", b'{"parts": [], "combinations": "x"}'])
def test_malformed_body_is_failure(monkeypatch, analyzer, body: bytes) -> None:
    _serve(monkeypatch, 200, body)
    result = analyzer.analyze("telephone")
    assert result.status == AnalysisStatus.FAILURE
    assert result.error.startswith("Malformed response")


def test_non_utf8_body_is_failure(monkeypatch, analyzer) -> None:
    _serve(monkeypatch, 200, b"\xff\xfe{\"parts\": []}")
    result = analyzer.analyze("telephone")
    assert result.status == AnalysisStatus.FAILURE
    assert result.error.startswith("Malformed response")


def test_connection_reset_is_failure(monkeypatch, analyzer) -> None:
    _raise(monkeypatch, ConnectionResetError("reset by peer"))
    result = analyzer.analyze("telephone")
    assert result.status == AnalysisStatus.FAILURE
    assert "reset by peer" in result.error
