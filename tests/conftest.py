"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from deconstructor.models import Definition


@pytest.fixture
def definition_dict() -> dict[str, Any]:
    """Wire payload for the de + construc + tor worked example."""
    return {
        "thought": "Agent noun built on construct, negated by de-.",
        "parts": [
            {"id": "de", "text": "de", "originalWord": "de-", "origin": "Latin", "meaning": "down, off, away"},
            {"id": "construc", "text": "construc", "originalWord": "construere", "origin": "Latin", "meaning": "to build"},
            {"id": "tor", "text": "tor", "originalWord": "-or", "origin": "Latin", "meaning": "one who does"},
        ],
        "combinations": [
            [
                {
                    "id": "constructor",
                    "text": "constructor",
                    "definition": "one who constructs",
                    "sourceIds": ["construc", "tor"],
                }
            ],
            [
                {
                    "id": "deconstructor",
                    "text": "deconstructor",
                    "definition": "one who takes a construction apart",
                    "sourceIds": ["de", "constructor"],
                }
            ],
        ],
    }


@pytest.fixture
def definition(definition_dict: dict[str, Any]) -> Definition:
    return Definition.from_dict(definition_dict)


@pytest.fixture
def static_dir(tmp_path: Path, definition_dict: dict[str, Any]) -> Path:
    """Directory of pre-generated definitions holding `deconstructor.json`."""
    root = tmp_path / "static"
    root.mkdir()
    (root / "deconstructor.json").write_text(json.dumps(definition_dict), encoding="utf-8")
    return root
