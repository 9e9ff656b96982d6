"""Data models for word decompositions."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml

# Reserved id of the synthetic input node.
INPUT_NODE_ID = "input1"

Severity = Literal["error", "warning"]


class DefinitionError(ValueError):
    """Raised when a definition payload does not match the wire shape."""


def origin_id(part_id: str) -> str:
    """Id of the synthetic origin node paired with a part."""
    return f"origin-{part_id}"


@dataclass(frozen=True)
class MorphemePart:
    """A leaf fragment of the analyzed word."""

    id: str
    text: str
    original_word: str  # source-language form, e.g. "construere"
    origin: str  # source language, e.g. "Latin"
    meaning: str

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "text": self.text,
            "originalWord": self.original_word,
            "origin": self.origin,
            "meaning": self.meaning,
        }

    @classmethod
    def from_dict(cls, data: Any) -> MorphemePart:
        data = _require_mapping(data, "part")
        return cls(
            id=_require_str(data, "id", "part"),
            text=_require_str(data, "text", "part"),
            original_word=_require_str(data, "originalWord", "part"),
            origin=_require_str(data, "origin", "part"),
            meaning=_require_str(data, "meaning", "part"),
        )


@dataclass(frozen=True)
class Combination:
    """A composite term formed from earlier-layer parts or combinations."""

    id: str
    text: str
    definition: str
    source_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "definition": self.definition,
            "sourceIds": list(self.source_ids),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Combination:
        data = _require_mapping(data, "combination")
        raw_sources = data.get("sourceIds")
        if not isinstance(raw_sources, list):
            raise DefinitionError("combination.sourceIds must be a list")
        sources: list[str] = []
        for src in raw_sources:
            if not isinstance(src, str):
                raise DefinitionError("combination.sourceIds must contain strings")
            sources.append(src)
        return cls(
            id=_require_str(data, "id", "combination"),
            text=_require_str(data, "text", "combination"),
            definition=_require_str(data, "definition", "combination"),
            source_ids=tuple(sources),
        )


@dataclass(frozen=True)
class Definition:
    """A complete word decomposition: parts plus layered combinations.

    `thought` is the generator's rationale and is never rendered.
    """

    thought: str = ""
    parts: tuple[MorphemePart, ...] = ()
    layers: tuple[tuple[Combination, ...], ...] = ()

    @property
    def combinations(self) -> list[Combination]:
        """All combinations flattened in layer order."""
        return [c for layer in self.layers for c in layer]

    @property
    def part_ids(self) -> set[str]:
        return {p.id for p in self.parts}

    @property
    def final_combination(self) -> Combination | None:
        """The single combination of the last layer, if the definition is well-formed."""
        if not self.layers or len(self.layers[-1]) != 1:
            return None
        return self.layers[-1][0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "thought": self.thought,
            "parts": [p.to_dict() for p in self.parts],
            "combinations": [[c.to_dict() for c in layer] for layer in self.layers],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Definition:
        data = _require_mapping(data, "definition")

        thought = data.get("thought", "")
        if not isinstance(thought, str):
            raise DefinitionError("definition.thought must be a string")

        raw_parts = data.get("parts")
        if not isinstance(raw_parts, list):
            raise DefinitionError("definition.parts must be a list")

        raw_layers = data.get("combinations")
        if not isinstance(raw_layers, list):
            raise DefinitionError("definition.combinations must be a list of layers")

        layers: list[tuple[Combination, ...]] = []
        for raw_layer in raw_layers:
            if not isinstance(raw_layer, list):
                raise DefinitionError("each combination layer must be a list")
            layers.append(tuple(Combination.from_dict(c) for c in raw_layer))

        return cls(
            thought=thought,
            parts=tuple(MorphemePart.from_dict(p) for p in raw_parts),
            layers=tuple(layers),
        )

    @classmethod
    def from_json(cls, text: str) -> Definition:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DefinitionError(f"invalid JSON: {e}") from e
        return cls.from_dict(data)


@dataclass(frozen=True)
class DefinitionIssue:
    """A structural problem found in a definition."""

    code: str
    severity: Severity
    message: str
    subject: str = ""  # id the issue is about, if any

    def to_dict(self) -> dict[str, str]:
        return {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
            "subject": self.subject,
        }


def validate_definition(definition: Definition) -> list[DefinitionIssue]:
    """Report structural problems without raising.

    Checks id uniqueness across the whole node set, that every source id
    resolves to a part or a strictly earlier combination, and that the final
    layer holds exactly one combination.
    """
    issues: list[DefinitionIssue] = []

    seen: set[str] = {INPUT_NODE_ID}

    def claim(node_id: str) -> None:
        if node_id in seen:
            issues.append(
                DefinitionIssue(
                    code="duplicate-id",
                    severity="error",
                    message=f"Node id '{node_id}' is used more than once",
                    subject=node_id,
                )
            )
        seen.add(node_id)

    for part in definition.parts:
        claim(part.id)
        claim(origin_id(part.id))

    layer_of: dict[str, int] = {}
    for index, layer in enumerate(definition.layers):
        for combination in layer:
            claim(combination.id)
            layer_of.setdefault(combination.id, index)

    part_ids = definition.part_ids
    for index, layer in enumerate(definition.layers):
        if not layer:
            issues.append(
                DefinitionIssue(
                    code="empty-layer",
                    severity="warning",
                    message=f"Combination layer {index + 1} is empty",
                )
            )
        for combination in layer:
            for src in combination.source_ids:
                if src in part_ids:
                    continue
                src_layer = layer_of.get(src)
                if src_layer is None:
                    issues.append(
                        DefinitionIssue(
                            code="dangling-source",
                            severity="warning",
                            message=f"'{combination.id}' references unknown id '{src}'",
                            subject=combination.id,
                        )
                    )
                elif src_layer >= index:
                    issues.append(
                        DefinitionIssue(
                            code="forward-reference",
                            severity="error",
                            message=(
                                f"'{combination.id}' (layer {index + 1}) references '{src}' "
                                f"from layer {src_layer + 1}; sources must come from earlier layers"
                            ),
                            subject=combination.id,
                        )
                    )

    if definition.layers and definition.final_combination is None:
        issues.append(
            DefinitionIssue(
                code="final-layer-shape",
                severity="warning",
                message=f"Final layer has {len(definition.layers[-1])} combinations (expected 1)",
            )
        )

    return issues


def load_definition(path: Path) -> Definition:
    """Load a definition from a .json or .yaml/.yml file."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DefinitionError(f"invalid YAML in {path.name}: {e}") from e
        return Definition.from_dict(data)
    return Definition.from_json(text)


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DefinitionError(f"{what} must be an object")
    return data


def _require_str(data: dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise DefinitionError(f"{what}.{key} must be a string")
    return value


DEFAULT_DEFINITION = Definition(
    thought="",
    parts=(
        MorphemePart(
            id="de",
            text="de",
            original_word="de-",
            origin="Latin",
            meaning="down, off, away",
        ),
        MorphemePart(
            id="construc",
            text="construc",
            original_word="construere",
            origin="Latin",
            meaning="to build, to pile up",
        ),
        MorphemePart(
            id="tor",
            text="tor",
            original_word="-or",
            origin="Latin",
            meaning="agent noun, one who does an action",
        ),
    ),
    layers=(
        (
            Combination(
                id="constructor",
                text="constructor",
                definition="one who constructs or builds",
                source_ids=("construc", "tor"),
            ),
        ),
        (
            Combination(
                id="deconstructor",
                text="deconstructor",
                definition="one who takes apart or analyzes the construction of something",
                source_ids=("de", "constructor"),
            ),
        ),
    ),
)
