import json
from pathlib import Path

import pytest
import yaml

from deconstructor.models import (
    DEFAULT_DEFINITION,
    Combination,
    Definition,
    DefinitionError,
    MorphemePart,
    load_definition,
    validate_definition,
)


def _codes(definition: Definition) -> list[str]:
    return [issue.code for issue in validate_definition(definition)]


def _part(pid: str) -> MorphemePart:
    return MorphemePart(id=pid, text=pid, original_word=pid, origin="Latin", meaning=pid)


def test_from_dict_parses_wire_shape(definition_dict) -> None:
    d = Definition.from_dict(definition_dict)

    assert [p.id for p in d.parts] == ["de", "construc", "tor"]
    assert d.parts[1].original_word == "construere"
    assert len(d.layers) == 2
    assert d.layers[0][0].source_ids == ("construc", "tor")
    assert d.thought.startswith("Agent noun")


def test_to_dict_uses_wire_keys(definition_dict) -> None:
    assert Definition.from_dict(definition_dict).to_dict() == definition_dict


def test_thought_is_optional(definition_dict) -> None:
    del definition_dict["thought"]
    assert Definition.from_dict(definition_dict).thought == ""


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("parts"),
        lambda d: d.update(combinations={"layer": []}),
        lambda d: d.update(combinations=[{"id": "x"}]),
        lambda d: d["parts"][0].pop("originalWord"),
        lambda d: d["parts"][0].update(id=7),
        lambda d: d["combinations"][0][0].update(sourceIds="construc"),
        lambda d: d["combinations"][0][0].update(sourceIds=["construc", 3]),
    ],
)
def test_malformed_payload_raises_definition_error(definition_dict, mutate) -> None:
    mutate(definition_dict)
    with pytest.raises(DefinitionError):
        Definition.from_dict(definition_dict)


def test_from_json_rejects_invalid_json() -> None:
    with pytest.raises(DefinitionError, match="invalid JSON"):
        Definition.from_json("{not json")


def test_definition_error_is_value_error() -> None:
    assert issubclass(DefinitionError, ValueError)


def test_final_combination(definition) -> None:
    assert definition.final_combination is not None
    assert definition.final_combination.id == "deconstructor"

    two_final = Definition(
        parts=definition.parts,
        layers=(definition.layers[0], (Combination("a", "a", "a"), Combination("b", "b", "b"))),
    )
    assert two_final.final_combination is None
    assert Definition().final_combination is None


def test_combinations_flatten_in_layer_order(definition) -> None:
    assert [c.id for c in definition.combinations] == ["constructor", "deconstructor"]


def test_worked_example_validates_clean(definition) -> None:
    assert validate_definition(definition) == []
    assert validate_definition(DEFAULT_DEFINITION) == []


def test_duplicate_ids_are_errors() -> None:
    d = Definition(
        parts=(_part("de"), _part("tor")),
        layers=((Combination("de", "de", "dup", ("tor",)),),),
    )
    issues = validate_definition(d)
    assert [i.code for i in issues] == ["duplicate-id"]
    assert issues[0].severity == "error"
    assert issues[0].subject == "de"


def test_combination_colliding_with_origin_id_is_duplicate() -> None:
    d = Definition(
        parts=(_part("de"),),
        layers=((Combination("origin-de", "x", "x", ("de",)),),),
    )
    assert "duplicate-id" in _codes(d)


def test_reserved_input_id_is_duplicate() -> None:
    d = Definition(parts=(_part("input1"),), layers=())
    assert "duplicate-id" in _codes(d)


def test_dangling_source_is_warning() -> None:
    d = Definition(
        parts=(_part("de"),),
        layers=((Combination("x", "x", "x", ("de", "ghost")),),),
    )
    issues = validate_definition(d)
    assert [i.code for i in issues] == ["dangling-source"]
    assert issues[0].severity == "warning"
    assert "ghost" in issues[0].message


def test_same_layer_and_forward_references_are_errors() -> None:
    d = Definition(
        parts=(_part("a"),),
        layers=(
            (Combination("x", "x", "x", ("a", "z")), Combination("y", "y", "y", ("x",))),
            (Combination("z", "z", "z", ("y",)),),
        ),
    )
    forward = [i for i in validate_definition(d) if i.code == "forward-reference"]
    assert {i.subject for i in forward} == {"x", "y"}
    assert all(i.severity == "error" for i in forward)


def test_empty_layer_and_final_shape_warnings() -> None:
    d = Definition(
        parts=(_part("a"), _part("b")),
        layers=((), (Combination("x", "x", "x", ("a",)), Combination("y", "y", "y", ("b",)))),
    )
    assert _codes(d) == ["empty-layer", "final-layer-shape"]


def test_load_definition_json_and_yaml(tmp_path: Path, definition_dict) -> None:
    j = tmp_path / "word.json"
    j.write_text(json.dumps(definition_dict), encoding="utf-8")
    y = tmp_path / "word.yaml"
    y.write_text(yaml.safe_dump(definition_dict), encoding="utf-8")

    assert load_definition(j) == load_definition(y)
    assert load_definition(y).final_combination.text == "deconstructor"


def test_load_definition_invalid_yaml(tmp_path: Path) -> None:
    p = tmp_path / "bad.yml"
    p.write_text("parts: [unclosed\n", encoding="utf-8")
    with pytest.raises(DefinitionError, match="invalid YAML"):
        load_definition(p)
