"""Tests for behavior registration and parameter coercion."""

from __future__ import annotations

import pytest

from tendril.engine.registry import (
    BehaviorRegistry,
    BehaviorSpec,
    Category,
    ParamSpec,
    snake_case,
)


def _noop(ctx, **kwargs):
    return [None]


def test_snake_case():
    assert snake_case("brushSize") == "brush_size"
    assert snake_case("curveTowardX") == "curve_toward_x"
    assert snake_case("count") == "count"


def test_param_spec_validates_kind():
    with pytest.raises(ValueError):
        ParamSpec("x", kind="vector")
    with pytest.raises(ValueError):
        ParamSpec("mode", kind="enum")


def test_number_coercion_clamps_and_defaults():
    spec = ParamSpec("length", default=200.0, min=10, max=2000)
    assert spec.coerce(5) == 10
    assert spec.coerce("5000") == 2000
    assert spec.coerce("abc") == 200.0
    assert spec.coerce(float("nan")) == 200.0
    assert spec.coerce(None) == 200.0
    assert spec.coerce(True) == 200.0


def test_integer_coercion_rounds():
    spec = ParamSpec("count", kind="integer", default=3, min=1, max=10)
    assert spec.coerce(4.6) == 5
    assert spec.coerce(0) == 1


def test_boolean_and_enum_coercion():
    flag = ParamSpec("bothSides", kind="boolean", default=False)
    assert flag.coerce("yes") is True
    assert flag.coerce("off") is False
    assert flag.coerce(0) is False
    assert flag.coerce("maybe") is False

    mode = ParamSpec("endpoint", kind="enum", default="end", options=("start", "end"))
    assert mode.coerce("start") == "start"
    assert mode.coerce("middle") == "end"


def test_string_coercion():
    spec = ParamSpec("source", kind="string")
    assert spec.coerce("  abc ") == "abc"
    assert spec.coerce("   ") is None
    assert spec.coerce(42) == "42"


def test_behavior_spec_uses_aliases_and_drops_unknown():
    spec = BehaviorSpec(
        name="demo",
        category=Category.STRUCTURAL,
        fn=_noop,
        params=[
            ParamSpec("source", kind="string", aliases=("from",)),
            ParamSpec("brushSize", default=None, min=0.5, max=50),
        ],
    )
    kwargs = spec.coerce({"from": "abc", "brushSize": 100, "bogus": 1})
    assert kwargs == {"source": "abc", "brush_size": 50}


def test_registry_rejects_duplicates():
    reg = BehaviorRegistry()
    reg.register(BehaviorSpec(name="demo", category=Category.FILLING, fn=_noop))
    with pytest.raises(ValueError):
        reg.register(BehaviorSpec(name="demo", category=Category.FILLING, fn=_noop))


def test_registry_unknown_name():
    reg = BehaviorRegistry()
    assert "nothing" not in reg
    with pytest.raises(KeyError):
        reg.get("nothing")


def test_registry_run_drops_none(empty_ctx):
    reg = BehaviorRegistry()
    reg.register(BehaviorSpec(name="demo", category=Category.COPIES, fn=_noop))
    assert reg.run("demo", empty_ctx, {}) == []


def test_describe_lists_params():
    spec = BehaviorSpec(
        name="demo",
        category=Category.SHADING,
        fn=_noop,
        params=[ParamSpec("angle", default=45.0, min=0, max=180)],
        description="Demo",
    )
    info = spec.describe()
    assert info["category"] == "shading"
    assert info["params"][0] == {
        "name": "angle",
        "kind": "number",
        "required": False,
        "default": 45.0,
        "min": 0,
        "max": 180,
    }
