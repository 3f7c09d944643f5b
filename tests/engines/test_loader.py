"""Tests for script engine discovery."""

from __future__ import annotations

import importlib.metadata as metadata
from typing import Mapping

import pytest

from gremlinsvc.engines import CompiledUnit, EngineLoader, PythonScriptEngine, get_engine
from gremlinsvc.errors import ConfigurationError


class EchoEngine:
    name = "echo"

    def compile(self, text: str) -> CompiledUnit:
        return CompiledUnit(source=text, engine=self.name, payload=text)

    def evaluate(self, unit: CompiledUnit, bindings: Mapping[str, object]) -> object:
        return unit.payload


ENTRY_POINT = metadata.EntryPoint(
    name="echo",
    value="gremlinsvc_echo:EchoEngine",
    group="gremlinsvc.engines",
)


@pytest.fixture(autouse=True)
def fake_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force discovery to use the echo engine."""

    def _entry_points() -> metadata.EntryPoints:
        return metadata.EntryPoints((ENTRY_POINT,))

    monkeypatch.setattr(metadata, "entry_points", _entry_points)
    monkeypatch.setattr(ENTRY_POINT.__class__, "load", lambda self: EchoEngine)


def test_discover_includes_entry_points_and_builtins() -> None:
    loader = EngineLoader()

    names = [engine.name for engine in loader.discover()]

    assert names == ["echo", "python"]


def test_get_engine_instantiates_entry_point_class() -> None:
    engine = EngineLoader().get_engine("echo")

    assert isinstance(engine, EchoEngine)


def test_builtin_python_engine_is_default() -> None:
    assert isinstance(get_engine("python"), PythonScriptEngine)


def test_unknown_engine_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        EngineLoader().get_engine("groovy")

    assert "echo" in str(excinfo.value)


def test_broken_entry_point_is_skipped(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken(self):  # type: ignore[no-untyped-def]
        raise ImportError("missing dependency")

    monkeypatch.setattr(ENTRY_POINT.__class__, "load", _broken)
    loader = EngineLoader()

    assert loader.names() == ("python",)


def test_non_engine_entry_point_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(ENTRY_POINT.__class__, "load", lambda self: object())

    with pytest.raises(ConfigurationError):
        EngineLoader().get_engine("echo")


def test_builtin_engine_instances_are_used_as_is(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(metadata, "entry_points", lambda: metadata.EntryPoints(()))
    engine = EchoEngine()
    loader = EngineLoader(builtin_engines=[engine])

    assert loader.get_engine("echo") is engine
