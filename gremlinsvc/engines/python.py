"""Script engine that evaluates query fragments as Python source."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from types import CodeType
from typing import Mapping

from gremlin_python.process.graph_traversal import __
from gremlin_python.process.traversal import (
    Cardinality,
    Column,
    Direction,
    Operator,
    Order,
    P,
    Pop,
    Scope,
    T,
    TextP,
)

from gremlinsvc.errors import ExecutionError, ScriptCompilationError

from .types import CompiledUnit

SCRIPT_FILENAME = "<gremlin-script>"


def gremlin_namespace() -> dict[str, object]:
    """Names every script sees without importing them, as in the Gremlin console."""

    return {
        "__": __,
        "Cardinality": Cardinality,
        "Column": Column,
        "Direction": Direction,
        "Operator": Operator,
        "Order": Order,
        "P": P,
        "Pop": Pop,
        "Scope": Scope,
        "T": T,
        "TextP": TextP,
    }


@dataclass(frozen=True, slots=True)
class PythonProgram:
    """Statements to run followed by the expression whose value is the result."""

    body: CodeType | None
    tail: CodeType | None


class PythonScriptEngine:
    """Compiles scripts with the Python compiler; the trailing expression is the result."""

    name = "python"

    def __init__(self, *, namespace: Mapping[str, object] | None = None) -> None:
        self._namespace = dict(namespace) if namespace is not None else gremlin_namespace()

    def compile(self, text: str) -> CompiledUnit:
        if not text.strip():
            raise ScriptCompilationError("Provide a script to execute.")
        try:
            tree = ast.parse(text, filename=SCRIPT_FILENAME, mode="exec")
            program = _split_program(tree)
        except (SyntaxError, ValueError) as exc:
            raise ScriptCompilationError(f"Script failed to compile: {exc}") from exc
        return CompiledUnit(source=text, engine=self.name, payload=program)

    def evaluate(self, unit: CompiledUnit, bindings: Mapping[str, object]) -> object:
        program = unit.payload
        if not isinstance(program, PythonProgram):
            raise ExecutionError(f"Unit was compiled by engine '{unit.engine}', not '{self.name}'.")
        namespace = dict(self._namespace)
        namespace.update(bindings)
        if program.body is not None:
            exec(program.body, namespace)
        if program.tail is None:
            return None
        return eval(program.tail, namespace)


def _split_program(tree: ast.Module) -> PythonProgram:
    statements = list(tree.body)
    tail: CodeType | None = None
    if statements and isinstance(statements[-1], ast.Expr):
        expression = ast.Expression(body=statements.pop().value)
        tail = compile(expression, SCRIPT_FILENAME, "eval")
    body: CodeType | None = None
    if statements:
        module = ast.Module(body=statements, type_ignores=[])
        body = compile(module, SCRIPT_FILENAME, "exec")
    return PythonProgram(body=body, tail=tail)


__all__ = ["PythonProgram", "PythonScriptEngine", "SCRIPT_FILENAME", "gremlin_namespace"]
