#!/usr/bin/env python3
"""Complexity guard for the discovery/conversion orchestrators."""

from __future__ import annotations

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TARGETS = (
    ROOT / "src/image_converter/application/use_cases.py",
    ROOT / "src/image_converter/discovery/collector.py",
)
MAX_STATEMENTS = 45
MAX_BRANCHES = 8

_BRANCH_NODES = (ast.If, ast.For, ast.While, ast.Try, ast.With, ast.Match)


def _count(node: ast.AST) -> tuple[int, int]:
    """Return (statements, branches) below ``node``, nested functions included."""
    statements = 0
    branches = 0
    for child in ast.walk(node):
        if child is node:
            continue
        if isinstance(child, ast.stmt):
            statements += 1
        if isinstance(child, _BRANCH_NODES):
            branches += 1
    return statements, branches


def _functions(tree: ast.Module) -> list[ast.FunctionDef]:
    found: list[ast.FunctionDef] = []
    for node in tree.body:
        if isinstance(node, ast.FunctionDef):
            found.append(node)
        elif isinstance(node, ast.ClassDef):
            found.extend(n for n in node.body if isinstance(n, ast.FunctionDef))
    return found


def main() -> None:
    """Fail when an orchestrator function exceeds the thresholds."""
    violations: list[str] = []
    for target in TARGETS:
        tree = ast.parse(target.read_text(encoding="utf-8"))
        for func in _functions(tree):
            statements, branches = _count(func)
            if statements > MAX_STATEMENTS:
                violations.append(f"{target.name}:{func.name}: {statements} statements")
            if branches > MAX_BRANCHES:
                violations.append(f"{target.name}:{func.name}: {branches} branches")
    if violations:
        raise SystemExit(
            "Orchestrator complexity threshold exceeded:\n"
            + "\n".join(f"- {v}" for v in violations)
        )
    print("Orchestrator complexity check passed.")


if __name__ == "__main__":
    main()
