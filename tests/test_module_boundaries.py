"""Import-boundary guardrails between the core and upstream packages."""

from __future__ import annotations

import ast
from pathlib import Path


def _package_root() -> Path:
    return Path(__file__).resolve().parents[1] / "consumption"


def _imported_modules(path: Path) -> list[tuple[int, str]]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    modules: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.extend((node.lineno, alias.name) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            modules.append((node.lineno, node.module))
    return modules


def test_core_modules_do_not_import_upstream_or_dotenv() -> None:
    offenders: list[str] = []
    for path in sorted((_package_root() / "core").rglob("*.py")):
        for lineno, module in _imported_modules(path):
            if module.startswith("consumption.upstream") or module.startswith("dotenv"):
                offenders.append(f"{path.name}:{lineno} imports {module}")

    assert offenders == []
