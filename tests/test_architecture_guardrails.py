from __future__ import annotations

import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]


def _line_count(path: Path) -> int:
    return len(path.read_text(encoding="utf-8", errors="ignore").splitlines())


def _python_files(root: Path):
    for path in root.rglob("*.py"):
        if {"dist", "build", ".venv", "venv", "site-packages"} & set(path.parts):
            continue
        yield path


def _imported_modules(path: Path):
    tree = ast.parse(path.read_text(encoding="utf-8", errors="ignore"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom):
            yield node.module or ""


def test_no_python_module_exceeds_hard_line_limit():
    offenders = []
    for path in _python_files(ROOT):
        lines = _line_count(path)
        if lines > 800:
            offenders.append((str(path.relative_to(ROOT)), lines))
    assert not offenders, f"Modules exceed hard 800-line limit: {offenders}"


def test_core_layer_does_not_import_infra_layer():
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / "core"):
        for name in _imported_modules(path):
            if name == "infra" or name.startswith("infra."):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Core layer imports infra layer: {violations}"


def test_pure_calculators_do_not_touch_the_database():
    pure_modules = [
        ROOT / "core" / "services" / "allocation" / "aggregator.py",
        ROOT / "core" / "services" / "finance" / "rollup.py",
        ROOT / "core" / "services" / "skills" / "coverage.py",
        ROOT / "core" / "services" / "scenario" / "overlay.py",
        ROOT / "core" / "services" / "scenario" / "metrics.py",
    ]
    violations = []
    for path in pure_modules:
        for name in _imported_modules(path):
            if name == "sqlalchemy" or name.startswith("sqlalchemy."):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Pure calculators import SQLAlchemy: {violations}"


def test_infra_repositories_module_is_facade_only():
    text = (ROOT / "infra" / "db" / "repositories.py").read_text(encoding="utf-8", errors="ignore")

    assert "from infra.db.scenario.repository import" in text
    assert "from infra.db.allocation.repository import" in text
    assert "class SqlAlchemy" not in text
