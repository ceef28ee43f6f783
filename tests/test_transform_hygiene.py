from __future__ import annotations

import ast
from pathlib import Path
import unittest


REPO_ROOT = Path(__file__).resolve().parent.parent
PACKAGE_DIR = REPO_ROOT / "src" / "kuhi"
# Modules that must stay importable without jax.
FRONT_END_MODULES = ("tokens", "errors", "lexer", "parser", "formatter")
JAX_BACKED_MODULES = {"values", "algebra", "builtins", "evaluator", "render", "cli"}


def _iter_python_files() -> list[Path]:
    return sorted(PACKAGE_DIR.rglob("*.py"))


def _imported_modules(tree: ast.AST) -> set[str]:
    names: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                if node.module:
                    names.add(f".{node.module}")
                else:
                    names.update(f".{alias.name}" for alias in node.names)
            elif node.module:
                names.add(node.module)
    return names


class TransformHygieneTests(unittest.TestCase):
    def test_front_end_never_imports_jax(self) -> None:
        violations: list[str] = []

        for module in FRONT_END_MODULES:
            path = PACKAGE_DIR / f"{module}.py"
            tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
            for name in _imported_modules(tree):
                if name.split(".")[0] == "jax" or name.lstrip(".") in JAX_BACKED_MODULES:
                    violations.append(f"{module}: {name}")

        self.assertEqual(
            [],
            violations,
            msg="Front-end modules that pull in jax:\n" + "\n".join(violations),
        )

    def test_no_bare_except(self) -> None:
        violations: list[str] = []

        for path in _iter_python_files():
            tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
            for node in ast.walk(tree):
                if isinstance(node, ast.ExceptHandler) and node.type is None:
                    rel = path.relative_to(REPO_ROOT)
                    violations.append(f"{rel}:{node.lineno}")

        self.assertEqual(
            [],
            violations,
            msg="Bare except clauses found:\n" + "\n".join(violations),
        )


if __name__ == "__main__":
    unittest.main()
