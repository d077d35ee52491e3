#!/usr/bin/env python3
"""
Fail if core imports transport or configuration modules.
Checks all Python files under src/hal_client/core/; imports guarded by
`if TYPE_CHECKING:` are allowed.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "hal_client" / "core"

FORBIDDEN_PREFIXES = (
    "httpx",
    "dotenv",
    "hal_client.client",
    "hal_client.config",
)

# sibling modules of core, as seen from a relative `from ..x import y`
FORBIDDEN_PARENT_MODULES = ("client", "config")


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def _type_checking_nodes(tree: ast.AST) -> set[int]:
    guarded: set[int] = set()
    for node in ast.walk(tree):
        if (
            isinstance(node, ast.If)
            and isinstance(node.test, ast.Name)
            and node.test.id == "TYPE_CHECKING"
        ):
            for child in node.body:
                guarded.update(id(n) for n in ast.walk(child))
    return guarded


def scan_file(path: Path) -> list[str]:
    errors: list[str] = []
    tree = ast.parse(path.read_text())
    guarded = _type_checking_nodes(tree)
    for node in ast.walk(tree):
        if id(node) in guarded:
            continue
        if isinstance(node, ast.Import):
            for alias in node.names:
                mod = alias.name
                if is_forbidden(mod):
                    errors.append(f"{path}: forbidden import '{mod}'")
        elif isinstance(node, ast.ImportFrom):
            mod = node.module or ""
            if node.level >= 2 and mod.split(".")[0] in FORBIDDEN_PARENT_MODULES:
                errors.append(f"{path}: forbidden import '{'.' * node.level}{mod}'")
            elif node.level == 0 and is_forbidden(mod):
                errors.append(f"{path}: forbidden import '{mod}'")
    return errors


def main() -> int:
    violations: list[str] = []
    for py_file in CORE_DIR.rglob("*.py"):
        violations.extend(scan_file(py_file))

    if violations:
        for v in violations:
            print(v, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
