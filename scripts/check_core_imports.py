#!/usr/bin/env python3
"""
Fail if the request pipeline imports the resource layer.
Checks all Python files under src/opsmngr/core/; core must not depend on
opsmngr.services, opsmngr.models or the opsmngr.client facade.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "opsmngr" / "core"

FORBIDDEN_PREFIXES = (
    "opsmngr.services",
    "opsmngr.models",
    "opsmngr.client",
)

# relative imports leaving the core package, e.g. "from ..services import x"
FORBIDDEN_RELATIVE = ("services", "models", "client")


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def scan_file(path: Path) -> list[str]:
    errors: list[str] = []
    tree = ast.parse(path.read_text())
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                mod = alias.name
                if is_forbidden(mod):
                    errors.append(f"{path}: forbidden import '{mod}'")
        elif isinstance(node, ast.ImportFrom):
            mod = node.module or ""
            if node.level >= 2:
                head = mod.split(".")[0]
                names = [a.name for a in node.names]
                if head in FORBIDDEN_RELATIVE or (
                    not mod and any(n in FORBIDDEN_RELATIVE for n in names)
                ):
                    errors.append(
                        f"{path}: forbidden import '{'.' * node.level}{mod}'"
                    )
            elif mod and is_forbidden(mod):
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
