from __future__ import annotations

from collections.abc import Iterator

from .model import CompilationUnit, FuncDecl

SUFFIX = "WithContext"


def is_eligible(decl: FuncDecl) -> bool:
    """Exported, named `...WithContext`, and has a leading parameter to drop."""
    if not decl.is_exported:
        return False
    if not decl.name.endswith(SUFFIX):
        return False
    return len(decl.params) > 0


def select_decls(unit: CompilationUnit) -> Iterator[FuncDecl]:
    for decl in unit.decls:
        if is_eligible(decl):
            yield decl
