from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .gotypes import type_qualifiers, type_source
from .imports import import_table, merge_imports, render_import_block, resolve_imports
from .model import (
    Call,
    CompilationUnit,
    Expr,
    ExprStmt,
    Field,
    ForwarderDecl,
    Name,
    ReturnStmt,
    Selector,
    Stmt,
)


def render_field(f: Field) -> str:
    t = type_source(f.type)
    if not f.names:
        return t
    return f"{', '.join(f.names)} {t}"


def render_params(fields: Iterable[Field]) -> str:
    return ", ".join(render_field(f) for f in fields)


def render_results(fields: tuple[Field, ...]) -> str:
    if not fields:
        return ""
    if len(fields) == 1 and not fields[0].names:
        return type_source(fields[0].type)
    return f"({render_params(fields)})"


def render_expr(e: Expr) -> str:
    if isinstance(e, Name):
        return e.name
    if isinstance(e, Selector):
        return f"{render_expr(e.x)}.{e.sel}"
    if isinstance(e, Call):
        return f"{render_expr(e.fun)}({', '.join(render_expr(a) for a in e.args)})"
    raise TypeError(f"not an expression: {e!r}")


def render_stmt(s: Stmt) -> str:
    if isinstance(s, ReturnStmt):
        return f"return {render_expr(s.value)}"
    if isinstance(s, ExprStmt):
        return render_expr(s.value)
    raise TypeError(f"not a statement: {s!r}")


def render_decl(fwd: ForwarderDecl) -> str:
    parts = ["func "]
    if fwd.receiver is not None:
        parts.append(f"({fwd.receiver.name} {type_source(fwd.receiver.type)}) ")
    parts.append(f"{fwd.name}({render_params(fwd.params)})")
    results = render_results(fwd.results)
    if results:
        parts.append(" " + results)
    parts.append(" {\n")
    parts.append(f"\t{render_stmt(fwd.body)}\n")
    parts.append("}\n")
    return "".join(parts)


def decl_qualifiers(fwd: ForwarderDecl) -> set[str]:
    """Package qualifiers a forwarder needs imported."""
    out: set[str] = set()
    if fwd.receiver is not None:
        out |= type_qualifiers(fwd.receiver.type)
    for f in (*fwd.params, *fwd.results):
        out |= type_qualifiers(f.type)
    # Package-level calls among the arguments, e.g. `context.Background()`.
    for arg in fwd.call.args:
        if isinstance(arg, Call) and isinstance(arg.fun, Selector) and isinstance(arg.fun.x, Name):
            out.add(arg.fun.x.name)
    return out


@dataclass
class RenderBuffer:
    """Accumulates forwarders in file order; imports are resolved once in `generate`."""

    include_package: bool = True
    package: str | None = None
    _chunks: list[tuple[CompilationUnit, list[ForwarderDecl]]] = field(default_factory=list, init=False, repr=False)

    def add_unit(self, unit: CompilationUnit, forwarders: Iterable[ForwarderDecl]) -> None:
        if self.package is None:
            self.package = unit.package
        self._chunks.append((unit, list(forwarders)))

    @property
    def forwarders(self) -> list[ForwarderDecl]:
        return [fwd for _, fwds in self._chunks for fwd in fwds]

    def generate(self) -> str:
        forwarders = self.forwarders
        resolved = []
        for unit, fwds in self._chunks:
            qualifiers: set[str] = set()
            for fwd in fwds:
                qualifiers |= decl_qualifiers(fwd)
            resolved.append(resolve_imports(qualifiers, import_table(unit.imports)))
        imports = merge_imports(resolved)

        body = "\n".join(render_decl(fwd) for fwd in forwarders)
        if not self.include_package:
            return body

        if self.package is None:
            return ""
        sections = [f"package {self.package}\n"]
        block = render_import_block(imports)
        if block:
            sections.append(block)
        if body:
            sections.append(body)
        return "\n".join(sections)
