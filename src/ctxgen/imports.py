from __future__ import annotations

import re
from collections.abc import Iterable

from .errors import RenderError
from .model import ImportSpec

# Packages a forwarder may reference without the source importing them.
_FALLBACK = {
    "context": ImportSpec(path="context"),
}

_MAJOR_VERSION_RE = re.compile(r"^v[0-9]+$")
_IDENT_PREFIX_RE = re.compile(r"^[A-Za-z0-9_]*")


def assumed_package_name(path: str) -> str:
    """Guess the package name Go code will use for an unaliased import path.

    Mirrors the goimports heuristic: skip a trailing major-version element,
    drop a `go-` prefix, and cut at the first character that cannot appear
    in an identifier (`gopkg.in/yaml.v3` -> `yaml`).
    """
    parts = path.split("/")
    base = parts[-1]
    if _MAJOR_VERSION_RE.match(base) and len(parts) > 1:
        base = parts[-2]
    if base.startswith("go-"):
        base = base[len("go-") :]
    m = _IDENT_PREFIX_RE.match(base)
    return m.group(0) if m and m.group(0) else base


def is_stdlib(path: str) -> bool:
    return "." not in path.split("/", 1)[0]


def _last_element_name(path: str) -> str:
    base = path.rsplit("/", 1)[-1]
    m = _IDENT_PREFIX_RE.match(base)
    return m.group(0) if m and m.group(0) else base


def import_table(imports: Iterable[ImportSpec]) -> dict[str, ImportSpec]:
    """Map each qualifier usable in a file to the import that provides it.

    An unaliased import is reachable under both the assumed package name and
    its last path element (`k8s.io/api/core/v1` as `core` or `v1`), since the
    real package name is not known without loading the package.
    """
    table: dict[str, ImportSpec] = {}
    for spec in imports:
        if spec.name in {"_", "."}:
            continue
        if spec.name:
            table.setdefault(spec.name, spec)
            continue
        table.setdefault(assumed_package_name(spec.path), spec)
        table.setdefault(_last_element_name(spec.path), spec)
    return table


def resolve_imports(qualifiers: Iterable[str], table: dict[str, ImportSpec]) -> dict[str, ImportSpec]:
    """Resolve the qualifiers used by one file through that file's imports."""
    resolved: dict[str, ImportSpec] = {}
    for q in sorted(set(qualifiers)):
        spec = table.get(q)
        if spec is None:
            spec = _FALLBACK.get(q)
        if spec is None:
            raise RenderError(f"cannot resolve import for qualifier {q!r}")
        resolved[q] = spec
    return resolved


def merge_imports(resolved: Iterable[dict[str, ImportSpec]]) -> list[ImportSpec]:
    """Merge per-file resolutions; one qualifier may only mean one path."""
    merged: dict[str, ImportSpec] = {}
    for by_qualifier in resolved:
        for q, spec in by_qualifier.items():
            seen = merged.setdefault(q, spec)
            if seen.path != spec.path:
                raise RenderError(
                    f"qualifier {q!r} refers to different imports: {', '.join(sorted({seen.path, spec.path}))}"
                )
    return list(merged.values())


def _import_line(spec: ImportSpec) -> str:
    if spec.name:
        return f'{spec.name} "{spec.path}"'
    return f'"{spec.path}"'


def render_import_block(imports: Iterable[ImportSpec]) -> str:
    specs = sorted(set(imports), key=lambda s: (s.path, s.name or ""))
    if not specs:
        return ""
    if len(specs) == 1:
        return f"import {_import_line(specs[0])}\n"

    std = [s for s in specs if is_stdlib(s.path)]
    other = [s for s in specs if not is_stdlib(s.path)]
    lines = ["import ("]
    for group in (std, other):
        if not group:
            continue
        if len(lines) > 1:
            lines.append("")
        lines.extend(f"\t{_import_line(s)}" for s in group)
    lines.append(")")
    return "\n".join(lines) + "\n"
