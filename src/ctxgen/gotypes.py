from __future__ import annotations

from .errors import SynthesisError
from .model import (
    MapType,
    PointerType,
    QualifiedType,
    SliceType,
    TypeDescriptor,
    TypeName,
    UnsupportedType,
)


class UnsupportedTypeShape(Exception):
    """Internal signal; callers re-raise as SynthesisError with location info."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


def type_source(t: TypeDescriptor) -> str:
    """Render a type descriptor exactly as it would be written in Go."""
    if isinstance(t, TypeName):
        return t.name
    if isinstance(t, PointerType):
        return "*" + type_source(t.elem)
    if isinstance(t, QualifiedType):
        return f"{t.package}.{t.name}"
    if isinstance(t, SliceType):
        return "[]" + type_source(t.elem)
    if isinstance(t, MapType):
        return f"map[{type_source(t.key)}]{type_source(t.value)}"
    if isinstance(t, UnsupportedType):
        raise UnsupportedTypeShape(t.text)
    raise TypeError(f"not a type descriptor: {t!r}")


def type_qualifiers(t: TypeDescriptor) -> set[str]:
    """Return the package qualifiers referenced by `t`."""
    if isinstance(t, QualifiedType):
        return {t.package}
    if isinstance(t, (PointerType, SliceType)):
        return type_qualifiers(t.elem)
    if isinstance(t, MapType):
        return type_qualifiers(t.key) | type_qualifiers(t.value)
    return set()


def check_type(t: TypeDescriptor, *, path: str, decl: str, where: str) -> str:
    try:
        return type_source(t)
    except UnsupportedTypeShape as e:
        raise SynthesisError(path, decl, f"unsupported type {e.text!r} in {where}") from e
