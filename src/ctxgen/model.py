from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# Type descriptors: the closed set of declared type shapes a forwarder may copy.


@dataclass(frozen=True)
class TypeName:
    name: str


@dataclass(frozen=True)
class PointerType:
    elem: "TypeDescriptor"


@dataclass(frozen=True)
class QualifiedType:
    package: str  # qualifier as written in the source, e.g. "context"
    name: str


@dataclass(frozen=True)
class SliceType:
    elem: "TypeDescriptor"


@dataclass(frozen=True)
class MapType:
    key: "TypeDescriptor"
    value: "TypeDescriptor"


@dataclass(frozen=True)
class UnsupportedType:
    text: str  # source text reported by the parser


TypeDescriptor = Union[TypeName, PointerType, QualifiedType, SliceType, MapType, UnsupportedType]


@dataclass(frozen=True)
class Field:
    """One parameter/result entry: zero or more names sharing one type."""

    names: tuple[str, ...]
    type: TypeDescriptor


@dataclass(frozen=True)
class Receiver:
    name: str | None
    type: TypeDescriptor


@dataclass(frozen=True)
class ImportSpec:
    path: str
    name: str | None = None  # explicit alias, if any


@dataclass(frozen=True)
class FuncDecl:
    name: str
    receiver: Receiver | None
    params: tuple[Field, ...]
    results: tuple[Field, ...]
    type_params: bool = False

    @property
    def is_exported(self) -> bool:
        return self.name[:1].isupper()


@dataclass(frozen=True)
class CompilationUnit:
    path: str
    package: str
    imports: tuple[ImportSpec, ...]
    decls: tuple[FuncDecl, ...]


# Expressions and statements used by synthesized bodies.


@dataclass(frozen=True)
class Name:
    name: str


@dataclass(frozen=True)
class Selector:
    x: "Expr"
    sel: str


@dataclass(frozen=True)
class Call:
    fun: "Expr"
    args: tuple["Expr", ...] = ()


Expr = Union[Name, Selector, Call]


@dataclass(frozen=True)
class ReturnStmt:
    value: Call


@dataclass(frozen=True)
class ExprStmt:
    value: Call


Stmt = Union[ReturnStmt, ExprStmt]


@dataclass(frozen=True)
class ForwarderDecl:
    name: str
    receiver: Receiver | None
    params: tuple[Field, ...]
    results: tuple[Field, ...]
    body: Stmt
    source: FuncDecl

    @property
    def call(self) -> Call:
        return self.body.value
