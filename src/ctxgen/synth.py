"""Build context-free forwarders for `...WithContext` declarations.

For

    func (c *Client) FetchWithContext(ctx context.Context, id string) (*Item, error)

the forwarder is

    func (c *Client) Fetch(id string) (*Item, error) {
        return c.FetchWithContext(context.Background(), id)
    }
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .errors import SynthesisError
from .gotypes import check_type
from .model import (
    Call,
    CompilationUnit,
    ExprStmt,
    Field,
    ForwarderDecl,
    FuncDecl,
    Name,
    ReturnStmt,
    Selector,
)
from .selector import SUFFIX, select_decls

DEFAULT_CONTEXT_PACKAGE = "context"


def default_context() -> Call:
    """`context.Background()`: a context with no deadline and no cancellation."""
    return Call(fun=Selector(x=Name(DEFAULT_CONTEXT_PACKAGE), sel="Background"))


def strip_suffix(name: str) -> str:
    if not name.endswith(SUFFIX):
        raise ValueError(f"{name!r} does not end with {SUFFIX!r}")
    return name[: -len(SUFFIX)]


def forwarded_names(params: Iterable[Field]) -> list[str]:
    """Flatten parameter groups: `a, b T` forwards as two arguments."""
    names: list[str] = []
    for f in params:
        names.extend(f.names)
    return names


def synthesize(decl: FuncDecl, *, path: str = "<unknown>") -> ForwarderDecl:
    """Build the forwarder for one eligible declaration.

    Raises `SynthesisError` instead of emitting something that would not
    compile: unsupported types, unnamed or blank parameters, an unnamed
    receiver, type parameters, or a leading entry that declares more than
    the context parameter.
    """
    if not decl.params:
        raise SynthesisError(path, decl.name, "no leading context parameter")
    if decl.name == SUFFIX:
        raise SynthesisError(path, decl.name, "nothing left of the name once the suffix is stripped")
    if decl.type_params:
        raise SynthesisError(path, decl.name, "generic declarations are not supported")

    lead = decl.params[0]
    if len(lead.names) > 1:
        raise SynthesisError(
            path,
            decl.name,
            f"leading parameter group declares {', '.join(lead.names)}; only the context may be dropped",
        )

    target = Name(decl.name)
    if decl.receiver is not None:
        recv = decl.receiver
        check_type(recv.type, path=path, decl=decl.name, where="receiver")
        if not recv.name or recv.name == "_":
            raise SynthesisError(path, decl.name, "receiver has no name to call through")
        target = Selector(x=Name(recv.name), sel=decl.name)

    params = decl.params[1:]
    for i, f in enumerate(params, start=1):
        check_type(f.type, path=path, decl=decl.name, where=f"parameter {i}")
        if not f.names:
            raise SynthesisError(path, decl.name, f"parameter {i} is unnamed and cannot be forwarded")
        if "_" in f.names:
            raise SynthesisError(path, decl.name, f"parameter {i} is blank and cannot be forwarded")
    for i, f in enumerate(decl.results):
        check_type(f.type, path=path, decl=decl.name, where=f"result {i}")

    names = forwarded_names(params)
    receiver_names = [decl.receiver.name] if decl.receiver is not None else []
    if DEFAULT_CONTEXT_PACKAGE in (*names, *receiver_names):
        raise SynthesisError(
            path, decl.name, f"a parameter named {DEFAULT_CONTEXT_PACKAGE!r} would shadow the package"
        )

    call = Call(fun=target, args=(default_context(), *(Name(n) for n in names)))
    body = ReturnStmt(call) if decl.results else ExprStmt(call)

    return ForwarderDecl(
        name=strip_suffix(decl.name),
        receiver=decl.receiver,
        params=tuple(params),
        results=tuple(decl.results),
        body=body,
        source=decl,
    )


def synthesize_unit(unit: CompilationUnit) -> Iterator[ForwarderDecl]:
    for decl in select_decls(unit):
        yield synthesize(decl, path=unit.path)
