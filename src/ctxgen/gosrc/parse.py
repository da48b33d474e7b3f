from __future__ import annotations

from typing import Any

from ..config import go_binary
from ..errors import ParseError
from ..model import (
    CompilationUnit,
    Field,
    FuncDecl,
    ImportSpec,
    MapType,
    PointerType,
    QualifiedType,
    Receiver,
    SliceType,
    TypeDescriptor,
    TypeName,
    UnsupportedType,
)
from .helper import run_helper


class _BadPayload(Exception):
    pass


def parse_sources(
    files: list[tuple[str, bytes]], *, go: str | None = None
) -> list[CompilationUnit | ParseError]:
    """Parse a batch of Go files with a single helper run.

    Results come back in input order. A file that fails to parse yields a
    `ParseError` value in its slot instead of aborting the batch.
    """
    if not files:
        return []

    out: list[CompilationUnit | ParseError | None] = [None] * len(files)
    req_files: list[dict[str, str]] = []
    req_index: list[int] = []
    for i, (path, src) in enumerate(files):
        try:
            text = src.decode("utf-8")
        except UnicodeDecodeError as e:
            out[i] = ParseError(path, f"source is not valid UTF-8: {e}")
            continue
        req_files.append({"path": path, "src": text})
        req_index.append(i)

    if req_files:
        resp = run_helper({"op": "parse", "files": req_files}, go=go or go_binary())
        items = resp.get("files")
        if not isinstance(items, list) or len(items) != len(req_files):
            items = [None] * len(req_files)
        for i, item in zip(req_index, items):
            out[i] = _decode_file(files[i][0], item)

    return [r for r in out if r is not None]


def parse_source(path: str, src: bytes, *, go: str | None = None) -> CompilationUnit:
    """Parse one Go file or raise `ParseError`."""
    (result,) = parse_sources([(path, src)], go=go)
    if isinstance(result, ParseError):
        raise result
    return result


def decode_unit(path: str, obj: Any) -> CompilationUnit:
    """Decode one file entry of the helper's `parse` response."""
    result = _decode_file(path, obj)
    if isinstance(result, ParseError):
        raise result
    return result


def _decode_file(path: str, obj: Any) -> CompilationUnit | ParseError:
    if not isinstance(obj, dict):
        return ParseError(path, "go helper returned no result for this file")
    err = obj.get("error")
    if isinstance(err, str) and err:
        return ParseError(path, err)
    try:
        package = obj.get("package")
        if not isinstance(package, str) or not package:
            raise _BadPayload("missing package clause")
        imports = tuple(_decode_import(x) for x in _list(obj.get("imports")))
        decls = tuple(_decode_func(x) for x in _list(obj.get("funcs")))
    except _BadPayload as e:
        return ParseError(path, f"malformed go helper output: {e}")
    return CompilationUnit(path=path, package=package, imports=imports, decls=decls)


def _list(v: Any) -> list[Any]:
    if v is None:
        return []
    if not isinstance(v, list):
        raise _BadPayload(f"expected a list, got {type(v).__name__}")
    return v


def _decode_import(obj: Any) -> ImportSpec:
    if not isinstance(obj, dict) or not isinstance(obj.get("path"), str):
        raise _BadPayload(f"bad import entry {obj!r}")
    name = obj.get("name")
    if name is not None and not isinstance(name, str):
        raise _BadPayload(f"bad import name {name!r}")
    return ImportSpec(path=obj["path"], name=name or None)


def _decode_func(obj: Any) -> FuncDecl:
    if not isinstance(obj, dict) or not isinstance(obj.get("name"), str):
        raise _BadPayload(f"bad func entry {obj!r}")
    recv = obj.get("recv")
    receiver = None
    if recv is not None:
        f = _decode_field(recv)
        # Only a single receiver name is legal Go; an empty list means `func (T) M()`.
        receiver = Receiver(name=f.names[0] if f.names else None, type=f.type)
    return FuncDecl(
        name=obj["name"],
        receiver=receiver,
        params=tuple(_decode_field(x) for x in _list(obj.get("params"))),
        results=tuple(_decode_field(x) for x in _list(obj.get("results"))),
        type_params=bool(obj.get("type_params", False)),
    )


def _decode_field(obj: Any) -> Field:
    if not isinstance(obj, dict):
        raise _BadPayload(f"bad field entry {obj!r}")
    names = _list(obj.get("names"))
    if not all(isinstance(n, str) for n in names):
        raise _BadPayload(f"bad field names {names!r}")
    return Field(names=tuple(names), type=_decode_type(obj.get("type")))


def _decode_type(obj: Any) -> TypeDescriptor:
    if not isinstance(obj, dict):
        raise _BadPayload(f"bad type entry {obj!r}")
    kind = obj.get("kind")
    if kind == "ident":
        return TypeName(name=_str(obj, "name"))
    if kind == "pointer":
        return PointerType(elem=_decode_type(obj.get("elem")))
    if kind == "selector":
        return QualifiedType(package=_str(obj, "pkg"), name=_str(obj, "name"))
    if kind == "slice":
        return SliceType(elem=_decode_type(obj.get("elem")))
    if kind == "map":
        return MapType(key=_decode_type(obj.get("key")), value=_decode_type(obj.get("value")))
    if kind == "unsupported":
        return UnsupportedType(text=_str(obj, "text"))
    raise _BadPayload(f"unknown type kind {kind!r}")


def _str(obj: dict[str, Any], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str) or not v:
        raise _BadPayload(f"missing {key!r} in {obj!r}")
    return v
