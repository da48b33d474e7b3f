"""Builders for the Go helper's JSON payloads, so tests run without Go."""

from __future__ import annotations

from typing import Any


def ident(name: str) -> dict[str, Any]:
    return {"kind": "ident", "name": name}


def ptr(elem: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "pointer", "elem": elem}


def sel(pkg: str, name: str) -> dict[str, Any]:
    return {"kind": "selector", "pkg": pkg, "name": name}


def slice_of(elem: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "slice", "elem": elem}


def map_of(key: dict[str, Any], value: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "map", "key": key, "value": value}


def unsupported(text: str) -> dict[str, Any]:
    return {"kind": "unsupported", "text": text}


def field(names: list[str] | str, t: dict[str, Any]) -> dict[str, Any]:
    if isinstance(names, str):
        names = [names] if names else []
    return {"names": names, "type": t}


CTX = field("ctx", sel("context", "Context"))


def func(
    name: str,
    params: list[dict[str, Any]] | None = None,
    results: list[dict[str, Any]] | None = None,
    *,
    recv: dict[str, Any] | None = None,
    type_params: bool = False,
) -> dict[str, Any]:
    return {
        "name": name,
        "recv": recv,
        "type_params": type_params,
        "params": params or [],
        "results": results or [],
    }


def unit(
    path: str,
    funcs: list[dict[str, Any]],
    *,
    package: str = "api",
    imports: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    if imports is None:
        imports = [{"path": "context"}]
    return {"path": path, "package": package, "imports": imports, "funcs": funcs}


def fetch_with_context() -> dict[str, Any]:
    """func (c *Client) FetchWithContext(ctx context.Context, id string) (*Item, error)"""
    return func(
        "FetchWithContext",
        [CTX, field("id", ident("string"))],
        [field("", ptr(ident("Item"))), field("", ident("error"))],
        recv=field("c", ptr(ident("Client"))),
    )


def ping_with_context() -> dict[str, Any]:
    """func PingWithContext(ctx context.Context) error"""
    return func("PingWithContext", [CTX], [field("", ident("error"))])
