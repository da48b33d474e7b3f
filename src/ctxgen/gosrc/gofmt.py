from __future__ import annotations

from ..config import go_binary
from ..errors import RenderError
from .helper import run_helper


def format_source(src: str, *, go: str | None = None) -> str:
    """Format Go source with `go/format`; a syntax error becomes `RenderError`."""
    resp = run_helper({"op": "format", "src": src}, go=go or go_binary())
    err = resp.get("error")
    if isinstance(err, str) and err:
        raise RenderError(f"gofmt failed: {err}\n{src}")
    out = resp.get("src")
    if not isinstance(out, str):
        raise RenderError(f"gofmt returned no source: {resp!r}")
    return out
