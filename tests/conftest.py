from __future__ import annotations

import os
from typing import Any

import pytest


class FakeGo:
    """In-process stand-in for the Go helper.

    Parse payloads are looked up by file basename; a string registers a parse
    error. `format` echoes its input unless `format_error` is set.
    """

    def __init__(self) -> None:
        self.payloads: dict[str, dict[str, Any] | str] = {}
        self.format_error: str | None = None
        self.requests: list[dict[str, Any]] = []

    def __call__(self, request: dict[str, Any], *, go: str) -> dict[str, Any]:
        self.requests.append(request)
        if request["op"] == "format":
            if self.format_error:
                return {"error": self.format_error}
            return {"src": request["src"]}
        files = []
        for f in request["files"]:
            payload = self.payloads.get(os.path.basename(f["path"]))
            if payload is None:
                files.append({"path": f["path"], "error": f"{f['path']}:1:1: expected 'package', found 'EOF'"})
            elif isinstance(payload, str):
                files.append({"path": f["path"], "error": payload})
            else:
                files.append(dict(payload, path=f["path"]))
        return {"files": files}


@pytest.fixture
def fake_go(monkeypatch):
    import ctxgen.gosrc.gofmt
    import ctxgen.gosrc.parse

    fake = FakeGo()
    monkeypatch.setattr(ctxgen.gosrc.parse, "run_helper", fake)
    monkeypatch.setattr(ctxgen.gosrc.gofmt, "run_helper", fake)
    return fake
