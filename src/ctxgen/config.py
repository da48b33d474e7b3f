from __future__ import annotations

import os
from dataclasses import dataclass, field


def default_target_file() -> str | None:
    """Return the file `go generate` is running for.

    `go generate` exports `GOFILE`; outside of it there is no default.
    """
    return os.environ.get("GOFILE") or None


def go_binary() -> str:
    """Return the Go binary used to run the helper.

    Override with `CTXGEN_GO`.
    """
    return os.environ.get("CTXGEN_GO") or "go"


@dataclass(frozen=True)
class GenerateOptions:
    file: str | None = None
    directory: str | None = None
    output: str | None = None
    include_package: bool = True
    gofmt: bool = True
    go: str = field(default_factory=go_binary)
