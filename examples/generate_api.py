from __future__ import annotations

from pathlib import Path

import ctxgen


def main() -> None:
    # Same as running `go generate ./...` inside examples/api.
    # Requires a Go toolchain on PATH (the parser is Go's own go/parser).
    api_dir = Path(__file__).parent / "api"
    out = api_dir / "client_gen.go"

    paths = ctxgen.collect_targets(directory=str(api_dir))
    text = ctxgen.generate(paths, output=str(out), batch=True)
    out.write_text(text, encoding="utf-8")
    print(text)


if __name__ == "__main__":
    main()
