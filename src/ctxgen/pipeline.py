from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from .config import GenerateOptions
from .errors import ConfigurationError, FileAccessError, ParseError
from .gosrc.gofmt import format_source
from .gosrc.parse import parse_sources
from .model import CompilationUnit
from .render import RenderBuffer
from .synth import synthesize_unit

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".go"


def collect_targets(*, file: str | None = None, directory: str | None = None) -> list[str]:
    """Resolve the work list: one explicit file, or every `.go` entry of a directory."""
    if not file and not directory:
        raise ConfigurationError("require -f or -d")
    if file and directory:
        raise ConfigurationError("either -f or -d, not both")
    if file:
        return [file]

    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise FileAccessError(f"read dir failed: {directory}: {e}") from e
    out: list[str] = []
    for entry in entries:
        if not entry.name.endswith(SOURCE_SUFFIX):
            continue
        if entry.is_dir():
            continue
        out.append(os.path.join(directory, entry.name))
    return out


def _same_path(a: str, b: str | None) -> bool:
    if not b:
        return False
    return Path(a).resolve() == Path(b).resolve()


def generate(
    paths: list[str],
    *,
    output: str | None = None,
    batch: bool = False,
    include_package: bool = True,
    gofmt: bool = True,
    go: str | None = None,
) -> str:
    """Run the whole pipeline over `paths` and return the rendered text.

    In batch mode a file that cannot be read or parsed is logged and skipped;
    otherwise the first such failure is raised.
    """
    sources: list[tuple[str, bytes]] = []
    failures: dict[str, ParseError] = {}
    for path in paths:
        if _same_path(path, output):
            logger.info("skipping %s: it is the output file", path)
            continue
        try:
            src = Path(path).read_bytes()
        except OSError as e:
            if not batch:
                raise FileAccessError(f"read file failed: {path}: {e}") from e
            failures[path] = ParseError(path, f"read file failed: {e}")
            continue
        sources.append((path, src))

    results: dict[str, CompilationUnit | ParseError] = dict(failures)
    for (path, _), result in zip(sources, parse_sources(sources, go=go)):
        results[path] = result

    buf = RenderBuffer(include_package=include_package)
    for path in paths:
        result = results.get(path)
        if result is None:
            continue
        if isinstance(result, ParseError):
            if not batch:
                raise result
            logger.warning("skipping %s: %s", path, result.message)
            continue
        forwarders = list(synthesize_unit(result))
        logger.debug("%s: %d forwarder(s)", path, len(forwarders))
        buf.add_unit(result, forwarders)

    text = buf.generate()
    if gofmt and include_package and text:
        text = format_source(text, go=go)
    return text


def run(opts: GenerateOptions) -> str:
    """Generate for `opts` and write the result to the chosen sink."""
    paths = collect_targets(file=opts.file, directory=opts.directory)
    text = generate(
        paths,
        output=opts.output,
        batch=bool(opts.directory),
        include_package=opts.include_package,
        gofmt=opts.gofmt,
        go=opts.go,
    )

    # Render fully before opening the sink so a failure never truncates it.
    if not opts.output:
        sys.stdout.write(text)
        sys.stdout.flush()
        return text
    if not text and any(_same_path(p, opts.output) for p in paths):
        logger.warning("nothing generated; leaving %s untouched since it is also an input", opts.output)
        return text
    try:
        with open(opts.output, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise FileAccessError(f"create file failed: {opts.output}: {e}") from e
    return text
