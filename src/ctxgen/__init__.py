"""ctxgen: generate context-free forwarders for Go `...WithContext` functions."""

from __future__ import annotations

from . import errors
from .pipeline import collect_targets, generate, run
from .synth import synthesize

__all__ = [
    "collect_targets",
    "errors",
    "generate",
    "run",
    "synthesize",
]
