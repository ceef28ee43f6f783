"""kuhi public API."""

from .errors import (
    KuhiError,
    KuhiRuntimeError,
    KuhiSyntaxError,
)
from .formatter import format_source
from .lexer import tokenize
from .parser import parse

try:
    from .evaluator import Evaluator, Session, evaluate
    from .render import render, render_stack
except ModuleNotFoundError as exc:
    if exc.name and exc.name.startswith("jax"):
        _jax_import_error = exc

        def evaluate(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for evaluate(). Install runtime deps first."
            ) from _jax_import_error

        def render(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for render(). Install runtime deps first."
            ) from _jax_import_error

        def render_stack(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for render_stack(). Install runtime deps first."
            ) from _jax_import_error

        class Evaluator:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for Evaluator(). Install runtime deps first."
                ) from _jax_import_error

        class Session:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for Session(). Install runtime deps first."
                ) from _jax_import_error

    else:
        raise

__all__ = [
    "tokenize",
    "parse",
    "format_source",
    "evaluate",
    "Evaluator",
    "Session",
    "render",
    "render_stack",
    "KuhiError",
    "KuhiSyntaxError",
    "KuhiRuntimeError",
]
