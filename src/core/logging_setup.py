"""Logging de la aplicación (Rich).

Un único punto de configuración: los módulos usan `logging.getLogger(__name__)`
y la CLI llama a `configure_logging` una vez por invocación.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "iamctl-rich"


def configure_logging(level: str | int = logging.WARNING, *, console: Console | None = None) -> None:
    """Instala un `RichHandler` en el root logger (stderr por defecto)."""

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root.addHandler(handler)
    root.setLevel(level)
    # httpx loguea cada request en INFO; solo lo queremos en modo verbose.
    logging.getLogger("httpx").setLevel(level if level <= logging.DEBUG else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
