import logging

from rich.console import Console
from rich.logging import RichHandler


def _setup_root_logger() -> None:
    logger = logging.getLogger("treehugger")
    logger.setLevel(logging.WARNING)
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return
    _handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
        show_level=False,
        markup=False,
    )
    _formatter = logging.Formatter("%(name)s: %(levelname)s: %(message)s")
    _handler.setFormatter(_formatter)
    logger.addHandler(_handler)


def set_level(level: int | str) -> None:
    """Set the level of the package logger (usually ``config.log_level``)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)


_setup_root_logger()
logger = logging.getLogger("treehugger")


__all__ = ["logger", "set_level"]
