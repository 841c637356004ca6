"""Shared logging helpers for the subscription hub."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for controller output. Pass ``force=True``
    to reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def level_from_name(name: str | None, *, default: int = logging.INFO) -> int:
    """Translate a level name such as ``"debug"`` into a ``logging`` level."""

    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    if isinstance(level, int):
        return level
    raise ValueError(f"Unknown log level: {name}")
