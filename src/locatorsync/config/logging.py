"""Shared logging helpers."""

from __future__ import annotations

import logging

from .env import env_flag


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the level
    defaults to INFO, or DEBUG when ``DEBUG=true`` is set in the environment. Pass
    ``force=True`` to reconfigure during tests or specialised entry points.
    """

    if level is None:
        level = logging.DEBUG if env_flag("DEBUG") else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
