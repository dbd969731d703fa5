from __future__ import annotations

import logging
import os
from dataclasses import dataclass

FORMATS = {
    "console": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    "plain": "%(levelname)s %(name)s: %(message)s",
}


@dataclass(frozen=True)
class LogConfig:
    level: str = os.getenv("WHAT_TO_EAT_LOG_LEVEL", "INFO")
    format: str = os.getenv("WHAT_TO_EAT_LOG_FORMAT", "console")


DEFAULT_LOG_CONFIG = LogConfig()


def configure_logging(config: LogConfig = DEFAULT_LOG_CONFIG) -> None:
    level = getattr(logging, config.level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=FORMATS.get(config.format, FORMATS["console"]),
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
