# infrastructure/logging/log_setup.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import Union

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <8}</level> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra} | {message}"


def setup_console_logging(level: str = "WARNING") -> None:
    logger.remove()
    logger.add(lambda msg: print(msg, end="", file=sys.stderr), level=level.upper(), format=CONSOLE_FORMAT)


def add_file_logging(path: Union[str, Path] = ".httpflow.log", level: str = "DEBUG") -> int:
    return logger.add(str(path), level=level.upper(), format=FILE_FORMAT, encoding="utf-8")
