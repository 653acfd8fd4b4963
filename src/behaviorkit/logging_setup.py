from __future__ import annotations
import io
import json
import logging
import os
from logging.config import dictConfig

import yaml

DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _stdout_config(level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "std": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"}
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "std",
                "level": level,
            }
        },
        "root": {"level": level, "handlers": ["stdout"]},
    }


def setup_logging(level: str | None = None, config_path_env: str = "BEHAVIORKIT_LOGCFG") -> None:
    """
    Configure logging for applications that embed behaviorkit.

    - If BEHAVIORKIT_LOGCFG points to a JSON/YAML dictConfig file, we load it.
    - Otherwise the root logger gets a single stdout handler at ``level``
      (defaults to LOG_LEVEL).
    """
    cfg_path = os.getenv(config_path_env, "").strip()
    if cfg_path and os.path.exists(cfg_path):
        with open(cfg_path, "r", encoding="utf-8") as fh:
            text = fh.read()
        try:
            dictConfig(json.loads(text))
        except json.JSONDecodeError:
            dictConfig(yaml.safe_load(io.StringIO(text)))
        return

    level = (level or os.getenv("LOG_LEVEL", DEFAULT_LEVEL)).upper()
    dictConfig(_stdout_config(level))


def ensure_logger(module: str, level: str = "INFO") -> logging.Logger:
    """
    Get a module logger and set its level.

    Assumes ``setup_logging()`` has configured the root handler; the logger
    only sets its level and propagates to root.
    """
    logger = logging.getLogger(module)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = True
    return logger
