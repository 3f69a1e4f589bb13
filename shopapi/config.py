"""Application settings loaded from a dotenv file and the environment."""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

PRODUCTION_ENV = "production"

DATABASE_TIMEOUT = timedelta(seconds=5)
PRODUCT_CACHING_TIME = timedelta(minutes=1)

AUTH_IGNORE_METHODS = (
    "/user.UserService/Login",
    "/user.UserService/Register",
)

_DEFAULT_PATH = Path(__file__).with_name("config.yaml")


@dataclass
class Settings:
    """Runtime settings; each field is read from the variable of the same name."""

    environment: str = ""
    http_port: int = 0
    auth_secret: str = ""
    database_uri: str = ""
    redis_uri: str = ""
    redis_password: str = ""
    redis_db: int = 0


_settings = Settings()


def _from_environ(environ: Mapping[str, str]) -> Settings:
    values = {}
    for spec in dataclasses.fields(Settings):
        raw = environ.get(spec.name)
        if not raw:
            continue
        if isinstance(spec.default, int):
            try:
                values[spec.name] = int(raw)
            except ValueError:
                raise ValueError(
                    f"invalid integer for {spec.name!r}: {raw!r}"
                ) from None
        else:
            values[spec.name] = raw
    return Settings(**values)


def load_config(path: str | os.PathLike[str] | None = None) -> Settings:
    """Load the dotenv file at ``path`` into the environment and parse the settings.

    A missing file is only logged; variables already set in the environment win.
    Raises ValueError when a numeric setting cannot be parsed.
    """
    global _settings

    config_path = Path(path) if path is not None else _DEFAULT_PATH
    if config_path.is_file():
        from dotenv import load_dotenv

        load_dotenv(config_path, override=False)
    else:
        logger.warning("Error on load configuration file: %s not found", config_path)

    _settings = _from_environ(os.environ)
    return _settings


def get_config() -> Settings:
    """Return the settings from the most recent load."""
    return _settings