#!/usr/bin/env python3
"""
Settings for the user directory: .env loading, variants, logging.
"""
# --------------------------------------------------------------------------------------------------------
import os # for environment variables
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path # We use Path objects to handle file and directory paths.
from typing import Optional, Tuple

from dotenv import load_dotenv # It loads environment variables from a .env file into your script's environment.

from .errors import ConfigError

# -----------------------------------------------------------------------------
# Load settings from .env (one directory above this file)
# -----------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
# Get the project root (the directory that holds api_server.py) from this file's directory (user_directory).

DEFAULT_API_URL = "https://randomuser.me/api/"
DEFAULT_TIMEOUT = 15.0
DEFAULT_IMAGE_HOSTS = ("randomuser.me",)
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Variant(str, Enum):
    """The three versions of the page, each adding to the one before."""

    BASIC = "basic"  # card grid only
    MODAL = "modal"  # grid + click-to-expand modal
    EXTENDED = "extended"  # modal + count form, toasts, email and address

    @property
    def has_modal(self) -> bool:
        return self is not Variant.BASIC

    @property
    def is_extended(self) -> bool:
        return self is Variant.EXTENDED


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    variant: Variant = Variant.EXTENDED
    image_hosts: Tuple[str, ...] = field(default=DEFAULT_IMAGE_HOSTS)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """
        Build settings from the process environment.

        The .env file is read first (without overriding variables that are
        already exported), so a shell export always wins over the file.
        """
        load_dotenv(env_file if env_file is not None else BASE_DIR / ".env")

        raw_timeout = os.environ.get("RANDOMUSER_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"RANDOMUSER_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigError(f"RANDOMUSER_TIMEOUT must be positive, got {raw_timeout!r}")

        raw_variant = os.environ.get("DIRECTORY_VARIANT", Variant.EXTENDED.value).strip().lower()
        try:
            variant = Variant(raw_variant)
        except ValueError:
            choices = ", ".join(v.value for v in Variant)
            raise ConfigError(f"DIRECTORY_VARIANT must be one of {choices}, got {raw_variant!r}") from None

        raw_hosts = os.environ.get("DIRECTORY_IMAGE_HOSTS", ",".join(DEFAULT_IMAGE_HOSTS))
        image_hosts = tuple(h.strip().lower() for h in raw_hosts.split(",") if h.strip())

        log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            api_url=os.environ.get("RANDOMUSER_API_URL", DEFAULT_API_URL),
            timeout=timeout,
            variant=variant,
            image_hosts=image_hosts,
            log_level=log_level,
        )


def configure_logging(level: str = "INFO") -> None:
    # One stream handler on the root logger; module loggers propagate to it.
    logging.basicConfig(level=level, format=LOG_FORMAT)
