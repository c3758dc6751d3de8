# Runtime settings
#
# Resolved from the process environment, optionally seeded from a .env file.
# Real environment variables always win over .env entries.

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

from .audit_log import DEFAULT_AUDIT_DIR

DEFAULT_DATA_FILE = ".passman_data.json"

ENV_DATA_FILE = "PASSMAN_DATA_FILE"
ENV_AUDIT_DIR = "PASSMAN_AUDIT_DIR"
ENV_AUDIT_ENABLED = "PASSMAN_AUDIT_ENABLED"

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class Settings:
    """Where the vault lives and where audit events go."""
    data_file: Path
    audit_dir: Path
    audit_enabled: bool = True


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() not in _FALSE_VALUES


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Explicit .env path. If None, python-dotenv searches
                  upward from the working directory.
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    data_file = os.getenv(ENV_DATA_FILE) or DEFAULT_DATA_FILE
    audit_dir = os.getenv(ENV_AUDIT_DIR) or str(DEFAULT_AUDIT_DIR)

    return Settings(
        data_file=Path(data_file).expanduser(),
        audit_dir=Path(audit_dir).expanduser(),
        audit_enabled=_env_flag(ENV_AUDIT_ENABLED, True),
    )
