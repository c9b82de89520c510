"""
Configuration loading for Lyric Buddy.
Reads KEY=VALUE pairs from config/.env and turns them into typed settings.
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Dict, Optional

from lyric_errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_FILE_RELATIVE_PATH = os.path.join("config", ".env")
REQUIRED_KEYS = ('SECRETS_FILE', 'MAX_TOKENS', 'TEMPERATURE', 'MODEL')


def parse_env_file(env_file_path: str) -> Dict[str, str]:
    """
    Parse a simple .env file into a dictionary.

    Blank lines and lines starting with '#' are ignored. The key is the text
    before the first '=' and the value runs up to the next '=' (or end of
    line). Lines that don't yield both a key and a value are skipped.

    Args:
        env_file_path: Path to the .env file

    Returns:
        Dictionary of raw string settings
    """
    env_map: Dict[str, str] = {}

    try:
        with open(env_file_path, 'r', encoding='utf-8', newline='') as env_file:
            lines = env_file.read().split('\n')
    except OSError:
        raise ConfigurationError(f"Could not open .env file: {env_file_path}")
    except UnicodeDecodeError as e:
        raise ConfigurationError(f".env file is not valid UTF-8: {env_file_path} ({e})")

    for line in lines:
        if line.endswith('\r'):
            line = line[:-1]
        if not line or line[0] == '#':
            continue

        parts = line.split('=')
        if len(parts) < 2:
            continue

        key, value = parts[0], parts[1]
        if key and value:
            env_map[key] = value

    return env_map


@dataclass(frozen=True)
class LyricBuddyConfig:
    secrets_file: str
    max_tokens: int
    temperature: float
    model: str

    @classmethod
    def from_env_map(cls, env_map: Dict[str, str], base_dir: str) -> 'LyricBuddyConfig':
        """Validate the raw .env settings; secrets_file is resolved against base_dir."""
        missing = [key for key in REQUIRED_KEYS if key not in env_map]
        if missing:
            raise ConfigurationError(f"Missing required config key(s): {', '.join(missing)}")

        try:
            max_tokens = int(env_map['MAX_TOKENS'])
        except ValueError:
            raise ConfigurationError(f"MAX_TOKENS must be an integer, got: {env_map['MAX_TOKENS']!r}")
        if max_tokens < 0:
            raise ConfigurationError(f"MAX_TOKENS must be non-negative, got: {max_tokens}")

        try:
            temperature = float(env_map['TEMPERATURE'])
        except ValueError:
            raise ConfigurationError(f"TEMPERATURE must be a number, got: {env_map['TEMPERATURE']!r}")
        if not math.isfinite(temperature):
            raise ConfigurationError(f"TEMPERATURE must be a finite number, got: {env_map['TEMPERATURE']!r}")

        model = env_map['MODEL'].strip()
        if not model:
            raise ConfigurationError("MODEL must not be empty")

        return cls(
            secrets_file=os.path.join(base_dir, env_map['SECRETS_FILE']),
            max_tokens=max_tokens,
            temperature=temperature,
            model=model,
        )


def load_config(base_dir: Optional[str] = None) -> LyricBuddyConfig:
    """Load config/.env from base_dir (defaults to the current working directory)."""
    base_dir = base_dir or os.getcwd()
    env_file_path = os.path.join(base_dir, ENV_FILE_RELATIVE_PATH)

    env_map = parse_env_file(env_file_path)
    config = LyricBuddyConfig.from_env_map(env_map, base_dir)

    logger.info("Resolved secrets file path: %s", config.secrets_file)
    return config
