"""
Unified environment loader
Reads the project .env file once and exposes typed getters for settings modules
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent

TRUE_VALUES = ('1', 'true', 'yes', 'on')


class EnvLoader:
    """Loads environment variables from the project .env file"""

    def __init__(self, env_file=None):
        self.env_file = Path(env_file) if env_file else BASE_DIR / '.env'
        self.loaded = False

    def load(self):
        if self.loaded:
            return
        if self.env_file.exists():
            # Real environment variables win over the file
            load_dotenv(self.env_file, override=False)
            logger.debug(f"Loaded environment from {self.env_file}")
        self.loaded = True


env_loader = EnvLoader()
env_loader.load()


def get_env(key, default=None):
    """Get a string environment variable"""
    value = os.environ.get(key)
    if value is None or value == '':
        return default
    return value


def get_bool_env(key, default=False):
    """Get a boolean environment variable"""
    value = get_env(key)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def get_int_env(key, default=0):
    """Get an integer environment variable, falling back to default on bad input"""
    value = get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key}: {value!r}, using {default}")
        return default


def get_list_env(key, default=None, separator=','):
    """Get a list environment variable from a separated string"""
    value = get_env(key)
    if value is None:
        return list(default) if default else []
    return [item.strip() for item in value.split(separator) if item.strip()]


def validate_environment(required_keys):
    """Return the required keys that are missing from the environment"""
    missing = [key for key in required_keys if get_env(key) is None]
    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")
    return missing
