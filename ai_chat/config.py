# ai_chat/config.py
# Description: Configuration management for the ai_chat application.
#
# Imports
import copy
import os
import sys
if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union
#
# Third-Party Imports
from loguru import logger
#
# Local Imports
from ai_chat.Utils.atomic_file_ops import atomic_write_text
#
#######################################################################################################################
#
# Functions:

# --- Path to the CLI's configuration file ---
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ai_chat" / "config.toml"
CONFIG_PATH_ENV_VAR = "AI_CHAT_CONFIG"

# --- Base data directory (history, logs) ---
BASE_DATA_DIR = Path.home() / ".local" / "share" / "ai_chat"

CONFIG_TOML_CONTENT = """
# Configuration for ai-chat
# API keys are read from the environment first (OPENAI_API_KEY, ANTHROPIC_API_KEY,
# GEMINI_API_KEY, GROK_API_KEY); the api_key values below are only a fallback.

[general]
default_provider = "openai"   # openai, claude, gemini or grok
context_limit = 10            # How many recent messages are sent with each request
autosave_interval = 1         # Save the chat after this many completed turns
history_dir = "~/.local/share/ai_chat/history"
log_level = "INFO"
log_file = "~/.local/share/ai_chat/logs/ai_chat.log"

[api_settings.openai]
api_key = ""
base_url = "https://api.openai.com/v1/chat/completions"
timeout = 60

[api_settings.claude]
api_key = ""
base_url = "https://api.anthropic.com/v1/messages"
timeout = 60
max_tokens = 1000

[api_settings.gemini]
api_key = ""
base_url = "https://generativelanguage.googleapis.com/v1beta/models"
timeout = 60

[api_settings.grok]
api_key = ""
base_url = "https://api.x.ai/v1/chat/completions"
timeout = 60
"""

try:
    DEFAULT_CONFIG: Dict[str, Any] = tomllib.loads(CONFIG_TOML_CONTENT)
except tomllib.TOMLDecodeError as e:
    logger.critical(f"FATAL: Could not parse internal CONFIG_TOML_CONTENT: {e}. Application cannot start correctly.")
    raise


def deep_merge_dicts(base: Dict, update: Dict) -> Dict:
    """Recursively merges update into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = deep_merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Primary Configuration Loading Logic ---
_CONFIG_CACHE: Optional[Dict[str, Any]] = None
_CONFIG_PATH_OVERRIDE: Optional[Path] = None


def set_config_path(path: Optional[Union[str, Path]]) -> None:
    """Point the loader at another config file (``--config``) and drop the cache."""
    global _CONFIG_PATH_OVERRIDE, _CONFIG_CACHE
    _CONFIG_PATH_OVERRIDE = Path(path).expanduser() if path else None
    _CONFIG_CACHE = None


def get_config_path() -> Path:
    if _CONFIG_PATH_OVERRIDE is not None:
        return _CONFIG_PATH_OVERRIDE
    env_path = os.getenv(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_cli_config_and_ensure_existence(force_reload: bool = False, config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads settings from the config file, creating it from CONFIG_TOML_CONTENT if missing.

    The file's values are merged over the built-in defaults, so a partial file
    is fine. A file that cannot be parsed is logged and ignored.
    """
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None and not force_reload and config_path is None:
        return _CONFIG_CACHE

    path = config_path or get_config_path()
    loaded_config = copy.deepcopy(DEFAULT_CONFIG)

    if not path.exists():
        logger.info(f"Config file not found at {path}. Creating it with default values.")
        try:
            atomic_write_text(path, CONFIG_TOML_CONTENT)
            logger.info(f"Created default config file at {path}")
        except OSError as e:
            logger.error(f"Could not create default config file {path}: {e}. Using internal defaults.")
    else:
        logger.info(f"Loading config from: {path}")
        try:
            with open(path, "rb") as f:
                user_config = tomllib.load(f)
            loaded_config = deep_merge_dicts(loaded_config, user_config)
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Error decoding TOML config file {path}: {e}. Using internal defaults.")
        except OSError as e:
            logger.error(f"Could not read config file {path}: {e}. Using internal defaults.")

    if config_path is None:
        _CONFIG_CACHE = loaded_config
    logger.debug(f"Config loaded with top-level keys: {list(loaded_config.keys())}")
    return loaded_config


def get_cli_setting(section: str, key: str, default: Any = None) -> Any:
    """Helper to get a specific setting from the loaded configuration."""
    config = load_cli_config_and_ensure_existence()
    section_data = config.get(section)
    if isinstance(section_data, dict):
        return section_data.get(key, default)
    return default


def get_api_settings(provider: Optional[str] = None) -> Dict[str, Any]:
    """The ``[api_settings]`` table, or one provider's sub-table."""
    api_settings = load_cli_config_and_ensure_existence().get("api_settings", {})
    if not isinstance(api_settings, dict):
        return {}
    if provider is None:
        return api_settings
    provider_settings = api_settings.get(provider, {})
    return provider_settings if isinstance(provider_settings, dict) else {}


def get_api_key(provider: str, env_var: str) -> Optional[str]:
    """API key for ``provider``: environment variable first, then the config file."""
    api_key = os.getenv(env_var)
    if api_key:
        logger.debug(f"API key for {provider}: found in ${env_var}")
        return api_key
    api_key = get_api_settings(provider).get("api_key")
    if api_key:
        logger.debug(f"API key for {provider}: found in config file")
        return api_key
    logger.debug(f"API key for {provider}: not configured")
    return None


def _resolve_dir(setting_value: Optional[str], fallback: Path) -> Path:
    if setting_value:
        return Path(setting_value).expanduser()
    return fallback


def get_history_dir() -> Path:
    """Directory holding one TOML record per saved chat."""
    return _resolve_dir(get_cli_setting("general", "history_dir"), BASE_DATA_DIR / "history")


def get_cli_log_file_path() -> Path:
    log_file_path = _resolve_dir(get_cli_setting("general", "log_file"), BASE_DATA_DIR / "logs" / "ai_chat.log")
    try:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create log directory {log_file_path.parent}: {e}")
    return log_file_path


def get_int_setting(section: str, key: str, default: int, minimum: int = 1) -> int:
    """Integer setting with a floor; bad values fall back to ``default``."""
    value = get_cli_setting(section, key, default)
    try:
        value = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value for {section}.{key}: {value!r}. Using {default}.")
        return default
    if value < minimum:
        logger.warning(f"{section}.{key} must be at least {minimum}, got {value}. Using {default}.")
        return default
    return value

#
# End of config.py
#######################################################################################################################
