"""Config file support for feedscout.

Loads default CLI arguments from:
  1. ~/.feedscout.yaml  (user-level)
  2. ./feedscout.yaml   (project-level, overrides user-level)
  3. FEEDSCOUT_* environment variables (override both files)

Example config file:

    # ~/.feedscout.yaml
    format: json
    timeout: 5
    verify: true
    user-agent: MyReader/2.0
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

from feedscout.models import DEFAULT_TIMEOUT, DiscoveryOptions

logger = logging.getLogger(__name__)

_BOOL_FIELDS = {"verbose", "quiet", "verify", "no_follow_redirects"}
_FLOAT_FIELDS = {"timeout"}
_STR_FIELDS = {"format", "user_agent", "base_url", "output"}

CONFIG_PATHS = (
    Path.home() / ".feedscout.yaml",
    Path.home() / ".feedscout.yml",
    Path("feedscout.yaml"),
    Path("feedscout.yml"),
)


def load_config(paths=None) -> Dict[str, Any]:
    """Load config from YAML files, later files overriding earlier ones."""
    config: Dict[str, Any] = {}

    for p in CONFIG_PATHS if paths is None else paths:
        if not Path(p).is_file():
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"[Config] Failed to load {p}: {e}")
            continue
        if isinstance(data, dict):
            # Normalize keys: dashes → underscores
            config.update({str(k).replace("-", "_"): v for k, v in data.items()})
            logger.debug(f"[Config] Loaded {p}")
        else:
            logger.warning(f"[Config] Ignoring {p}: top level must be a mapping")

    return config


def load_env_config() -> Dict[str, Any]:
    """Load config from FEEDSCOUT_* environment variables.

    FEEDSCOUT_TIMEOUT=5 → timeout=5.0, FEEDSCOUT_VERIFY=1 → verify=True, etc.
    """
    prefix = "FEEDSCOUT_"
    config: Dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        field = key[len(prefix):].lower()
        if field in _BOOL_FIELDS:
            config[field] = value.lower() in ("1", "true", "yes", "on")
        elif field in _FLOAT_FIELDS:
            try:
                config[field] = float(value)
            except ValueError:
                logger.warning(f"[Config] Ignoring {key}={value!r}: not a number")
        elif field in _STR_FIELDS:
            config[field] = value
    return config


def _coerce(key: str, value: Any) -> Any:
    if key in _BOOL_FIELDS:
        return bool(value)
    if key in _FLOAT_FIELDS:
        return float(value)
    return str(value)


def apply_config_defaults(parser, args):
    """Apply config defaults to CLI args the user did not set (CLI always wins).

    Priority: CLI flags > env vars (FEEDSCOUT_*) > config files > parser defaults.
    """
    config = load_config()
    config.update(load_env_config())

    for key, value in config.items():
        if key not in _BOOL_FIELDS | _FLOAT_FIELDS | _STR_FIELDS or not hasattr(args, key):
            continue
        # Only apply if the CLI arg wasn't explicitly provided
        if getattr(args, key) != parser.get_default(key):
            continue
        try:
            setattr(args, key, _coerce(key, value))
        except (TypeError, ValueError):
            logger.warning(f"[Config] Ignoring {key}={value!r}: wrong type")

    return args


def options_from_config(config: Dict[str, Any]) -> DiscoveryOptions:
    """Build DiscoveryOptions from a loaded config mapping (for library callers)."""
    kwargs: Dict[str, Any] = {
        "timeout": float(config.get("timeout", DEFAULT_TIMEOUT)),
        "follow_redirects": not config.get("no_follow_redirects", False),
        "verify": bool(config.get("verify", False)),
    }
    if config.get("user_agent"):
        kwargs["user_agent"] = str(config["user_agent"])
    if config.get("base_url"):
        kwargs["base_url"] = str(config["base_url"])
    return DiscoveryOptions(**kwargs)


_STARTER_CONFIG = """\
# feedscout configuration: customize your defaults here.
# CLI flags always override these values.

# Output format: console, json, markdown, opml
# format: console

# HTTP request timeout (seconds)
# timeout: 10

# Fetch every candidate and keep only real feeds
# verify: false

# Don't follow HTTP redirects when fetching pages
# no-follow-redirects: false

# User-Agent header for all requests
# user-agent: feedscout/1.0 (+feed discovery)

# Suppress status messages
# quiet: false
"""


def generate_starter_config() -> Path:
    """Write a starter config file to ~/.feedscout.yaml (won't overwrite existing)."""
    path = Path.home() / ".feedscout.yaml"
    if path.exists():
        path = Path.home() / ".feedscout.yaml.new"
    path.write_text(_STARTER_CONFIG, encoding="utf-8")
    return path
