"""Configuration for the outline/Todoist sync.

Reads the Todoist token and tag mappings from CLI args, environment
variables, .env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    TODOIST_API_TOKEN: Todoist API token (required)
    TODOIST_API_URL: REST API base URL (optional, default: Todoist REST v2)
    TODOIST_MAX_ATTEMPTS: Attempts per retried request (optional, default: 3)
    TODOIST_DEBUG: Enable debug logging (optional, default: false)

Tag mappings are only read from the YAML config (``mappings`` section).
"""

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from dotenv import load_dotenv

from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import TagMapping, UnifiedConfig, build_config

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.todoist.com/rest/v2"


@dataclass
class Config:
    api_token: str
    api_url: str = DEFAULT_API_URL
    tag_mappings: tuple[TagMapping, ...] = ()
    timeout: float = 30.0
    max_attempts: int = 3
    retry_base_delay: float = 1.0
    debug: bool = False


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If the URL format is invalid or the token is empty.
    """
    config.api_url = config.api_url.strip()

    if not config.api_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid API URL '{config.api_url}': must start with http:// or https://"
        )

    parsed = urlparse(config.api_url)
    if not parsed.hostname:
        raise ValueError(
            f"Invalid API URL '{config.api_url}': URL must include a hostname"
        )

    config.api_url = config.api_url.removesuffix("/")

    if not config.api_token.strip():
        raise ValueError(
            "Todoist API token cannot be empty. Set TODOIST_API_TOKEN environment variable."
        )

    if config.api_url.startswith("http://"):
        logger.warning(
            "WARNING: API URL is not using TLS (%s). Use only for development.",
            config.api_url,
        )


def require_sync_ready(config: Config) -> None:
    """Check the preconditions for running a sync.

    Raises:
        ValueError: If the token or the tag mappings are missing.
    """
    if not config.api_token.strip():
        raise ValueError("Configure API token in settings")
    if not config.tag_mappings:
        raise ValueError("Configure tag mappings in settings")


def load_config(
    api_token: str | None = None,
    api_url: str | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
    tag_mappings: tuple[TagMapping, ...] = (),
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        api_token: Override token (takes precedence over env var and YAML).
        api_url: Override base URL (takes precedence over env var and YAML).
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Dict of values from the YAML ``todoist`` section.
            Used as fallback when CLI arg and env var are both unset.
        tag_mappings: Ordered tag mappings from the YAML config.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If the token is missing after checking all sources,
            or a numeric setting is out of range.
    """
    fb = yaml_fallbacks or {}

    # --- String fields: CLI > env > YAML > default ---

    token = api_token or os.getenv("TODOIST_API_TOKEN") or fb.get("api_token")
    if not token:
        raise ValueError(
            "Todoist API token not found. Set TODOIST_API_TOKEN environment variable, "
            "pass --token CLI argument, or add 'api_token' to config.yml."
        )
    token = token.strip()

    url = (
        api_url
        or os.getenv("TODOIST_API_URL")
        or fb.get("api_url")
        or DEFAULT_API_URL
    )

    # --- Boolean fields: CLI > env > YAML > default ---

    if debug:
        final_debug = True
    else:
        env_debug = os.getenv("TODOIST_DEBUG")
        if env_debug is not None:
            final_debug = env_debug.lower() in ("true", "1", "yes", "on")
        else:
            final_debug = bool(fb.get("debug", False))

    # --- Numeric fields: env > YAML > default ---

    attempts_raw = os.getenv("TODOIST_MAX_ATTEMPTS")
    if attempts_raw is not None:
        try:
            final_attempts = int(attempts_raw)
        except ValueError:
            raise ValueError(
                f"Invalid TODOIST_MAX_ATTEMPTS '{attempts_raw}': must be a number between 1 and 10"
            ) from None
        if not (1 <= final_attempts <= 10):
            raise ValueError(
                f"Invalid TODOIST_MAX_ATTEMPTS '{attempts_raw}': must be a number between 1 and 10"
            )
    elif "max_attempts" in fb:
        final_attempts = int(fb["max_attempts"])
    else:
        final_attempts = 3

    config = Config(
        api_token=token,
        api_url=url,
        tag_mappings=tuple(tag_mappings),
        timeout=float(fb.get("timeout", 30.0)),
        max_attempts=final_attempts,
        retry_base_delay=float(fb.get("retry_base_delay", 1.0)),
        debug=final_debug,
    )

    validate_config(config)

    return config


def load_config_from_sources(
    overrides: dict | None = None,
) -> tuple[Config, UnifiedConfig, list[str]]:
    """Resolve the runtime config from every source.

    Loads ``.env`` first (so YAML ``${VAR}`` interpolation can see it),
    then the YAML config files, then merges via ``load_config()``.

    Args:
        overrides: CLI values (``api_token``, ``api_url``, ``debug``).

    Returns:
        Tuple of (validated Config, unified YAML config, source labels).

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    load_dotenv()

    sources: list[str] = []
    config_files = discover_config_files()
    unified = build_config(load_hierarchical_config())
    if config_files:
        sources.append(f"config file: {config_files[0]}")

    yaml_fallbacks = {
        k: v for k, v in unified.todoist.model_dump().items() if v is not None
    }

    overrides = overrides or {}
    config = load_config(
        api_token=overrides.get("api_token"),
        api_url=overrides.get("api_url"),
        debug=overrides.get("debug", False),
        yaml_fallbacks=yaml_fallbacks,
        tag_mappings=tuple(unified.mappings),
    )

    if overrides:
        sources.append("CLI arguments")
    sources.append("environment variables")
    return config, unified, sources
