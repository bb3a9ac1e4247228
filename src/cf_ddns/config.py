"""
Configuration management for cf-ddns.

This module handles loading and validating configuration from command-line
arguments, the environment and an optional TOML file. Configuration priority
(high to low):
1. Command-line arguments
2. The ``CF_API_TOKEN`` environment variable (API token only)
3. Configuration file
4. Default values
"""

from __future__ import annotations

import argparse
import copy
import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

from cf_ddns.logging_config import DATE_FORMAT, LOG_FORMAT

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any, Final


# Environment variable holding the CloudFlare API Token
API_TOKEN_ENV: Final[str] = "CF_API_TOKEN"

# Required settings as (section, key) -> command-line flag
REQUIRED_PARAMETERS: Final[dict[tuple[str, str], str]] = {
    ("cloudflare", "zone_id"): "-zone-id",
    ("cloudflare", "record_id_v4"): "-record-id-v4",
    ("cloudflare", "record_id_v6"): "-record-id-v6",
    ("cloudflare", "api_token"): "-api-token",
    ("record", "name"): "-name",
}

# Configure basic logging for early startup messages.
# Log messages during config loading (before "setup_logging()" is called)
# are visible with proper formatting. "setup_logging()" reconfigures the
# "cf_ddns" logger later.
logger_basic = logging.getLogger(__name__)
logger_basic.setLevel(logging.DEBUG)
handler = logging.StreamHandler()
formatter = logging.Formatter(
    fmt=LOG_FORMAT,
    datefmt=DATE_FORMAT,
)
handler.setFormatter(formatter)
logger_basic.addHandler(handler)
logger_basic.propagate = False


class ConfigValidationError(Exception):
    """
    Exception raised when configuration is missing or invalid.

    Raised before any network activity takes place.

    Attributes
    ----------
    message : str
        Human-readable error message describing the validation failures.
    config_path : Path | None
        Path to the configuration file that failed validation.
    missing : list[str]
        Command-line flags of required settings that have no value.
    """

    def __init__(
        self,
        message: str,
        config_path: Path | None = None,
        missing: list[str] | None = None,
    ) -> None:
        """
        Initialize ConfigValidationError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        config_path : Path | None, optional
            Path to the configuration file.
        missing : list[str] | None, optional
            Flags of missing required settings.
        """
        self.config_path = config_path
        self.missing = missing or []
        super().__init__(message)


# Configuration models (Pydantic with type validation and coercion)


class CloudflareConfig(BaseModel):
    """
    CloudFlare API configuration.

    Attributes
    ----------
    zone_id : str
        The zone ID holding the records.
    record_id_v4 : str
        The ID of the A record.
    record_id_v6 : str
        The ID of the AAAA record.
    api_token : str
        CloudFlare API Token.
    """

    zone_id: str = ""
    record_id_v4: str = ""
    record_id_v6: str = ""
    api_token: str = Field(default="", repr=False)


class RecordConfig(BaseModel):
    """
    DNS record settings shared by the A and AAAA records.

    Attributes
    ----------
    name : str
        The DNS record name.
    ttl : int
        TTL in seconds; 1 means automatic.
    proxied : bool
        Whether the records are proxied.
    comment : str
        Record comment.
    """

    name: str = ""
    ttl: int = Field(default=1, ge=1)
    proxied: bool = True
    comment: str = ""


class LoggingConfig(BaseModel):
    """
    Logging configuration.

    Attributes
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    file_enabled : bool
        Whether to log to file.
    file_path : str
        Path to the log file.
    """

    level: str = "INFO"
    file_enabled: bool = False
    file_path: str = "/var/log/cf-ddns.log"

    @property
    def file_path_as_path(self) -> Path:
        """
        Get the log file path as a Path object.

        Returns
        -------
        Path
            The resolved log file path.
        """
        return Path(self.file_path)


class Config(BaseModel):
    """
    Application configuration.

    Attributes
    ----------
    cloudflare : CloudflareConfig
        CloudFlare API configuration.
    record : RecordConfig
        DNS record settings.
    logging : LoggingConfig
        Logging configuration.
    """

    cloudflare: CloudflareConfig = CloudflareConfig()
    record: RecordConfig = RecordConfig()
    logging: LoggingConfig = LoggingConfig()


def _format_validation_errors(
    error: ValidationError,
    config_path: Path | None,
) -> str:
    """
    Format Pydantic validation errors into human-readable messages.

    Parameters
    ----------
    error : ValidationError
        Pydantic validation error.
    config_path : Path | None
        Path to the configuration file.

    Returns
    -------
    str
        Human-readable error message.
    """
    lines: list[str] = []

    if config_path:
        lines.append(f'Configuration error in "{config_path}":')
    else:
        lines.append("Configuration error:")

    for err in error.errors():
        # Build field path (e.g., "record.ttl")
        field_path = ".".join(str(loc) for loc in err["loc"])

        error_type = err["type"]
        error_input = err["input"]
        input_type = type(error_input).__name__

        value_repr = (
            f'"{error_input}"' if isinstance(error_input, str) else repr(error_input)
        )

        expected_type = _get_expected_type(error_type)
        if expected_type is None:
            lines.append(f"  [{field_path}]: {err['msg']} (value: {value_repr}).")
        else:
            lines.append(
                f"  [{field_path}]: Expected {expected_type}, got {input_type} (value: {value_repr}). {err['msg']}.",
            )

    return "\n".join(lines)


def _get_expected_type(error_type: str) -> str | None:
    """
    Get human-readable expected type from Pydantic error type.

    Parameters
    ----------
    error_type : str
        Pydantic error type string.

    Returns
    -------
    str | None
        Human-readable type name, or None for non-type errors.
    """
    type_mapping = {
        "int_type": "int",
        "int_parsing": "int",
        "int_from_float": "int",
        "bool_type": "bool",
        "bool_parsing": "bool",
        "string_type": "str",
    }
    return type_mapping.get(error_type)


def validate_config_dict(
    data: dict[str, Any],
    config_path: Path | None = None,
) -> None:
    """
    Validate configuration dictionary using Pydantic.

    Parameters
    ----------
    data : dict[str, Any]
        Configuration dictionary to validate.
    config_path : Path | None, optional
        Path to the configuration file (for error messages).

    Raises
    ------
    ConfigValidationError
        If validation fails.
    """
    try:
        Config(**data)
    except ValidationError as e:
        msg = _format_validation_errors(e, config_path)
        raise ConfigValidationError(msg, config_path) from e


def check_required(config: Config, config_path: Path | None = None) -> None:
    """
    Check that every required setting has a value.

    Parameters
    ----------
    config : Config
        The merged configuration.
    config_path : Path | None, optional
        Path to the configuration file.

    Raises
    ------
    ConfigValidationError
        If any required setting is empty.
    """
    missing = [
        flag
        for (section, key), flag in REQUIRED_PARAMETERS.items()
        if not getattr(getattr(config, section), key)
    ]
    if missing:
        msg = f"Error: Missing required parameters: {', '.join(missing)}"
        raise ConfigValidationError(msg, config_path, missing)


def load_config_from_file(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from a TOML file.

    Parameters
    ----------
    config_path : Path
        Path to the configuration file.

    Returns
    -------
    dict[str, Any]
        Parsed configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    tomllib.TOMLDecodeError
        If the configuration file is not valid TOML.
    """
    with config_path.open("rb") as f:
        return tomllib.load(f)


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge two configuration dictionaries.

    Parameters
    ----------
    base : dict[str, Any]
        Base configuration.
    override : dict[str, Any]
        Override configuration (takes precedence).

    Returns
    -------
    dict[str, Any]
        Merged configuration.
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value
    return result


def parse_bool_str(value: str) -> bool:
    """
    Parse a boolean flag value.

    This function is intended to be used as a `type` converter in `argparse`,
    so that ``-proxied=false`` works.

    Parameters
    ----------
    value : str
        One of 1, t, true, yes, 0, f, false, no (case-insensitive).

    Returns
    -------
    bool
        The parsed value.

    Raises
    ------
    argparse.ArgumentTypeError
        If the value is not a recognized boolean.
    """
    normalized = value.strip().lower()
    if normalized in {"1", "t", "true", "yes"}:
        return True
    if normalized in {"0", "f", "false", "no"}:
        return False
    msg = f'Invalid boolean value: "{value}".'
    raise argparse.ArgumentTypeError(msg)


def dict_to_config(data: dict[str, Any]) -> Config:
    """
    Convert a dictionary to a Config object.

    Parameters
    ----------
    data : dict[str, Any]
        Configuration dictionary.

    Returns
    -------
    Config
        Configuration object.
    """
    # Handle file_path expansion before Pydantic validation
    if "logging" in data and "file_path" in data["logging"]:
        data = copy.deepcopy(data)
        data["logging"]["file_path"] = str(
            Path(data["logging"]["file_path"]).expanduser(),
        )

    return Config.model_validate(data)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command-line argument parser.

    Record and CloudFlare flags use single-dash long names (``-zone-id``);
    the double-dash spelling is accepted as well.

    Returns
    -------
    argparse.ArgumentParser
        The parser.
    """
    parser = argparse.ArgumentParser(
        prog="cf-ddns",
        description="Update CloudFlare A and AAAA records with the public IPv4 and IPv6 addresses",
        epilog=f"Set {API_TOKEN_ENV} environment variable or use -api-token flag",
    )

    # Config arguments
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.toml)",
    )

    # CloudFlare arguments
    parser.add_argument(
        "-zone-id",
        "--zone-id",
        dest="zone_id",
        default=None,
        help="CloudFlare Zone ID (required)",
    )
    parser.add_argument(
        "-record-id-v4",
        "--record-id-v4",
        dest="record_id_v4",
        default=None,
        help="CloudFlare DNS Record ID for A record (required)",
    )
    parser.add_argument(
        "-record-id-v6",
        "--record-id-v6",
        dest="record_id_v6",
        default=None,
        help="CloudFlare DNS Record ID for AAAA record (required)",
    )
    parser.add_argument(
        "-api-token",
        "--api-token",
        dest="api_token",
        default=None,
        help=f"CloudFlare API Token (from env var {API_TOKEN_ENV} or flag)",
    )

    # Record arguments
    parser.add_argument(
        "-name",
        "--name",
        dest="name",
        default=None,
        help="DNS record name (required)",
    )
    parser.add_argument(
        "-ttl",
        "--ttl",
        dest="ttl",
        type=int,
        default=None,
        help="DNS record TTL (default: 1, auto)",
    )
    parser.add_argument(
        "-proxied",
        "--proxied",
        dest="proxied",
        type=parse_bool_str,
        nargs="?",
        const=True,
        default=None,
        help="Whether the records are proxied (default: true)",
    )
    parser.add_argument(
        "-comment",
        "--comment",
        dest="comment",
        default=None,
        help="DNS record comment",
    )

    # Logging arguments
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level",
    )
    log_file_group = parser.add_mutually_exclusive_group()
    log_file_group.add_argument(
        "--log-file-enabled",
        action="store_true",
        dest="log_file_enabled",
        default=None,
        help="Enable logging to file",
    )
    log_file_group.add_argument(
        "--log-file-disabled",
        action="store_false",
        dest="log_file_enabled",
        default=None,
        help="Disable logging to file",
    )
    parser.add_argument(
        "--log-file-path",
        type=Path,
        dest="log_file_path",
        default=None,
        help="Path to the log file",
    )

    return parser


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None, optional
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    return build_parser().parse_args(args)


def load_config(
    args: argparse.Namespace | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load configuration from file, environment and command-line arguments.

    Priority (high to low):
    1. Command-line arguments
    2. ``CF_API_TOKEN`` environment variable
    3. Configuration file
    4. Default values

    Parameters
    ----------
    args : argparse.Namespace | None, optional
        Parsed command-line arguments.
    environ : Mapping[str, str] | None, optional
        Environment to read the API token from. If None, uses os.environ.

    Returns
    -------
    Config
        Loaded configuration with every required setting present.

    Raises
    ------
    ConfigValidationError
        If the configuration file cannot be read, a value is invalid or
        a required setting is missing.
    """
    if args is None:
        args = parse_args()
    if environ is None:
        environ = os.environ

    config_dict: dict[str, Any] = {}

    # Load from config file if specified or if default exists
    config_path = args.config
    if config_path is not None:
        config_path = config_path.expanduser()
    if config_path is None:
        default_config = Path("config.toml")
        if default_config.exists():
            config_path = default_config

    if config_path is not None:
        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise ConfigValidationError(msg, config_path)
        logger_basic.info('Loading configuration from "%s".', config_path)
        try:
            config_dict = load_config_from_file(config_path)
        except tomllib.TOMLDecodeError as e:
            msg = f'Failed to parse configuration file "{config_path}": {e}'
            raise ConfigValidationError(msg, config_path) from e

    # Environment overrides
    env_token = environ.get(API_TOKEN_ENV)
    if env_token:
        config_dict = merge_config(config_dict, {"cloudflare": {"api_token": env_token}})

    # Apply command-line overrides (empty strings count as "not given")
    cli_overrides: dict[str, Any] = {}

    for key in ("zone_id", "record_id_v4", "record_id_v6", "api_token"):
        value = getattr(args, key)
        if value:
            cli_overrides.setdefault("cloudflare", {})[key] = value

    if args.name:
        cli_overrides.setdefault("record", {})["name"] = args.name
    if args.ttl is not None:
        cli_overrides.setdefault("record", {})["ttl"] = args.ttl
    if args.proxied is not None:
        cli_overrides.setdefault("record", {})["proxied"] = args.proxied
    if args.comment is not None:
        cli_overrides.setdefault("record", {})["comment"] = args.comment

    # Logging overrides
    if args.log_level is not None:
        cli_overrides.setdefault("logging", {})["level"] = args.log_level
    if args.log_file_enabled is not None:
        cli_overrides.setdefault("logging", {})["file_enabled"] = args.log_file_enabled
    if args.log_file_path is not None:
        cli_overrides.setdefault("logging", {})["file_path"] = str(args.log_file_path)

    if cli_overrides:
        config_dict = merge_config(config_dict, cli_overrides)

    # Validate merged configuration
    validate_config_dict(config_dict, config_path)

    config = dict_to_config(config_dict)
    check_required(config, config_path)
    return config
