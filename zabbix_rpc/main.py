"""Command line entry point for the Zabbix JSON-RPC client."""

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Optional

import httpx
import structlog

from . import __version__
from .api_client import ZabbixAPIClient
from .config import ZabbixConfig
from .exceptions import ConfigurationError, RemoteAPIError, ValidationError
from .models.config import ContentLevel
from .models.responses import Instant


EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_REMOTE_ERROR = 2


def setup_logging(config: ZabbixConfig) -> None:
    """Set up structured logging based on configuration."""
    logging.basicConfig(level=getattr(logging, config.log_level))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zabbix-rpc",
        description="Call a Zabbix JSON-RPC API method and print the result as JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  ZABBIX_URL             Base URL of the Zabbix frontend (required)
  ZABBIX_USER            Login name used for user.login
  ZABBIX_PASSWORD        Password used for user.login
  ZABBIX_API_PATH        JSON-RPC endpoint path (default: /api_jsonrpc.php)
  ZABBIX_CONTENT_LEVEL   transport-raw, body, data or best (default: best)
  ZABBIX_CONVERT_RESULT  Reshape time series at the best level (default: true)
  ZABBIX_RAISE_ON_ERROR  Fail on JSON-RPC error envelopes (default: false)
  ZABBIX_TIMEOUT         Request timeout in seconds (default: none)
  ZABBIX_LOG_LEVEL       DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
  ZABBIX_LOG_FORMAT      json or text (default: text)

Examples:
  # Server version, no login
  zabbix-rpc --no-auth apiinfo.version

  # Hosts with their interfaces
  zabbix-rpc host.get --params '{"output": "extend", "selectInterfaces": "extend"}'

  # Raw JSON-RPC body
  python -m zabbix_rpc --content-level body item.get --params '{"hostids": ["10084"]}'
        """
    )

    parser.add_argument("method", nargs="?", help="API method, e.g. host.get")
    parser.add_argument(
        "--params",
        help="Method parameters as a JSON object or array (default: {})"
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        help="Path to configuration file (optional, environment variables take precedence)"
    )
    parser.add_argument(
        "--content-level",
        choices=[level.value for level in ContentLevel],
        help="Override content level from environment"
    )
    parser.add_argument(
        "--no-auth",
        action="store_true",
        help="Do not log in before the call"
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration and exit"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from environment"
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Override log format from environment"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def load_configuration(args: argparse.Namespace) -> ZabbixConfig:
    """Load configuration from environment and file, then apply CLI overrides."""
    config = ZabbixConfig.from_env_and_file(args.config_file)
    return config.with_overrides(
        content_level=args.content_level,
        log_level=args.log_level,
        log_format=args.log_format
    )


def parse_params(raw: Optional[str]) -> Any:
    if raw is None:
        return {}
    try:
        params = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"--params is not valid JSON: {e}", field_name="params", field_value=raw) from e
    if not isinstance(params, (dict, list)):
        raise ValidationError(
            "--params must be a JSON object or array",
            field_name="params",
            field_value=raw
        )
    return params


def to_jsonable(value: Any) -> Any:
    """Make a resolved result printable as JSON.

    ``Instant`` keys and values become ISO-8601 strings.
    """
    if isinstance(value, Instant):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {
            (k.isoformat() if isinstance(k, Instant) else k): to_jsonable(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def render_result(result: Any) -> str:
    if isinstance(result, httpx.Response):
        return result.text
    return json.dumps(to_jsonable(result), indent=2, ensure_ascii=False)


def print_config_summary(config: ZabbixConfig) -> None:
    print("=" * 60)
    print("ZABBIX RPC CLIENT - CONFIGURATION")
    print("=" * 60)
    for key, value in config.get_summary().items():
        print(f"  {key}: {value}")
    if not config.user or not config.password:
        print("\n  Warning: no credentials configured, only --no-auth calls will work")
    print("=" * 60)


def run(args: argparse.Namespace, transport: Optional[httpx.BaseTransport] = None) -> int:
    """Execute the command described by ``args`` and return the exit code."""
    try:
        config = load_configuration(args)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print("Run with --help for the list of environment variables.", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.validate_config:
        print_config_summary(config)
        return EXIT_OK

    if not args.method:
        print("error: METHOD is required unless --validate-config is given", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(config)
    logger = structlog.get_logger(__name__)

    try:
        params = parse_params(args.params)
    except ValidationError as e:
        print(f"Invalid parameters: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    client = ZabbixAPIClient.from_config(config, transport=transport)
    try:
        result = client.call(args.method, params, auth=not args.no_auth)
    except RemoteAPIError as e:
        logger.error("Zabbix API returned an error", method=args.method, code=e.code)
        print(f"Remote error: {e}", file=sys.stderr)
        return EXIT_REMOTE_ERROR
    except httpx.HTTPError as e:
        logger.error("Request to Zabbix failed", method=args.method, error=str(e))
        print(f"Transport error: {e}", file=sys.stderr)
        return EXIT_REMOTE_ERROR
    except ValueError as e:
        logger.error("Zabbix response is not JSON", method=args.method, error=str(e))
        print(f"Invalid response: {e}", file=sys.stderr)
        return EXIT_REMOTE_ERROR

    print(render_result(result))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the command line."""
    args = build_parser().parse_args(argv)
    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
