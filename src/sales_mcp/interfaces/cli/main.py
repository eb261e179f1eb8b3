import argparse
import asyncio
import importlib
import json
import logging
from pathlib import Path
from typing import Optional

import colorlog

from sales_mcp.core.config import ServerConfig, load_config
from sales_mcp.core.errors import ConfigError

try:
    # Prefer package-defined version
    from sales_mcp import __version__ as _PACKAGE_VERSION
except ImportError:  # pragma: no cover - defensive fallback
    _PACKAGE_VERSION = "unknown"  # type: ignore[assignment]


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    # stderr only: stdout carries MCP frames in stdio mode
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _resolve_config(args: argparse.Namespace) -> Optional[ServerConfig]:
    """Load the config file and apply command line overrides.

    Returns None (after logging) when the configuration is invalid.
    """
    config_path = getattr(args, "config", None)
    try:
        config = load_config(Path(config_path) if config_path else None)
        return config.with_overrides(
            data_file=getattr(args, "data_file", None),
            strict_rows=True if getattr(args, "strict_rows", False) else None,
            load_timeout=getattr(args, "timeout", None),
        )
    except ConfigError as e:
        logging.error("Invalid configuration: %s", e)
        return None


def cmd_mcp_server(args: argparse.Namespace) -> int:
    """Start the MCP server.

    Default: stdio. If --port is set, run streamable HTTP transport at host:port.
    """
    try:
        mcp_server = importlib.import_module("sales_mcp.interfaces.mcp.server")
    except (ModuleNotFoundError, AttributeError, ImportError, RuntimeError) as e:
        logging.error(
            "Failed to import MCP server. Ensure 'mcp' is installed. Error: %s",
            e,
        )
        return 3
    config = _resolve_config(args)
    if config is None:
        return 2
    port = getattr(args, "port", None)
    host = getattr(args, "host", None) or "127.0.0.1"
    if port:
        logging.info(
            "Starting MCP HTTP server on %s:%s (data file: %s)", host, port, config.data_file
        )
    else:
        logging.info("Starting MCP stdio server with data file: %s", config.data_file)
    try:
        if port:
            mcp_server.run_http(config, host=host, port=int(port))
        else:
            mcp_server.run(config)
    except KeyboardInterrupt:
        pass
    except (OSError, RuntimeError) as e:
        logging.error("MCP server failed: %s", e)
        return 1
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Run a single tool call or resource read and print the envelope.

    Returns 0 on success, 1 when the envelope reports an error, 2 on bad input.
    """
    from sales_mcp.interfaces.mcp.dispatcher import Dispatcher
    from sales_mcp.interfaces.mcp.tools import build_registry

    config = _resolve_config(args)
    if config is None:
        return 2

    arguments = {}
    if getattr(args, "args", None):
        try:
            arguments = json.loads(args.args)
        except json.JSONDecodeError as e:
            logging.error("--args is not valid JSON: %s", e)
            return 2

    dispatcher = Dispatcher(build_registry(config), timeout=config.load_timeout)
    if args.kind == "tool":
        response = asyncio.run(dispatcher.call_tool(args.target, arguments))
    else:
        if arguments:
            logging.error("Resources take no arguments")
            return 2
        response = asyncio.run(dispatcher.read_resource(args.target))

    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
    return 1 if response.is_error else 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a sales CSV and print the report.

    Exit status is 1 when errors are found (or warnings, with --strict).
    """
    from sales_mcp.validation import print_report, run_validation

    config = _resolve_config(args)
    if config is None:
        return 2
    csv_path = config.data_file
    try:
        report = run_validation(csv_path)
    except FileNotFoundError as e:
        logging.error("%s", e)
        return 2
    except ValueError as e:
        logging.error("Validation could not run: %s", e)
        return 2

    print_report(report)

    report_json = getattr(args, "report_json", None)
    if report_json:
        out_path = Path(report_json)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(report.to_json(), encoding="utf-8")
        logging.info("Wrote JSON report to %s", out_path)

    report_md = getattr(args, "report", None)
    if report_md:
        out_path = Path(report_md)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(report.to_markdown(), encoding="utf-8")
        logging.info("Wrote Markdown report to %s", out_path)

    return 1 if report.has_errors(strict=bool(getattr(args, "strict", False))) else 0


def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        default=None,
        help="Path to server YAML config (defaults to ./config/server.yaml if present)",
    )
    p.add_argument(
        "--data-file",
        default=None,
        help="Sales CSV file (overrides the config; default ./data/sales.csv)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sales-mcp",
        description=f"Sales MCP Server (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    p_mcp = sub.add_parser("mcp-server", help="Run the MCP server (stdio or HTTP)")
    _add_config_args(p_mcp)
    p_mcp.add_argument(
        "--strict-rows",
        action="store_true",
        help="Fail loads on the first malformed row instead of skipping it",
    )
    p_mcp.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds a single tool call or resource read may take",
    )
    p_mcp.add_argument(
        "--port",
        default=None,
        help="If set, run streamable HTTP transport on the given port",
    )
    p_mcp.add_argument(
        "--host",
        default=None,
        help="Host to bind for HTTP transport (default 127.0.0.1)",
    )
    p_mcp.set_defaults(func=cmd_mcp_server)

    p_query = sub.add_parser("query", help="Call one tool or read one resource and print the result")
    p_query.add_argument("kind", choices=["tool", "resource"], help="What to invoke")
    p_query.add_argument("target", help="Tool name or resource URI")
    p_query.add_argument("--args", default=None, help="Tool arguments as a JSON object")
    _add_config_args(p_query)
    p_query.add_argument(
        "--strict-rows",
        action="store_true",
        help="Fail loads on the first malformed row instead of skipping it",
    )
    p_query.add_argument("--timeout", type=float, default=None, help="Invocation timeout in seconds")
    p_query.set_defaults(func=cmd_query)

    p_validate = sub.add_parser("validate", help="Check a sales CSV for data quality issues")
    _add_config_args(p_validate)
    p_validate.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors for the exit status",
    )
    p_validate.add_argument("--report", default=None, help="Write a Markdown report to this path")
    p_validate.add_argument("--report-json", default=None, help="Write a JSON report to this path")
    p_validate.set_defaults(func=cmd_validate)

    return p


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
