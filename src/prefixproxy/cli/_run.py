"""``prefixproxy`` — config loading and server start.

Every configuration failure (unreadable file, bad JSON, bad backend) is
logged and exits with status 1 before a socket is bound.
"""

import argparse
import logging
from dataclasses import replace

from prefixproxy._internal.logs import configure_logging
from prefixproxy.app import ProxyApp
from prefixproxy.config import load_config
from prefixproxy.errors import ConfigurationError

logger = logging.getLogger("prefixproxy.cli")


def build_app(args: argparse.Namespace) -> ProxyApp:
    """Load the config named by *args* and compile it into an app.

    CLI flags override the config file.

    Raises:
        ConfigurationError: If the config cannot be loaded or a backend
            target is invalid.
    """
    config = load_config(args.config)
    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if overrides:
        config = replace(config, **overrides)
    return ProxyApp(config)


def run_proxy(args: argparse.Namespace) -> None:
    """Build the app and serve it until interrupted."""
    configure_logging(args.log_level or "info")
    try:
        app = build_app(args)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    configure_logging(app.config.log_level)
    app.run()
