"""prefixproxy CLI — load a config file and serve.

Entry point registered as ``prefixproxy`` in ``pyproject.toml``::

    [project.scripts]
    prefixproxy = "prefixproxy.cli:main"
"""

import argparse

from prefixproxy.config import DEFAULT_CONFIG_PATH


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prefixproxy",
        description="Path-prefix HTTP reverse proxy.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the JSON config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--host", default=None, help="Bind host address (overrides 'listen')")
    parser.add_argument("--port", type=int, default=None, help="Bind port number (overrides 'listen')")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Log level (overrides 'log_level')",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``prefixproxy`` command."""
    args = build_parser().parse_args(argv)

    from prefixproxy.cli._run import run_proxy

    run_proxy(args)
