"""Logging setup for the ``prefixproxy`` command.

Library code only ever calls ``logging.getLogger("prefixproxy.<area>")``;
handlers are attached here, once, by the CLI.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "info") -> logging.Logger:
    """Attach a single stderr handler to the ``prefixproxy`` logger.

    Safe to call more than once: an existing handler is replaced, not
    duplicated.
    """
    root = logging.getLogger("prefixproxy")
    for handler in list(root.handlers):
        if getattr(handler, "_prefixproxy", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._prefixproxy = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level.upper())
    return root
