"""``python -m prefixproxy`` — same as the ``prefixproxy`` command."""

from prefixproxy.cli import main

main()
