"""anet-mcp CLI entrypoint."""

from __future__ import annotations

import click

from anet_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="anet-mcp")
def main() -> None:
    """anet-mcp: serve tools over stdio or NATS."""


# Register subcommands
from anet_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
