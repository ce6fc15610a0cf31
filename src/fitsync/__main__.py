"""Entry point for the fitsync MCP server."""

import argparse
import asyncio
import logging

from fitsync import __version__
from fitsync.config.settings import Settings
from fitsync.server import create_server, initialize_services, shutdown_services


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="fitsync",
        description="fitsync - Export, import and maintenance of fitness tracker data via MCP",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args()


async def main() -> None:
    """Main entry point for the MCP server."""
    settings = Settings()
    # stdout carries the stdio transport; logging goes to stderr
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    await initialize_services(settings)
    mcp = create_server()

    try:
        await mcp.run_stdio_async()
    finally:
        await shutdown_services()


def cli() -> None:
    """CLI entry point."""
    # Parse args first (handles --help and --version)
    parse_args()
    asyncio.run(main())


if __name__ == "__main__":
    cli()
