"""Command-line entry point: serve the image tools over MCP stdio or HTTP."""
from __future__ import annotations

import argparse
import asyncio
import logging

from image_reader.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="image-reader", description="Serve the read_image tool")
    parser.add_argument("--transport", choices=("stdio", "http"), default=settings.transport)
    parser.add_argument("--host", default=settings.http_host, help="HTTP bind address")
    parser.add_argument("--port", type=int, default=settings.http_port, help="HTTP port")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        default=settings.log_level,
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # Logs go to stderr; stdout carries the MCP stdio protocol
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.transport == "http":
        import uvicorn

        uvicorn.run("image_reader.main:app", host=args.host, port=args.port, log_level=args.log_level.lower())
    else:
        from image_reader.services.mcp_server import run_stdio

        asyncio.run(run_stdio())


if __name__ == "__main__":
    main()
