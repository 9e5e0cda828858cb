"""Entry-point for the MCP GitHub server."""
import argparse
import logging
import sys

import uvicorn

from .config import settings
from .errors import AuthError
from .github_client import get_github_api
from .logger import setup_logging

logger = logging.getLogger(__name__)


def _serve_stdio():
    from .server import mcp
    logger.info("Serving MCP over stdio")
    mcp.run(transport="stdio")


def _serve_sse():
    from .server import mcp
    logger.info("Serving MCP over SSE at http://%s:%s/sse", settings.mcp_server_host, settings.mcp_server_port)
    mcp.run(transport="sse")


def _serve_rest():
    """REST bridge; it also mounts MCP over SSE at /mcp/sse."""
    from .api import app

    logger.info("Serving REST API at http://%s:%s/api", settings.mcp_server_host, settings.mcp_server_port)
    uvicorn.run(app, host=settings.mcp_server_host, port=settings.mcp_server_port,
                log_level=settings.log_level.lower())


RUNNERS = {
    "mcp-stdio": _serve_stdio,
    "mcp-sse": _serve_sse,
    "rest": _serve_rest,
}


def main(argv=None):
    parser = argparse.ArgumentParser(prog="mcp-github", description="MCP server for GitHub issues, PRs and commits")
    parser.add_argument("--mode", choices=sorted(RUNNERS), default="mcp-stdio",
                        help="transport to serve (default: mcp-stdio)")
    args = parser.parse_args(argv)

    setup_logging(level=settings.log_level, log_file=settings.log_file)

    # the credential is resolved once, before any transport starts
    api = get_github_api()
    try:
        api.initialize()
    except AuthError as exc:
        logger.error(f"Cannot start: {exc}")
        sys.exit(1)
    logger.info(f"Authenticated with GitHub via {api.auth_method}")

    RUNNERS[args.mode]()


if __name__ == "__main__":
    main()
