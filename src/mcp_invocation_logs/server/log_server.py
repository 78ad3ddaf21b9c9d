"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: reconstruct invocations from an export file or from CloudWatch Logs
- Resources: schemas, samples and sandboxed export files
- Prompts: reusable investigation templates

Run locally (stdio):
    python -m mcp_invocation_logs.server.log_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_invocation_logs.prompts.registry import register_prompts
from mcp_invocation_logs.resources.registry import register_resources
from mcp_invocation_logs.tools.invocations import (
    parse_invocation_file_impl,
    recent_invocations_impl,
)

LOGGER = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("INVOCATION_LOGS_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("invocation-logs", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def parse_invocation_file(
    log_path: str,
    runtime: str | None = None,
    levels: Sequence[str] | None = None,
    failed_only: bool = False,
    limit: int | None = None,
    include_logs: bool = True,
) -> dict[str, Any]:
    """Reconstruct invocations from a saved log-event export.

    Parameters
    ----------
    log_path:
        Output of `aws logs filter-log-events` (JSON), a JSON array of events,
        or JSON lines. `.gz` is accepted.
    runtime:
        Function runtime (e.g., nodejs18.x, python3.12). Enables runtime-specific
        line formats.
    levels:
        Keep invocations whose aggregate level is one of these (INFO, WARN, ERROR).
    failed_only:
        Keep only invocations with a timeout, crash or traceback.
    limit:
        Maximum number of invocations returned, most recent first.
    include_logs:
        Whether to include each invocation's log lines.

    Returns
    -------
    dict:
        {"count": int, "total": int, "invocations": list[dict]}
    """
    return await parse_invocation_file_impl(
        log_path=log_path,
        runtime=runtime,
        levels=levels,
        failed_only=failed_only,
        limit=limit,
        include_logs=include_logs,
    )


@mcp.tool()
async def recent_invocations(
    function_name: str,
    runtime: str | None = None,
    since: str | None = None,
    until: str | None = None,
    date: str | None = None,
    hour: str | None = None,
    lookback_seconds: int | None = None,
    levels: Sequence[str] | None = None,
    failed_only: bool = False,
    limit: int | None = None,
    include_logs: bool = True,
    region: str | None = None,
) -> dict[str, Any]:
    """Fetch a function's recent log events and reconstruct its invocations.

    Parameters
    ----------
    function_name:
        Function name; logs are read from /aws/lambda/<function_name>.
    runtime:
        Function runtime. Looked up from the function configuration when omitted.
    since/until:
        ISO-8601 datetimes. If timezone is omitted, UTC is assumed.
    date/hour:
        Convenience selectors for a whole UTC day or hour (e.g., 2025-12-31,
        2025-12-31T20). They take precedence over since/until.
    lookback_seconds:
        Window length ending now, used when no other window is given (default 60).
    levels, failed_only, limit, include_logs:
        Same as parse_invocation_file.
    region:
        AWS region; defaults to the environment's configuration.
    """
    return await recent_invocations_impl(
        function_name=function_name,
        runtime=runtime,
        since=since,
        until=until,
        date=date,
        hour=hour,
        lookback_seconds=lookback_seconds,
        levels=levels,
        failed_only=failed_only,
        limit=limit,
        include_logs=include_logs,
        region=region,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
