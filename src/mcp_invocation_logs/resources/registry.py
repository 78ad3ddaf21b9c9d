"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_invocation_logs.core.models import Invocation
from mcp_invocation_logs.core.pipeline import parse_invocations
from mcp_invocation_logs.core.samples import sample_events
from mcp_invocation_logs.core.sources import load_events
from mcp_invocation_logs.tools.models import InvocationOut, InvocationsResult

ALLOWED_FILE_SUFFIXES = {".json", ".jsonl", ".ndjson"}
BASE_DIR_ENV = "INVOCATION_LOGS_BASE_DIR"


def _base_dir() -> Path:
    """Return the resolved base directory for file resources."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _allowed_suffix(path: Path) -> str:
    """Return the effective suffix for allowlist checks."""
    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = path.with_suffix("").suffix.lower()
    return suffix


def resolve_export_path(path: str) -> Path:
    """Resolve and validate a log export path."""
    resolved = _safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    if _allowed_suffix(resolved) not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed}.")
    return resolved


def _dump(invocations: list[Invocation]) -> dict[str, Any]:
    return InvocationsResult(
        count=len(invocations),
        total=len(invocations),
        invocations=[InvocationOut.from_invocation(i) for i in invocations],
    ).model_dump(mode="json")


async def _file_invocations(path: str, *, runtime: str | None = None) -> dict[str, Any]:
    p = resolve_export_path(path)
    events = await load_events(p, runtime=runtime or "")
    return _dump(parse_invocations(events, runtime=runtime))


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://invocation-logs/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        return (
            "Resources:\n"
            "- app://invocation-logs/help\n"
            "- app://invocation-logs/schemas/invocation\n"
            "- app://invocation-logs/examples/sample-invocations\n"
            f"- invocations://{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed}, .gz)\n"
            "- invocations://{runtime}/{path} (same, with a runtime such as nodejs18.x)\n"
            f"\nBase directory: {_base_dir()}\n"
        )

    @mcp.resource("app://invocation-logs/schemas/invocation")
    def invocation_schema() -> dict[str, Any]:
        """Return the JSON schema for invocation records."""
        return InvocationOut.model_json_schema()

    @mcp.resource("app://invocation-logs/examples/sample-invocations")
    def sample_invocations() -> dict[str, Any]:
        """Return the invocations reconstructed from a canned event batch."""
        return _dump(parse_invocations(sample_events()))

    @mcp.resource("invocations://{path}")
    async def file_invocations(path: str) -> dict[str, Any]:
        """Parse a log export from within INVOCATION_LOGS_BASE_DIR."""
        return await _file_invocations(path)

    @mcp.resource("invocations://{runtime}/{path}")
    async def file_invocations_for_runtime(runtime: str, path: str) -> dict[str, Any]:
        """Parse a log export with the matchers of the given runtime."""
        return await _file_invocations(path, runtime=runtime)
