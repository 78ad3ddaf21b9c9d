"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def investigate_function(
        function_name: str,
        lookback_seconds: int = 300,
        runtime: str | None = None,
    ) -> str:
        """Build a prompt that walks through a function's recent failures."""
        call_lines = [
            f"- function_name: {function_name}",
            f"- lookback_seconds: {lookback_seconds}",
            '- levels: ["WARN", "ERROR"]',
        ]
        if runtime is not None:
            call_lines.append(f"- runtime: {runtime}")
        call_block = "\n".join(call_lines)
        return (
            "You are an on-call engineer inspecting a serverless function.\n\n"
            "Call recent_invocations with:\n"
            f"{call_block}\n\n"
            "Group the failures by cause and quote the log lines that support each cause. "
            "Report invocations with no START or no REPORT separately: they are cut off by "
            "the time window, not necessarily failures. Finish with the affected request ids, "
            "durations and memory usage of failing invocations, and one next debugging step."
        )
