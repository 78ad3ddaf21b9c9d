from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from mcp_invocation_logs.server.log_server import configure_logging
from mcp_invocation_logs.tools.invocations import (
    ALL_LEVELS,
    LEVEL_ALIASES,
    parse_invocation_file_impl,
    recent_invocations_impl,
)


def _parse_levels(s: str) -> list[str]:
    out = [part.strip().upper() for part in s.split(",") if part.strip()]
    if not out:
        raise argparse.ArgumentTypeError("At least one level must be provided")
    for name in out:
        if LEVEL_ALIASES.get(name, name) not in ALL_LEVELS:
            allowed = ", ".join([*ALL_LEVELS, *LEVEL_ALIASES])
            raise argparse.ArgumentTypeError(f"Invalid level. Allowed: {allowed}")
    return out


def _format_invocation(inv: dict[str, Any], *, show_logs: bool) -> str:
    started = inv["first_line_time"] or "-"
    status = "complete" if inv["complete"] else "partial"
    parts = [f"{started} [{inv['level'].upper()}] {inv['request_id'] or '-'} ({status})"]
    if inv["duration_ms"] is not None:
        parts.append(f"{inv['duration_ms']} ms")
    if inv["memory_used_mb"] is not None:
        parts.append(f"{inv['memory_used_mb']}/{inv['memory_size_mb'] or '?'} MB")
    if inv["failed"]:
        parts.append("FAILED")
    head = "  ".join(parts)
    if not show_logs:
        return head
    body = "\n".join(f"    {line}" for line in inv["logs"])
    return f"{head}\n{body}" if body else head


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Reconstruct function invocations from log events.")
    sub = p.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--runtime", default=None, help="Function runtime, e.g. nodejs18.x or python3.12")
    common.add_argument("--levels", type=_parse_levels, default=None, help="Comma-separated (e.g., WARN,ERROR)")
    common.add_argument("--failed", dest="failed_only", action="store_true", help="Only failed invocations")
    common.add_argument("--max", dest="limit", type=int, default=None, help="Max invocations to print")
    common.add_argument("--logs", dest="show_logs", action="store_true", help="Print each invocation's lines")

    f = sub.add_parser("file", parents=[common], help="Parse a saved filter-log-events export")
    f.add_argument("log_path")

    fn = sub.add_parser("function", parents=[common], help="Fetch recent logs from CloudWatch")
    fn.add_argument("function_name")
    fn.add_argument("--lookback", dest="lookback_seconds", type=int, default=None, help="Seconds to look back (default 60)")
    fn.add_argument("--since", default=None, help="ISO8601 start time (assumes UTC if tz missing)")
    fn.add_argument("--until", default=None, help="ISO8601 end time (assumes UTC if tz missing)")
    fn.add_argument("--date", default=None, help="YYYY-MM-DD (UTC day)")
    fn.add_argument("--hour", default=None, help="YYYY-MM-DDTHH (UTC hour)")
    fn.add_argument("--region", default=None)
    return p


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    common = {
        "runtime": args.runtime,
        "levels": args.levels,
        "failed_only": args.failed_only,
        "limit": args.limit,
        "include_logs": args.show_logs,
    }
    if args.command == "file":
        return await parse_invocation_file_impl(log_path=args.log_path, **common)
    return await recent_invocations_impl(
        function_name=args.function_name,
        since=args.since,
        until=args.until,
        date=args.date,
        hour=args.hour,
        lookback_seconds=args.lookback_seconds,
        region=args.region,
        **common,
    )


def main(argv: Sequence[str] | None = None) -> None:
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        out = asyncio.run(_run(args))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)
    except (BotoCoreError, ClientError) as e:
        print(f"AWS error: {e}", file=sys.stderr)
        raise SystemExit(1)

    for inv in out["invocations"]:
        print(_format_invocation(inv, show_logs=args.show_logs))

    print(f"\nShowing {out['count']} of {out['total']} invocations.")


if __name__ == "__main__":
    main()
