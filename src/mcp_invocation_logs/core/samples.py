"""Canned event batches for demos and tests."""

from __future__ import annotations

import time
from collections.abc import Callable

from .models import RawLogEvent

SAMPLE_LOG_STREAM = "2022/02/01/[$LATEST]3b66f77bc3f24fee8ccd70dd7315144e"

_REPORT_TAIL = (
    "\tDuration: 509.89 ms\tBilled Duration: 510 ms\tMemory Size: 1024 MB"
    "\tMax Memory Used: 80 MB\t\nXRAY TraceId: 1-61f96332-54eba86c47245db57214005f"
    "\tSegmentId: 246eafc77f3a0d33\tSampled: true\t\n"
)


def _request_id(suffix: str) -> str:
    return f"18269d91-6b89-4021-8b58-{suffix}"


def _no_end(suffix: str) -> list[str]:
    return [f"START RequestId: {_request_id(suffix)} Version: $LATEST\n"]


def _no_start(suffix: str) -> list[str]:
    return [f"REPORT RequestId: {_request_id(suffix)}{_REPORT_TAIL}"]


def _long_json_body(suffix: str) -> list[str]:
    rid = _request_id(suffix)
    return [
        f"START RequestId: {rid} Version: $LATEST\n",
        "2022-02-01T16:44:32.994Z\t46d02f3a-f831-45ff-bd2f-441552944af8\tINFO\tws.onmessage "
        '{"action":"client.lambdaResponse",'
        '"debugRequestId":"46d02f3a-f831-45ff-bd2f-441552944af8-1643733872505",'
        '"stubConnectionId":"M3uYidvroAMCLMA="}\n',
        f"END RequestId: {rid}\n",
        f"REPORT RequestId: {rid}{_REPORT_TAIL}",
    ]


def _complete(suffix: str) -> list[str]:
    rid = _request_id(suffix)
    return [
        f"START RequestId: {rid} Version: $LATEST\n",
        f"2022-02-01T16:43:31.048Z\t{rid}\tINFO\tsendMessage() - send request\n",
        f"END RequestId: {rid}\n",
        f"REPORT RequestId: {rid}{_REPORT_TAIL}",
    ]


_SCENARIOS: tuple[Callable[[str], list[str]], ...] = (
    _no_end,
    _no_start,
    _long_json_body,
    _complete,
)


def sample_events(*, now_ms: int | None = None, runtime: str = "nodejs18.x") -> list[RawLogEvent]:
    """One stream holding, oldest first: no END, no START, long JSON body, complete.

    Events are one second apart and end at ``now_ms``.
    """
    messages: list[str] = []
    for i, scenario in enumerate(_SCENARIOS):
        messages.extend(scenario(str(i).rjust(12, "0")))

    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    first = now_ms - (len(messages) - 1) * 1000
    return [
        RawLogEvent(
            event_id=f"36656488894301925567363798262803331332585{first + i * 1000:015d}",
            log_stream=SAMPLE_LOG_STREAM,
            timestamp=first + i * 1000,
            message=message,
            runtime=runtime,
        )
        for i, message in enumerate(messages)
    ]
