"""Module entrypoint.

Allows:
    python -m mcp_invocation_logs
"""

from __future__ import annotations

from mcp_invocation_logs.server.log_server import main

if __name__ == "__main__":
    main()
