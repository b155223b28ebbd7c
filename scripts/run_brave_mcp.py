#!/usr/bin/env python3
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

print(
    f"[mcp] backend={os.environ.get('MCP_BRAVE_BACKEND', 'auto')} | "
    f"binary={os.environ.get('MCP_BRAVE_BINARY', 'auto')} | "
    f"profile={os.environ.get('BRAVE_PROFILE', 'Default')} | "
    f"port={os.environ.get('MCP_BRAVE_PORT', '9222')}",
    file=sys.stderr,
)

from mcp_servers.brave.main import main  # noqa: E402

if __name__ == "__main__":
    main()
