"""HTTP health check probe for container runtimes.

Execute a lightweight HTTP GET against the service's liveness endpoint and
turn the answer into an exit code, for runtimes that only support exec
health checks (e.g. a Dockerfile ``HEALTHCHECK``).

Exit Codes:
    0: Healthy - Endpoint returned HTTP 200.
    1: Unhealthy - Connection failed or non-200 response.

Environment Variables:
    HEALTHCHECK_HOST: Target host address (default: 127.0.0.1).
    HEALTHCHECK_PORT: Target port number (default: 8080).
    HEALTHCHECK_PATH: Probe path (default: /liveness).
"""

import os
import sys
import urllib.error
import urllib.request
from typing import Mapping, Optional

TIMEOUT = 2  # seconds


def probe_url(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    host = env.get("HEALTHCHECK_HOST", "127.0.0.1")
    port = env.get("HEALTHCHECK_PORT", "8080")
    path = env.get("HEALTHCHECK_PATH", "/liveness")
    return f"http://{host}:{port}{path}"


def main(env: Optional[Mapping[str, str]] = None) -> int:
    try:
        with urllib.request.urlopen(probe_url(env), timeout=TIMEOUT) as response:
            return 0 if response.status == 200 else 1
    except (urllib.error.URLError, OSError):
        # HTTPError (4xx, 5xx) is a URLError subclass.
        return 1


if __name__ == "__main__":
    sys.exit(main())
