"""Environment-driven settings.

Values are read from the process environment each time they are needed, so
a ``.env`` file loaded by the CLI (python-dotenv) is always honoured.
"""

import os

DEFAULT_RPC_TIMEOUT = 30


def env_rpc_url(variable: str, default: str) -> str:
    """RPC endpoint from ``variable`` (e.g. ``GNOSIS_RPC``), else ``default``."""
    return os.environ.get(variable) or default


def rpc_timeout() -> float:
    """Per-request JSON-RPC timeout in seconds (``RPC_TIMEOUT``)."""
    raw = os.environ.get("RPC_TIMEOUT")
    if not raw:
        return DEFAULT_RPC_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"RPC_TIMEOUT must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ValueError(f"RPC_TIMEOUT must be positive, got {raw!r}")
    return value


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()
