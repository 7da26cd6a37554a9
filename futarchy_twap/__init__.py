"""
futarchy_twap - on-chain TWAP for futarchy proposals.

Discovers the YES/NO conditional pools of a proposal straight from the
proposal contract and the exchange factory, then reads each pool's
cumulative-tick oracle. No subgraph involved.

    from futarchy_twap import calculate_twap, discover_pools
    result = calculate_twap("0x...", 100, days=5)
"""

import threading
from typing import Optional

from futarchy_twap.config import CHAIN_CONFIG, ChainConfig, get_chain_config
from futarchy_twap.controllers import TwapController
from futarchy_twap.exceptions import (
    FutarchyTwapError,
    InputValidationError,
    InvalidAddressError,
    InvalidPriceError,
    InvalidWindowError,
    OracleResponseError,
    UnsupportedChainError,
)
from futarchy_twap.services import ConnectionPool
from futarchy_twap.utils.time_utils import format_duration

__version__ = "0.1.0"

_default_connections: Optional[ConnectionPool] = None
_default_connections_lock = threading.Lock()


def default_connections() -> ConnectionPool:
    """Process-wide pool used by the shortcuts below when none is passed."""
    global _default_connections
    with _default_connections_lock:
        if _default_connections is None:
            _default_connections = ConnectionPool()
        return _default_connections


def calculate_twap(
    proposal_address: str,
    chain_id,
    end_timestamp: Optional[int] = None,
    days=None,
    rpc_url: Optional[str] = None,
    connections: Optional[ConnectionPool] = None,
) -> dict:
    """Shortcut for ``TwapController(connections).calculate_twap(...)``.

    Without ``connections`` the process-wide ``default_connections()`` pool is
    used, so RPC connections are reused across calls.
    """
    connections = connections if connections is not None else default_connections()
    return TwapController(connections).calculate_twap(
        proposal_address, chain_id, end_timestamp=end_timestamp, days=days, rpc_url=rpc_url
    )


def discover_pools(
    proposal_address: str,
    chain_id,
    rpc_url: Optional[str] = None,
    connections: Optional[ConnectionPool] = None,
) -> dict:
    """Shortcut for ``TwapController(connections).discover_pools(...)``."""
    connections = connections if connections is not None else default_connections()
    return TwapController(connections).discover_pools(proposal_address, chain_id, rpc_url=rpc_url)


__all__ = [
    "calculate_twap",
    "discover_pools",
    "default_connections",
    "format_duration",
    "TwapController",
    "ConnectionPool",
    "CHAIN_CONFIG",
    "ChainConfig",
    "get_chain_config",
    "FutarchyTwapError",
    "InputValidationError",
    "InvalidAddressError",
    "InvalidPriceError",
    "InvalidWindowError",
    "OracleResponseError",
    "UnsupportedChainError",
]
