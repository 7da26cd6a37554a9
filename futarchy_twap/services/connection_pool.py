import logging
import threading
from typing import Callable, Dict, Optional, Tuple

from web3 import Web3

from futarchy_twap.config import settings
from futarchy_twap.config.chains import get_chain_config

logger = logging.getLogger(__name__)

Web3Factory = Callable[[str, float], Web3]


def _http_web3(rpc_url: str, timeout: float) -> Web3:
    return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


class ConnectionPool:
    """
    Owns one read-only ``Web3`` connection per (chain id, RPC override).

    Connections are built lazily on first use and kept for the lifetime of
    the pool. The pool is created by the application (CLI, service, test)
    and handed to the controller; nothing here is module-global.
    """

    def __init__(self, timeout: Optional[float] = None, web3_factory: Optional[Web3Factory] = None):
        """
        Args:
            timeout: Per-request RPC timeout in seconds. Defaults to ``RPC_TIMEOUT``.
            web3_factory: Callable ``(rpc_url, timeout) -> Web3``; tests inject fakes here.
        """
        self.timeout = timeout if timeout is not None else settings.rpc_timeout()
        self._factory = web3_factory or _http_web3
        self._connections: Dict[Tuple[int, Optional[str]], Web3] = {}
        self._lock = threading.Lock()

    def get(self, chain_id: int, rpc_url: Optional[str] = None) -> Web3:
        """Return the cached connection for ``chain_id``/``rpc_url``, creating it if needed."""
        config = get_chain_config(chain_id)
        key = (config.chain_id, rpc_url or None)

        with self._lock:
            w3 = self._connections.get(key)
            if w3 is None:
                url = rpc_url or config.rpc_url
                logger.debug("🔌 Opening %s connection to %s (timeout=%ss)", config.name, url, self.timeout)
                w3 = self._factory(url, self.timeout)
                self._connections[key] = w3
        return w3

    def __len__(self):
        return len(self._connections)

    def __contains__(self, key):
        return key in self._connections
