"""Immutable registry of the chains a proposal TWAP can be read from.

Nothing here touches the chain at runtime.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from futarchy_twap.config import settings
from futarchy_twap.exceptions import UnsupportedChainError

__all__ = [
    "ALGEBRA",
    "UNISWAP_V3",
    "ChainConfig",
    "CHAIN_CONFIG",
    "get_chain_config",
]

ALGEBRA = "algebra"
UNISWAP_V3 = "uniswapv3"


@dataclass(frozen=True, slots=True)
class ChainConfig:
    chain_id: int
    name: str
    rpc_env: str                    # environment variable overriding the RPC endpoint
    default_rpc_url: str
    mode: str                       # ALGEBRA or UNISWAP_V3
    factory: str                    # pool factory contract
    fee_tiers: Tuple[int, ...] = ()  # uniswapv3 only, probed in this order

    def __post_init__(self):
        if self.mode not in (ALGEBRA, UNISWAP_V3):
            raise ValueError(f"Unknown exchange mode '{self.mode}' for chain {self.chain_id}")
        if self.mode == UNISWAP_V3 and not self.fee_tiers:
            raise ValueError(f"Chain {self.chain_id} uses {UNISWAP_V3} but has no fee tiers")

    @property
    def rpc_url(self) -> str:
        return settings.env_rpc_url(self.rpc_env, self.default_rpc_url)


CHAIN_CONFIG: Mapping[int, ChainConfig] = {
    100: ChainConfig(
        chain_id=100,
        name="Gnosis",
        rpc_env="GNOSIS_RPC",
        default_rpc_url="https://rpc.gnosischain.com",
        mode=ALGEBRA,
        factory="0xA0864cCA6E114013AB0e27cbd5B6f4c8947da766",   # Swapr / Algebra factory
    ),
    1: ChainConfig(
        chain_id=1,
        name="Ethereum",
        rpc_env="ETHEREUM_RPC",
        default_rpc_url="https://eth-mainnet.public.blastapi.io",
        mode=UNISWAP_V3,
        factory="0x1F98431c8aD98523631AE4a59f267346ea31F984",   # Uniswap V3 factory
        fee_tiers=(500, 3000, 10000, 100),
    ),
}


def get_chain_config(chain_id) -> ChainConfig:
    """Look up a chain, rejecting anything outside the registry."""
    key: Optional[int]
    if isinstance(chain_id, bool):
        key = None
    elif isinstance(chain_id, int):
        key = chain_id
    elif isinstance(chain_id, str) and chain_id.strip().isdigit():
        key = int(chain_id.strip())
    else:
        key = None

    try:
        return CHAIN_CONFIG[key]
    except KeyError as exc:
        raise UnsupportedChainError(chain_id, sorted(CHAIN_CONFIG)) from exc
