# futarchy_twap/models/__init__.py
from .chain_context import ChainContext
from .proposal_model import ProposalModel, ProposalTokens
from .token_model import TokenModel, TokenInfo
from .pool_model import PoolModel, PoolRef, ConditionalPools, Inversion, PoolScanEntry
from .twap_model import TwapModel, TwapWindow, TwapStatus, PoolTwap, PriceComparison

__all__ = [
    "ChainContext",
    "ProposalModel",
    "ProposalTokens",
    "TokenModel",
    "TokenInfo",
    "PoolModel",
    "PoolRef",
    "ConditionalPools",
    "Inversion",
    "PoolScanEntry",
    "TwapModel",
    "TwapWindow",
    "TwapStatus",
    "PoolTwap",
    "PriceComparison",
]
