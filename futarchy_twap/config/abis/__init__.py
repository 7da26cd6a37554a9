from futarchy_twap.config.abis.proposal import PROPOSAL_ABI
from futarchy_twap.config.abis.algebra import ALGEBRA_FACTORY_ABI, ALGEBRA_POOL_ABI
from futarchy_twap.config.abis.uniswap_v3 import UNISWAP_V3_FACTORY_ABI, UNISWAP_V3_POOL_ABI
from futarchy_twap.config.abis.erc20 import ERC20_ABI

__all__ = [
    "PROPOSAL_ABI",
    "ALGEBRA_FACTORY_ABI",
    "ALGEBRA_POOL_ABI",
    "UNISWAP_V3_FACTORY_ABI",
    "UNISWAP_V3_POOL_ABI",
    "ERC20_ABI",
]
