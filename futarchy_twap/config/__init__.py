"""
Configuration package for the futarchy TWAP reader.

Chain registry, contract ABIs and environment settings.
"""

from futarchy_twap.config.chains import (
    ALGEBRA,
    UNISWAP_V3,
    ChainConfig,
    CHAIN_CONFIG,
    get_chain_config
)

from futarchy_twap.config.abis import (
    PROPOSAL_ABI,
    ALGEBRA_FACTORY_ABI,
    ALGEBRA_POOL_ABI,
    UNISWAP_V3_FACTORY_ABI,
    UNISWAP_V3_POOL_ABI,
    ERC20_ABI
)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
SECONDS_PER_DAY = 86400
DEFAULT_TWAP_DAYS = 5

__all__ = [
    # Chains
    'ALGEBRA',
    'UNISWAP_V3',
    'ChainConfig',
    'CHAIN_CONFIG',
    'get_chain_config',

    # ABIs
    'PROPOSAL_ABI',
    'ALGEBRA_FACTORY_ABI',
    'ALGEBRA_POOL_ABI',
    'UNISWAP_V3_FACTORY_ABI',
    'UNISWAP_V3_POOL_ABI',
    'ERC20_ABI',

    # Constants
    'ZERO_ADDRESS',
    'SECONDS_PER_DAY',
    'DEFAULT_TWAP_DAYS',
]
