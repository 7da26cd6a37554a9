from dataclasses import dataclass

from eth_utils import to_checksum_address
from web3 import Web3

from futarchy_twap.config.chains import ChainConfig


@dataclass(frozen=True)
class ChainContext:
    """Connection plus chain configuration shared by every model of one request."""

    w3: Web3
    chain: ChainConfig

    @property
    def mode(self) -> str:
        return self.chain.mode

    def contract(self, address: str, abi):
        return self.w3.eth.contract(address=to_checksum_address(address), abi=abi)
