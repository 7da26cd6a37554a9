from dataclasses import dataclass

from futarchy_twap.config.abis import ERC20_ABI
from futarchy_twap.utils.best_effort import try_read
from futarchy_twap.utils.concurrency import fan_out

DEFAULT_SYMBOL = "UNKNOWN"
DEFAULT_DECIMALS = 18


@dataclass(frozen=True, slots=True)
class TokenInfo:
    address: str
    symbol: str
    decimals: int

    def as_dict(self) -> dict:
        return {"address": self.address, "symbol": self.symbol, "decimals": self.decimals}


class TokenModel:
    """Display metadata for ERC20 tokens. Every read here is best-effort."""

    def __init__(self, ctx):
        self.ctx = ctx

    def get_token_info(self, token_address: str) -> TokenInfo:
        token = self.ctx.contract(token_address, ERC20_ABI)
        symbol, decimals = fan_out(
            lambda: try_read(lambda: token.functions.symbol().call(), f"symbol() of {token_address}"),
            lambda: try_read(lambda: token.functions.decimals().call(), f"decimals() of {token_address}"),
        )
        return TokenInfo(
            address=token_address,
            symbol=symbol.or_default(DEFAULT_SYMBOL),
            decimals=decimals.or_default(DEFAULT_DECIMALS),
        )
