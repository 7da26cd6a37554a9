# futarchy_twap/models/pool_model.py
import logging
from dataclasses import dataclass
from typing import List, Optional

from eth_utils import to_checksum_address
from web3.exceptions import Web3Exception

from futarchy_twap.config import ZERO_ADDRESS
from futarchy_twap.config.abis import (
    ALGEBRA_FACTORY_ABI,
    ALGEBRA_POOL_ABI,
    UNISWAP_V3_FACTORY_ABI,
    UNISWAP_V3_POOL_ABI,
)
from futarchy_twap.config.chains import ALGEBRA, UNISWAP_V3
from futarchy_twap.utils.concurrency import fan_out
from futarchy_twap.utils.decoding import decode_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Inversion:
    should_invert: bool
    token0: str


@dataclass(frozen=True, slots=True)
class PoolRef:
    address: Optional[str]            # None when no pool exists for the pair
    inverted: Optional[bool] = None   # None until orientation has been checked

    @property
    def exists(self) -> bool:
        return self.address is not None

    def as_dict(self) -> dict:
        return {"address": self.address, "inverted": self.inverted}


@dataclass(frozen=True, slots=True)
class ConditionalPools:
    yes: PoolRef
    no: PoolRef

    @property
    def complete(self) -> bool:
        return self.yes.exists and self.no.exists


@dataclass(frozen=True, slots=True)
class PoolScanEntry:
    name: str
    address: Optional[str]
    inverted: Optional[bool] = None

    @property
    def exists(self) -> bool:
        return self.address is not None

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "exists": self.exists,
            "inverted": self.inverted,
        }


# Six-pair scan, in display order: (name, token A, token B, company token
# used for the orientation check or None for prediction pools)
POOL_SCAN_PAIRS = (
    ("YES_COMPANY/YES_CURRENCY (Conditional)", "yes_company", "yes_currency", "yes_company"),
    ("NO_COMPANY/NO_CURRENCY (Conditional)", "no_company", "no_currency", "no_company"),
    ("YES_COMPANY/BASE_CURRENCY (Prediction)", "yes_company", "currency_token", None),
    ("NO_COMPANY/BASE_CURRENCY (Prediction)", "no_company", "currency_token", None),
    ("YES_CURRENCY/BASE_CURRENCY (Prediction)", "yes_currency", "currency_token", None),
    ("NO_CURRENCY/BASE_CURRENCY (Prediction)", "no_currency", "currency_token", None),
)


def is_zero_address(address: Optional[str]) -> bool:
    return address is None or int(address, 16) == 0


class PoolModel:
    """Locates conditional/prediction pools through the chain's factory."""

    def __init__(self, ctx):
        self.ctx = ctx
        self.chain = ctx.chain

    # --- Factory lookups ---

    def _lookup(self, read, description: str) -> str:
        """Run one factory read; contract-level failures count as 'no pool'."""
        try:
            raw = read()
        except (Web3Exception, ValueError) as e:
            logger.debug("   > %s failed, treating as no pool: %s", description, e)
            return ZERO_ADDRESS
        return decode_address(raw, description)

    def _find_algebra_pool(self, token_a: str, token_b: str) -> str:
        factory = self.ctx.contract(self.chain.factory, ALGEBRA_FACTORY_ABI)

        # poolByPair is order-sensitive
        pool = self._lookup(
            lambda: factory.functions.poolByPair(token_a, token_b).call(),
            f"poolByPair({token_a}, {token_b})",
        )
        if is_zero_address(pool):
            pool = self._lookup(
                lambda: factory.functions.poolByPair(token_b, token_a).call(),
                f"poolByPair({token_b}, {token_a})",
            )
        return pool

    def _find_uniswap_pool(self, token_a: str, token_b: str) -> str:
        factory = self.ctx.contract(self.chain.factory, UNISWAP_V3_FACTORY_ABI)

        def lookup(fee):
            return self._lookup(
                lambda: factory.functions.getPool(token_a, token_b, fee).call(),
                f"getPool({token_a}, {token_b}, {fee})",
            )

        results = fan_out(*[lambda fee=fee: lookup(fee) for fee in self.chain.fee_tiers])
        for fee, pool in zip(self.chain.fee_tiers, results):
            if not is_zero_address(pool):
                logger.debug("   > fee tier %s -> %s", fee, pool)
                return pool
        return ZERO_ADDRESS

    def find_pool(self, token_a: str, token_b: str) -> Optional[str]:
        """
        Find the pool for a token pair.

        Returns:
            The pool address, or None when the factory knows no such pool.
        """
        token_a = to_checksum_address(token_a)
        token_b = to_checksum_address(token_b)

        if self.chain.mode == ALGEBRA:
            pool = self._find_algebra_pool(token_a, token_b)
        elif self.chain.mode == UNISWAP_V3:
            pool = self._find_uniswap_pool(token_a, token_b)
        else:
            raise ValueError(f"Unsupported exchange mode '{self.chain.mode}'")

        return None if is_zero_address(pool) else pool

    def discover_conditional_pools(self, tokens) -> ConditionalPools:
        """YES pool = YES_COMPANY/YES_CURRENCY, NO pool = NO_COMPANY/NO_CURRENCY."""
        logger.info("🔍 Discovering conditional pools via factory...")
        yes_pool, no_pool = fan_out(
            lambda: self.find_pool(tokens.yes_company, tokens.yes_currency),
            lambda: self.find_pool(tokens.no_company, tokens.no_currency),
        )
        return ConditionalPools(yes=PoolRef(yes_pool), no=PoolRef(no_pool))

    # --- Orientation ---

    def detect_inversion(self, pool_address: str, company_token_address: str) -> Inversion:
        """
        Compare the pool's token0 with the company token.

        If the company token is token0, ``1.0001^tick`` already reads as
        currency per company token. Otherwise the price must be inverted.
        """
        abi = ALGEBRA_POOL_ABI if self.chain.mode == ALGEBRA else UNISWAP_V3_POOL_ABI
        pool = self.ctx.contract(pool_address, abi)
        token0 = decode_address(pool.functions.token0().call(), f"token0() of {pool_address}")

        should_invert = token0.lower() != company_token_address.lower()
        return Inversion(should_invert=should_invert, token0=token0)

    # --- Full scan ---

    def scan_all_pools(self, tokens) -> List[PoolScanEntry]:
        """
        Probe all six conditional/prediction pairs, one after the other, in
        ``POOL_SCAN_PAIRS`` order. Orientation is checked for the two
        conditional pools when they exist.
        """
        entries = []
        for name, attr_a, attr_b, company_attr in POOL_SCAN_PAIRS:
            address = self.find_pool(getattr(tokens, attr_a), getattr(tokens, attr_b))
            inverted = None
            if address and company_attr:
                inverted = self.detect_inversion(address, getattr(tokens, company_attr)).should_invert
            logger.info("   %s %s: %s", "✅" if address else "❌", name, address or "not found")
            entries.append(PoolScanEntry(name=name, address=address, inverted=inverted))
        return entries
