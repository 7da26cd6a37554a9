"""In-memory stand-in for the slice of web3 the library uses:
``w3.eth.contract(address=..., abi=...).functions.<name>(*args).call()``."""

import pytest
from web3.exceptions import BadFunctionCallOutput

from futarchy_twap.config import ZERO_ADDRESS
from futarchy_twap.controllers import TwapController
from futarchy_twap.services import ConnectionPool

NOW = 1_750_000_000
DAY = 86400

GNOSIS_FACTORY = "0xa0864cca6e114013ab0e27cbd5b6f4c8947da766"
UNISWAP_FACTORY = "0x1f98431c8ad98523631ae4a59f267346ea31f984"

PROPOSAL = "0x45e1064348fd8a407d6d1f59fc64b05f633b28fc"
YES_COMPANY = "0x1000000000000000000000000000000000000001"
NO_COMPANY = "0x1000000000000000000000000000000000000002"
YES_CURRENCY = "0x1000000000000000000000000000000000000003"
NO_CURRENCY = "0x1000000000000000000000000000000000000004"
COMPANY = "0x2000000000000000000000000000000000000001"
CURRENCY = "0x2000000000000000000000000000000000000002"
YES_POOL = "0x3000000000000000000000000000000000000001"
NO_POOL = "0x3000000000000000000000000000000000000002"


class FakeCall:
    def __init__(self, chain, address, name, args):
        self.chain = chain
        self.address = address
        self.name = name
        self.args = args

    def call(self):
        self.chain.calls.append((self.address, self.name, self.args))
        try:
            handler = self.chain.handlers[(self.address, self.name)]
        except KeyError:
            raise BadFunctionCallOutput(f"{self.name}() reverted or no code at {self.address}")
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(*self.args)
        return handler


class FakeFunctions:
    def __init__(self, chain, address):
        self._chain = chain
        self._address = address

    def __getattr__(self, name):
        def bind(*args):
            return FakeCall(self._chain, self._address, name, args)
        return bind


class FakeContract:
    def __init__(self, chain, address, abi):
        self.address = address
        self.abi = abi
        self.functions = FakeFunctions(chain, address.lower())


class FakeEth:
    def __init__(self, chain):
        self._chain = chain

    def contract(self, address=None, abi=None):
        return FakeContract(self._chain, address, abi)


class FakeWeb3:
    def __init__(self, chain, rpc_url=None):
        self.eth = FakeEth(chain)
        self.rpc_url = rpc_url


class FakeChain:
    """Handler table keyed by (lowercase address, function name)."""

    def __init__(self):
        self.handlers = {}
        self.calls = []

    def on(self, address, name, handler):
        self.handlers[(address.lower(), name)] = handler
        return self

    def calls_to(self, name):
        return [c for c in self.calls if c[1] == name]

    # --- Scenario builders ---

    def add_proposal(self, address=PROPOSAL, market_name="Will GIP-120 pass?"):
        outcomes = [YES_COMPANY, NO_COMPANY, YES_CURRENCY, NO_CURRENCY]
        self.on(address, "wrappedOutcome", lambda index: [outcomes[index], b"\x00"])
        self.on(address, "collateralToken1", COMPANY)
        self.on(address, "collateralToken2", CURRENCY)
        if market_name is not None:
            self.on(address, "marketName", market_name)
        self.on(COMPANY, "symbol", "GNO")
        self.on(COMPANY, "decimals", 18)
        self.on(CURRENCY, "symbol", "sDAI")
        self.on(CURRENCY, "decimals", 18)
        return self

    def add_algebra_pools(self, pools):
        """``pools``: {(tokenA, tokenB): pool}; lookup only succeeds in that order."""
        table = {(a.lower(), b.lower()): p for (a, b), p in pools.items()}
        self.on(GNOSIS_FACTORY, "poolByPair", lambda a, b: table.get((a.lower(), b.lower()), ZERO_ADDRESS))
        return self

    def add_uniswap_pools(self, pools):
        """``pools``: {(tokenA, tokenB, fee): pool}; order-insensitive like the real factory."""
        table = {(frozenset((a.lower(), b.lower())), fee): p for (a, b, fee), p in pools.items()}
        self.on(
            UNISWAP_FACTORY,
            "getPool",
            lambda a, b, fee: table.get((frozenset((a.lower(), b.lower())), fee), ZERO_ADDRESS),
        )
        return self

    def add_oracle(self, pool, token0, tick, mode="algebra", base=1000, current_tick=None):
        """Pool whose cumulative tick grows by ``tick`` per second."""
        current_tick = tick if current_tick is None else current_tick
        self.on(pool, "token0", token0)

        def cumulatives(seconds_agos):
            window = seconds_agos[0]
            return [base, base + tick * window]

        if mode == "algebra":
            self.on(pool, "getTimepoints", lambda seconds_agos: ([*cumulatives(seconds_agos)], [0, 0], [0, 0], [0, 0]))
            self.on(pool, "globalState", (2 ** 96, current_tick, 500, 0, 0, 0, True))
        else:
            self.on(pool, "observe", lambda seconds_agos: ([*cumulatives(seconds_agos)], [0, 0]))
            self.on(pool, "slot0", (2 ** 96, current_tick, 0, 1, 1, 0, True))
        return self


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def connections(chain):
    return ConnectionPool(timeout=5, web3_factory=lambda url, timeout: FakeWeb3(chain, url))


@pytest.fixture
def controller(connections):
    return TwapController(connections, clock=lambda: NOW)


@pytest.fixture
def offline_pool():
    """Connection pool that fails the test if anything tries to connect."""
    def refuse(url, timeout):
        raise AssertionError(f"unexpected connection to {url}")
    return ConnectionPool(timeout=5, web3_factory=refuse)


@pytest.fixture
def gnosis_chain(chain):
    """Proposal on chain 100 with both conditional pools: YES not inverted, NO inverted."""
    chain.add_proposal()
    chain.add_algebra_pools({
        (YES_COMPANY, YES_CURRENCY): YES_POOL,
        (NO_CURRENCY, NO_COMPANY): NO_POOL,
    })
    chain.add_oracle(YES_POOL, token0=YES_COMPANY, tick=1000)
    chain.add_oracle(NO_POOL, token0=NO_CURRENCY, tick=-2000)
    return chain
