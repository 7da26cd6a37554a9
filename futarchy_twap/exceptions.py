"""Error taxonomy for the TWAP library.

Validation errors are raised before any RPC connection is opened. Oracle
errors are raised by the TWAP engine and folded into the result by the
controller so the caller keeps the partial data gathered so far.
"""


class FutarchyTwapError(Exception):
    """Base class for every error raised by futarchy_twap."""


class InputValidationError(FutarchyTwapError, ValueError):
    """Caller supplied an argument the library cannot work with."""


class InvalidAddressError(InputValidationError):
    def __init__(self, address):
        super().__init__(f"Invalid proposal address: {address!r}")
        self.address = address


class UnsupportedChainError(InputValidationError):
    def __init__(self, chain_id, supported=()):
        supported_txt = ", ".join(str(c) for c in supported)
        super().__init__(f"Unsupported chain {chain_id}. Use one of: {supported_txt}")
        self.chain_id = chain_id


class InvalidWindowError(InputValidationError):
    """TWAP window arguments (days / endTimestamp) are out of range."""


class OracleResponseError(FutarchyTwapError):
    """A contract call returned data that does not match the expected shape."""


class InvalidPriceError(FutarchyTwapError):
    """Derived price is not a finite positive number."""

    def __init__(self, message="Invalid price from oracle", average_tick=None):
        super().__init__(message)
        self.average_tick = average_tick
