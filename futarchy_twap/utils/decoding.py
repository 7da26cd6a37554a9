"""
Typed decoding of contract return values.

web3 hands back multi-output calls as plain lists/tuples. Each decoder here
checks the shape it expects and raises ``OracleResponseError`` on anything
else, so callers only ever see validated Python values.
"""

from typing import Any, Sequence, Tuple

from eth_utils import is_address, to_checksum_address

from futarchy_twap.config.chains import ALGEBRA, UNISWAP_V3
from futarchy_twap.exceptions import OracleResponseError

# Number of output values per oracle/state accessor
_TIMEPOINTS_ARITY = {ALGEBRA: 4, UNISWAP_V3: 2}
_STATE_ARITY = {ALGEBRA: 7, UNISWAP_V3: 7}


def _as_sequence(raw: Any, arity: int, what: str) -> Sequence[Any]:
    if not isinstance(raw, (list, tuple)):
        raise OracleResponseError(f"{what}: expected a tuple of {arity} values, got {type(raw).__name__}")
    if len(raw) != arity:
        raise OracleResponseError(f"{what}: expected {arity} values, got {len(raw)}")
    return raw


def _as_int(raw: Any, what: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise OracleResponseError(f"{what}: expected an integer, got {raw!r}")
    return raw


def decode_address(raw: Any, what: str = "address") -> str:
    """Validate an address return value and checksum it."""
    if not isinstance(raw, str) or not is_address(raw):
        raise OracleResponseError(f"{what}: expected an address, got {raw!r}")
    return to_checksum_address(raw)


def decode_wrapped_outcome(raw: Any, index: int) -> str:
    """``wrappedOutcome(i)`` returns ``(wrapped1155, data)``; keep the token address."""
    wrapped1155, _data = _as_sequence(raw, 2, f"wrappedOutcome({index})")
    return decode_address(wrapped1155, f"wrappedOutcome({index}).wrapped1155")


def decode_tick_cumulatives(raw: Any, mode: str) -> Tuple[int, int]:
    """
    Extract ``(oldest, latest)`` cumulative ticks from an oracle response.

    Algebra ``getTimepoints`` and Uniswap V3 ``observe`` both return the
    tick cumulatives as their first output, ordered like the ``secondsAgos``
    argument (``[window, 0]``).
    """
    method = "getTimepoints" if mode == ALGEBRA else "observe"
    try:
        arity = _TIMEPOINTS_ARITY[mode]
    except KeyError:
        raise OracleResponseError(f"Unknown oracle mode '{mode}'")

    outputs = _as_sequence(raw, arity, method)
    cumulatives = _as_sequence(outputs[0], 2, f"{method}.tickCumulatives")
    oldest = _as_int(cumulatives[0], f"{method}.tickCumulatives[0]")
    latest = _as_int(cumulatives[1], f"{method}.tickCumulatives[1]")
    return oldest, latest


def decode_current_tick(raw: Any, mode: str) -> int:
    """Current tick from ``globalState()`` (algebra) or ``slot0()`` (uniswapv3)."""
    method = "globalState" if mode == ALGEBRA else "slot0"
    try:
        arity = _STATE_ARITY[mode]
    except KeyError:
        raise OracleResponseError(f"Unknown oracle mode '{mode}'")

    state = _as_sequence(raw, arity, method)
    return _as_int(state[1], f"{method}.tick")
