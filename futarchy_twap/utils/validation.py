import math
import re

from futarchy_twap.exceptions import InvalidAddressError, InvalidWindowError

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")

# Last second of year 9999, the largest instant datetime can render
MAX_TIMESTAMP = 253402300799


def validate_proposal_address(address) -> str:
    if not isinstance(address, str) or not ADDRESS_PATTERN.match(address):
        raise InvalidAddressError(address)
    return address


def validate_days(days) -> float:
    if isinstance(days, bool) or not isinstance(days, (int, float)):
        raise InvalidWindowError(f"days must be a number, got {days!r}")
    if not math.isfinite(days) or days <= 0:
        raise InvalidWindowError(f"days must be a positive number, got {days!r}")
    return days


def validate_end_timestamp(end_timestamp) -> int:
    if isinstance(end_timestamp, bool) or not isinstance(end_timestamp, int):
        raise InvalidWindowError(f"endTimestamp must be an integer unix timestamp, got {end_timestamp!r}")
    if end_timestamp <= 0:
        raise InvalidWindowError(f"endTimestamp must be positive, got {end_timestamp!r}")
    if end_timestamp > MAX_TIMESTAMP:
        raise InvalidWindowError(
            f"endTimestamp {end_timestamp} is out of range; expected unix seconds, not milliseconds"
        )
    return end_timestamp


def validate_window_bounds(start: int, end: int):
    """Both ends of the TWAP window must be renderable unix seconds."""
    if start < 0 or end > MAX_TIMESTAMP:
        raise InvalidWindowError(f"TWAP window [{start}, {end}) is out of range; shorten days or move endTimestamp")
