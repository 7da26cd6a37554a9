"""Fan-out helper for independent read-only RPC calls."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List

# Upper bound on threads per fan-out; a single request never issues more
# than seven reads at once.
MAX_WORKERS = 8


def fan_out(*calls: Callable[[], Any]) -> List[Any]:
    """
    Run ``calls`` in parallel and return their results in call order.

    Every call runs to completion. If any of them raised, the exception of
    the earliest failing call (in argument order) is re-raised.
    """
    if not calls:
        return []
    if len(calls) == 1:
        return [calls[0]()]

    with ThreadPoolExecutor(max_workers=min(len(calls), MAX_WORKERS)) as executor:
        futures = [executor.submit(call) for call in calls]
    return [future.result() for future in futures]
