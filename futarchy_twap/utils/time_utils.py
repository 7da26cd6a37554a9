from datetime import datetime, timezone


def format_duration(seconds) -> str:
    """Render a second count as ``"1d 2h 3m 4s"``, dropping zero parts."""
    seconds = int(seconds)
    d = seconds // 86400
    h = (seconds % 86400) // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60

    parts = []
    if d > 0:
        parts.append(f"{d}d")
    if h > 0:
        parts.append(f"{h}h")
    if m > 0:
        parts.append(f"{m}m")
    if s > 0:
        parts.append(f"{s}s")
    return " ".join(parts) or "0s"


def to_iso(timestamp) -> str:
    """Unix seconds -> ``2025-02-07T00:00:00.000Z``."""
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
