import math
from datetime import datetime


def format_time_left(expires_at: datetime, now: datetime) -> str:
    """
    Remaining time as MM:SS, or "Expired" once the deadline passed.

    Display only; the server decides when a booking expires. Part seconds are
    floored, so the last second before the deadline reads "00:00".
    """
    remaining = (expires_at - now).total_seconds()
    if remaining <= 0:
        return 'Expired'
    minutes, seconds = divmod(math.floor(remaining), 60)
    return f'{minutes:02d}:{seconds:02d}'
