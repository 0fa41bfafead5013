from .repeat import during, forever, until, whilst
from .retry import retry, RetryPolicy
from .series import apply_each, seq, series, times, waterfall

__all__ = (
    # Policies
    "RetryPolicy",
    # Repeat
    "during",
    "forever",
    "until",
    "whilst",
    # Retry
    "retry",
    # Series
    "apply_each",
    "seq",
    "series",
    "times",
    "waterfall",
)
