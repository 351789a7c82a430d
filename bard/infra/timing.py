"""
Human readable durations.
"""

_UNITS = (
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def format_elapsed(seconds: float) -> str:
    """
    Format a duration using only its largest unit.

    Examples:
        >>> format_elapsed(0.25)
        '250 milliseconds'
        >>> format_elapsed(75)
        '1 minute'
        >>> format_elapsed(7300)
        '2 hours'
    """
    if seconds < 1:
        millis = int(seconds * 1000)
        return f"{millis} millisecond" + ("" if millis == 1 else "s")

    for name, size in _UNITS:
        if seconds >= size:
            count = int(seconds // size)
            return f"{count} {name}" + ("" if count == 1 else "s")

    return "0 seconds"
