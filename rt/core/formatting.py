"""Text formats shared by the stopwatch display, the results table and exports."""


def format_elapsed(seconds):
    """Format elapsed seconds as HH:MM:SS.cc.

    The value is first rounded to the nearest millisecond, which sheds float
    noise such as 0.29 arriving as 0.28999999999999998, then truncated to the
    hundredth. Within that millisecond grid the display never shows a time
    that hasn't happened yet. Negative values clamp to zero.
    """
    millis = max(0, round(seconds * 1000))
    whole, ms = divmod(millis, 1000)
    h, rem = divmod(whole, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms // 10:02d}"


# Local time of an arrival, down to the millisecond.
def format_absolute_time(dt):
    return f"{dt:%H:%M:%S}.{dt.microsecond // 1000:03d}"


def format_clock_time(dt):
    return f"{dt:%H:%M:%S}"
