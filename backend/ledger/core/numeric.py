"""Lenient amount/date parsing and the canonical 2-place rounding.

Raw records arrive from storage as text, numbers, or ``None``. Everything that
feeds a balance goes through these helpers so one malformed record degrades to
zero (or "now") instead of breaking a whole ledger.
"""

import logging
import math
from datetime import UTC, date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
TWO_PLACES = Decimal("0.01")

# Numeric timestamps above this are taken as milliseconds, below as seconds.
_MILLISECONDS_THRESHOLD = 100_000_000_000

# Amounts with more integer digits than this cannot be quantized safely.
_MAX_AMOUNT_DIGITS = 20


def safe_parse_decimal(value: Any) -> Decimal:
    """Parse a numeric or textual amount, returning ``Decimal(0)`` on failure.

    Accepts ``Decimal``, ``int``, ``float`` and strings such as ``"1250.50"``.
    ``None``, booleans, blank strings, unparsable text and non-finite values
    (NaN, infinity) all yield zero. Never raises.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            logger.debug("Non-finite amount %r coerced to 0", value)
            return ZERO
        result = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            logger.debug("Unparsable amount %r coerced to 0", value)
            return ZERO

    if not result.is_finite():
        logger.debug("Non-finite amount %r coerced to 0", value)
        return ZERO
    if result.adjusted() >= _MAX_AMOUNT_DIGITS:
        logger.debug("Out-of-range amount %r coerced to 0", value)
        return ZERO
    return result


def round2(value: Decimal | int) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def safe_parse_date(value: Any, now: datetime | None = None) -> datetime:
    """Parse a timestamp leniently into an aware UTC datetime.

    Args:
        value: A ``datetime``, ``date``, ISO-8601 string, or Unix timestamp
            (seconds, or milliseconds for large values).
        now: Fallback for absent or unparsable input. Defaults to the current
            time; callers sorting many records should pass one shared instant.

    Returns:
        The parsed datetime, or ``now`` when ``value`` cannot be parsed.
    """
    fallback = now if now is not None else datetime.now(UTC)

    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, datetime):
        try:
            return _as_utc(value)
        except OverflowError:
            logger.debug("Out-of-range datetime %r replaced with now", value)
            return fallback
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)

    if isinstance(value, int | float):
        try:
            seconds = float(value)
            if not math.isfinite(seconds):
                raise ValueError("non-finite timestamp")
            if abs(seconds) > _MILLISECONDS_THRESHOLD:
                seconds /= 1000
            return datetime.fromtimestamp(seconds, tz=UTC)
        except (OverflowError, OSError, ValueError):
            logger.debug("Unparsable timestamp %r replaced with now", value)
            return fallback

    text = str(value).strip()
    if not text:
        return fallback
    try:
        return _as_utc(datetime.fromisoformat(text))
    except (OverflowError, ValueError):
        logger.debug("Unparsable date %r replaced with now", value)
        return fallback
