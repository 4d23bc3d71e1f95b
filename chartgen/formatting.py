from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
import math
import re

MS_PER_DAY = 86_400_000

_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)

MONTHS_SHORT: tuple[str, ...] = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTHS_FULL: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
# Indexed by datetime.weekday(), Monday first.
DAYS_SHORT: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
DAYS_FULL: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_DATE_TOKEN = re.compile(r"%[aAbBdeHImMSyYjLZ]")
_FIXED_FORMAT = re.compile(r"^\.?\d+f$")
_XML_ESCAPES = (("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"), ('"', "&quot;"), ("'", "&apos;"))


def is_representable_ms(ms: int) -> bool:
    return MIN_EPOCH_MS <= ms <= MAX_EPOCH_MS


def utc_datetime(ms: int) -> dt.datetime:
    return _EPOCH + dt.timedelta(milliseconds=int(ms))


def epoch_ms(value: dt.datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    delta = value - _EPOCH
    return (delta.days * MS_PER_DAY) + (delta.seconds * 1000) + (delta.microseconds // 1000)


MIN_EPOCH_MS = epoch_ms(dt.datetime.min.replace(tzinfo=dt.timezone.utc))
MAX_EPOCH_MS = epoch_ms(dt.datetime.max.replace(tzinfo=dt.timezone.utc))


def format_date_utc(ms: int, fmt: str = "%Y-%m-%d") -> str:
    """Render an epoch-millisecond instant with a small strftime-like grammar.

    Only UTC calendar fields are used. ``%L`` is milliseconds, ``%e`` the
    space padded day of month and ``%Z`` always the literal ``UTC``. Tokens
    outside the grammar are left untouched.
    """

    moment = utc_datetime(ms)
    millis = int(ms) % 1000

    def substitute(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "%Y":
            return _pad(moment.year, 4)
        if token == "%y":
            return _pad(moment.year % 100, 2)
        if token == "%m":
            return _pad(moment.month, 2)
        if token == "%B":
            return MONTHS_FULL[moment.month - 1]
        if token == "%b":
            return MONTHS_SHORT[moment.month - 1]
        if token == "%d":
            return _pad(moment.day, 2)
        if token == "%e":
            return f" {moment.day}" if moment.day < 10 else str(moment.day)
        if token == "%H":
            return _pad(moment.hour, 2)
        if token == "%M":
            return _pad(moment.minute, 2)
        if token == "%S":
            return _pad(moment.second, 2)
        if token == "%L":
            return _pad(millis, 3)
        if token == "%a":
            return DAYS_SHORT[moment.weekday()]
        if token == "%A":
            return DAYS_FULL[moment.weekday()]
        if token == "%I":
            return _pad(moment.hour % 12 or 12, 2)
        if token == "%j":
            return _pad(moment.timetuple().tm_yday, 3)
        if token == "%Z":
            return "UTC"
        return token

    return _DATE_TOKEN.sub(substitute, fmt)


def format_number(value: float, fmt: str | None = None) -> str:
    """Locale-independent (en-US style) number label for value axis ticks."""

    if isinstance(fmt, str) and _FIXED_FORMAT.match(fmt):
        digits = int(re.sub(r"\D", "", fmt))
        if not math.isfinite(value):
            return _non_finite_text(value)
        if abs(value) >= 1e21:
            return format_svg_number(value)
        exact = Decimal(float(value))
        quant = Decimal("1").scaleb(-digits)
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
            return format(exact.quantize(quant, rounding=ROUND_HALF_UP), "f")

    if not math.isfinite(value):
        return _non_finite_text(value)
    magnitude = abs(value)
    if magnitude > 1000:
        digits = 0
    elif magnitude > 100:
        digits = 1
    elif magnitude > 10:
        digits = 2
    else:
        digits = 3

    d = Decimal(repr(float(value)))
    quant = Decimal("1").scaleb(-digits)
    try:
        q = d.quantize(quant, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        q = d
    out = format(q, ",f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_svg_number(value: float) -> str:
    """Shortest round-trip text for a coordinate, written the way browsers print numbers."""

    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    text = repr(number)
    if "e" not in text:
        return text
    if 1e-6 <= abs(number) < 1e21:
        return format(Decimal(text), "f")
    mantissa, exponent = text.split("e")
    power = int(exponent)
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def escape_xml(text: object) -> str:
    if text is None:
        return ""
    out = text if isinstance(text, str) else str(text)
    for raw, entity in _XML_ESCAPES:
        out = out.replace(raw, entity)
    return out


def is_same_utc_day(a: int, b: int) -> bool:
    return utc_datetime(a).date() == utc_datetime(b).date()


def _pad(value: int, size: int) -> str:
    return str(int(value)).zfill(size)


def _non_finite_text(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "∞" if value > 0 else "-∞"
