"""
Korean numeral parsing for datacenter price texts.

The datacenter renders prices in mixed formats:
    "12,000"            -> 12000
    "1억 2,000만"        -> 120000000
    "3.5조"              -> 3500000000000
    "삼천오백만 BP"        -> 35000000

parse_price() turns any of these into a float magnitude for ordering.
Text that carries no number at all (the "Error" sentinel, empty text) maps to
UNPARSABLE_PRICE, a fixed value below every real price.
"""
import re
from typing import Optional


# Sorts after every real price in a descending ranking
UNPARSABLE_PRICE = float("-inf")

BIG_UNITS = {
    "경": 10 ** 16,
    "조": 10 ** 12,
    "억": 10 ** 8,
    "만": 10 ** 4,
}

SMALL_UNITS = {
    "천": 1000,
    "백": 100,
    "십": 10,
}

DIGIT_WORDS = {
    "영": 0,
    "공": 0,
    "일": 1,
    "이": 2,
    "삼": 3,
    "사": 4,
    "오": 5,
    "육": 6,
    "칠": 7,
    "팔": 8,
    "구": 9,
}

_KEEP_CHARS = "".join(BIG_UNITS) + "".join(SMALL_UNITS) + "".join(DIGIT_WORDS)
_NOISE_PATTERN = re.compile(rf"[^0-9.{_KEEP_CHARS}]")


def _clean(text: str) -> str:
    """Drop separators, whitespace and any word that is not part of a number."""
    return _NOISE_PATTERN.sub("", text)


def _to_number(buffer: str) -> Optional[float]:
    if not buffer:
        return None
    if buffer.count(".") > 1 or buffer == ".":
        raise ValueError(f"Malformed number: {buffer!r}")
    return float(buffer)


def parse_korean_number(text: str) -> float:
    """
    Parse a Korean-formatted number.

    Raises:
        ValueError: if the text contains no digits, digit words or units
    """
    cleaned = _clean(text)
    if not any(ch.isdigit() or ch in _KEEP_CHARS for ch in cleaned):
        raise ValueError(f"No number in {text!r}")

    total = 0.0     # sum of completed big-unit groups
    section = 0.0   # value below the current big unit
    buffer = ""     # arabic digits being read
    pending: Optional[float] = None  # last digit word

    def take_current() -> Optional[float]:
        nonlocal buffer, pending
        if buffer:
            value = _to_number(buffer)
            buffer = ""
            return value
        value, pending = pending, None
        return value

    for ch in cleaned:
        if ch.isdigit() or ch == ".":
            buffer += ch
        elif ch in DIGIT_WORDS:
            if buffer:
                section += _to_number(buffer)
                buffer = ""
            pending = float(DIGIT_WORDS[ch])
        elif ch in SMALL_UNITS:
            current = take_current()
            section += (1.0 if current is None else current) * SMALL_UNITS[ch]
        elif ch in BIG_UNITS:
            current = take_current()
            group = section + (current or 0.0)
            if group == 0.0 and current is None:
                group = 1.0
            total += group * BIG_UNITS[ch]
            section = 0.0

    current = take_current()
    return total + section + (current or 0.0)


def parse_price(text: Optional[str]) -> float:
    """
    Convert price text to a comparable magnitude.

    Deterministic: the same text always gives the same value. Anything that does
    not parse (including the failure sentinel) gives UNPARSABLE_PRICE.
    """
    if not text:
        return UNPARSABLE_PRICE
    try:
        return parse_korean_number(text)
    except ValueError:
        return UNPARSABLE_PRICE
