import re
from datetime import timedelta
from enum import StrEnum
from typing import Any, Self

from pydantic_core import CoreSchema, core_schema

DEFAULT_INTERRUPTED_INTERVAL = "24h"
MAX_INTERRUPTED_INTERVAL = 60 * 60 * 24 * 30  # 30d


class IntervalUnit(StrEnum):
    ns = "ns"
    us = "us"
    us_micro_sign = "µs"
    us_greek_mu = "μs"
    ms = "ms"
    s = "s"
    m = "m"
    h = "h"
    d = "d"

    @classmethod
    def get_regex_pattern(cls) -> str:
        return "|".join(re.escape(unit.value) for unit in cls)


class InterruptedInterval:
    """
    Lookback window written as a duration string ("24h", "1h30m", "90s").

    The original text is kept for display; `seconds` is the truncated whole
    number of seconds. Parsing does not enforce any range, see `range_error`.
    """

    __REGEX_PATTERN = rf"(\d+(?:\.\d+)?)({IntervalUnit.get_regex_pattern()})"

    text: str
    delta: timedelta

    def __init__(self, text: str | None = None) -> None:
        text = (text or "").strip() or DEFAULT_INTERRUPTED_INTERVAL
        self.text = text
        self.delta = self.__class__.__parse(text)

    @classmethod
    def __parse(cls, text: str) -> timedelta:
        if text.startswith("-"):
            negative = True
            body = text[1:].strip()
        else:
            negative = False
            body = text.lstrip("+").strip()

        if body == "0":
            return timedelta()

        matches = re.findall(cls.__REGEX_PATTERN, body)
        if not matches or "".join(f"{value}{unit}" for value, unit in matches) != body:
            raise ValueError(f"invalid interrupted_interval: {text!r}")

        delta = timedelta()
        for value, unit in matches:
            value = float(value)
            if unit == IntervalUnit.ns:
                delta += timedelta(microseconds=value / 1000)
            elif unit in (IntervalUnit.us, IntervalUnit.us_micro_sign, IntervalUnit.us_greek_mu):
                delta += timedelta(microseconds=value)
            elif unit == IntervalUnit.ms:
                delta += timedelta(milliseconds=value)
            elif unit == IntervalUnit.s:
                delta += timedelta(seconds=value)
            elif unit == IntervalUnit.m:
                delta += timedelta(minutes=value)
            elif unit == IntervalUnit.h:
                delta += timedelta(hours=value)
            elif unit == IntervalUnit.d:
                delta += timedelta(days=value)

        return -delta if negative else delta

    @property
    def seconds(self) -> int:
        return int(self.delta.total_seconds())

    def range_error(self, maximum: int = MAX_INTERRUPTED_INTERVAL) -> str | None:
        """Return a validation message when the interval is outside [0, maximum]."""
        if self.seconds < 0 or self.seconds > maximum:
            return f"interrupted_interval out of range: {self.seconds}"
        return None

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.text})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InterruptedInterval):
            return self.delta == other.delta
        if isinstance(other, str):
            try:
                return self.delta == InterruptedInterval(other).delta
            except ValueError:
                return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.delta)

    def __int__(self) -> int:
        return self.seconds

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls._validate,
            core_schema.union_schema(
                [
                    core_schema.is_instance_schema(cls),
                    core_schema.str_schema(),
                    core_schema.int_schema(),
                    core_schema.none_schema(),
                ]
            ),
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def _validate(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        if value is None or isinstance(value, str):
            return cls(value)
        if isinstance(value, int):
            return cls(str(value))
        raise ValueError(f"Cannot convert {type(value)} to InterruptedInterval")
