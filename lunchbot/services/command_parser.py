import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

CLOSED_DAYS_PREFIX = "-"
RATE_PREFIX = "."
DEFAULT_RATE = 1.0


class Command(str, Enum):
    POKE = "戳"
    LIST_ALL = "有啥"
    LIST_TODAY = "今天有啥"
    ADD = "可吃"
    UPDATE = "改吃"
    RECOMMEND = "吃啥"
    REMOVE = "不吃"
    REMOVE_ALL = "都不吃"
    DUMP = "很匯"
    PICK = "要吃啥"
    NOOP = "怎麼吃"


@dataclass
class ParsedLine:
    keyword: str
    args: list[str] = field(default_factory=list)

    @property
    def command(self) -> Optional[Command]:
        try:
            return Command(self.keyword)
        except ValueError:
            return None

    @property
    def name(self) -> str:
        return self.args[0] if self.args else ""

    @property
    def options(self) -> list[str]:
        return self.args[1:]


def split_lines(text: str) -> list[str]:
    return (text or "").splitlines()


def parse_line(line: str) -> Optional[ParsedLine]:
    """Tokenize one command line. Blank lines give None."""
    tokens = [token for token in line.split(" ") if token]
    if not tokens:
        return None
    return ParsedLine(keyword=tokens[0], args=tokens[1:])


def parse_closed_days(token: str) -> list[int]:
    """'-135' -> [1, 3, 5]. Digits wrap modulo 7, anything else is dropped."""
    days = {int(char) % 7 for char in token[len(CLOSED_DAYS_PREFIX) :] if char in "0123456789"}
    return sorted(days)


def parse_rate(token: str, default: float = DEFAULT_RATE) -> float:
    try:
        rate = float(token)
    except ValueError:
        return default
    if not math.isfinite(rate):
        return default
    return rate


def parse_options(tokens: list[str]) -> tuple[list[int], float]:
    """
    Decode modifier tokens into (closed_days, rate).

    Never raises: tokens that do not decode leave the defaults in place,
    and when a modifier repeats the last one wins.
    """
    closed_days: list[int] = []
    rate = DEFAULT_RATE
    for token in tokens:
        if token.startswith(CLOSED_DAYS_PREFIX):
            closed_days = parse_closed_days(token)
        elif token.startswith(RATE_PREFIX):
            rate = parse_rate(token, rate)
    return closed_days, rate
