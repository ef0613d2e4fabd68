from decimal import Decimal
from typing import Iterable

from lunchbot.models import Shop
from lunchbot.services.command_parser import CLOSED_DAYS_PREFIX, RATE_PREFIX, Command

WEEKDAY_NAMES = ("日", "一", "二", "三", "四", "五", "六")


def format_rate(rate: float) -> str:
    """1.0 -> '1', 0.5 -> '0.5', 1e-05 -> '0.00001'."""
    text = format(Decimal(repr(rate)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def render_shop(shop: Shop) -> str:
    # The space before the full-width parenthesis lets LINE clients split the name off as a link.
    parts = []
    if shop.closed_days:
        parts.append("休：" + "、".join(WEEKDAY_NAMES[day] for day in shop.closed_days))
    parts.append(f"機率：{format_rate(shop.rate)}")
    return f"{shop.name} （{'，'.join(parts)}）"


def render_shops(shops: Iterable[Shop]) -> str:
    return "\n".join(render_shop(shop) for shop in shops)


def _rate_suffix(rate: float) -> str:
    # Rates only round-trip through '.xxx' tokens, and anything >= 1 or <= 0
    # samples the same as 1 or 0, so clamp before writing.
    rate = min(max(rate, 0.0), 1.0)
    if rate == 1.0:
        return ""
    text = format_rate(rate)
    fraction = text.split(".")[1] if "." in text else "0"
    return RATE_PREFIX + fraction


def render_add_command(shop: Shop) -> str:
    """The add command line that recreates shop."""
    tokens = [Command.ADD.value, shop.name]
    if shop.closed_days:
        tokens.append(CLOSED_DAYS_PREFIX + "".join(str(day) for day in shop.closed_days))
    suffix = _rate_suffix(shop.rate)
    if suffix:
        tokens.append(suffix)
    return " ".join(tokens)
