import random
from datetime import date, datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from lunchbot import __version__
from lunchbot.config import settings
from lunchbot.logging_config import get_logger
from lunchbot.services.command_parser import (
    CLOSED_DAYS_PREFIX,
    Command,
    parse_line,
    parse_options,
    split_lines,
)
from lunchbot.services.formatter import render_add_command, render_shop, render_shops
from lunchbot.services.result import DUPLICATE, EMPTY_NAME, NAME_TOO_LONG
from lunchbot.services.sampler import weighted_pick
from lunchbot.services.shop_store import ShopStore

logger = get_logger("command_service")

NAME_PREVIEW_LENGTH = 15

MSG_POKE = "戳屁戳"
MSG_UNKNOWN = "蛤？"
MSG_NO_OPTIONS = "沒有"
MSG_NO_IDEA = "不知道"
MSG_EMPTY_NAME = "要吃什麼？"
MSG_ADDED = "好 {shop}"
MSG_DUPLICATE = "{name} 已經有了"
MSG_NAME_TOO_LONG = "{preview}… 名字太長了"
MSG_UPDATED = "改好了 {shop}"
MSG_UPDATE_NOT_FOUND = "沒有 {name} 可以改"
MSG_REMOVED = "{name} 不吃了"
MSG_REMOVE_NOT_FOUND = "本來就沒有 {name}"
MSG_REMOVED_ALL = "都不吃了"

Handler = Callable[[str, str, list[str]], Optional[str]]


def local_today(timezone_name: str) -> date:
    return datetime.now(ZoneInfo(timezone_name)).date()


def weekday_index(day: date) -> int:
    """0 = Sunday .. 6 = Saturday."""
    return day.isoweekday() % 7


class CommandService:
    """Runs text commands for one conversation against an injected ShopStore."""

    def __init__(
        self,
        store: ShopStore,
        today: Optional[Callable[[], date]] = None,
        rng: Optional[random.Random] = None,
        max_attempts: Optional[int] = None,
    ):
        self.store = store
        self.today = today or (lambda: local_today(settings.timezone))
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts if max_attempts is not None else settings.sampler_max_attempts
        self.handlers: dict[Command, Handler] = {
            Command.POKE: self.poke,
            Command.LIST_ALL: self.list_all,
            Command.LIST_TODAY: self.list_today,
            Command.ADD: self.add_shop,
            Command.UPDATE: self.update_shop,
            Command.RECOMMEND: self.recommend,
            Command.REMOVE: self.remove_shop,
            Command.REMOVE_ALL: self.remove_all,
            Command.DUMP: self.dump_all,
            Command.PICK: self.pick_from_list,
            Command.NOOP: self.noop,
        }

    def handle_text(self, conversation_id: str, text: str, is_group: bool = False) -> str:
        """Run every line of a message in order; returns the non-empty replies joined by newlines."""
        replies = []
        for line in split_lines(text):
            reply = self.handle_line(conversation_id, line, is_group=is_group)
            if reply:
                replies.append(reply)
        return "\n".join(replies)

    def handle_line(self, conversation_id: str, line: str, is_group: bool = False) -> Optional[str]:
        parsed = parse_line(line)
        if parsed is None:
            return None

        command = parsed.command
        if command is None:
            # Stay quiet in groups, people talk about other things there.
            return None if is_group else MSG_UNKNOWN

        logger.info(
            "Command dispatched",
            extra={"context": {"conversation_id": conversation_id, "command": command.name}},
        )
        return self.handlers[command](conversation_id, parsed.name, parsed.options)

    def end_conversation(self, conversation_id: str) -> int:
        """Bot left the group or was blocked: forget everything about the conversation."""
        return self.store.delete_all(conversation_id)

    def today_weekday(self) -> int:
        return weekday_index(self.today())

    # Handlers

    def poke(self, conversation_id: str, name: str, args: list[str]) -> str:
        return f"{MSG_POKE} v{__version__}"

    def list_all(self, conversation_id: str, name: str, args: list[str]) -> str:
        shops = self.store.list_shops(conversation_id)
        return render_shops(shops) if shops else MSG_NO_OPTIONS

    def list_today(self, conversation_id: str, name: str, args: list[str]) -> str:
        weekday = self.today_weekday()
        shops = [shop for shop in self.store.list_shops(conversation_id) if not shop.is_closed_on(weekday)]
        return render_shops(shops) if shops else MSG_NO_OPTIONS

    def add_shop(self, conversation_id: str, name: str, args: list[str]) -> str:
        closed_days, rate = parse_options(args)
        result = self.store.create_shop(conversation_id, name, closed_days, rate)
        if result.ok:
            return MSG_ADDED.format(shop=render_shop(result.value))

        if result.error_code == NAME_TOO_LONG:
            return MSG_NAME_TOO_LONG.format(preview=name[:NAME_PREVIEW_LENGTH])
        if result.error_code == DUPLICATE:
            return MSG_DUPLICATE.format(name=name)
        return MSG_EMPTY_NAME

    def update_shop(self, conversation_id: str, name: str, args: list[str]) -> str:
        closed_days, rate = parse_options(args)
        result = self.store.update_shop(conversation_id, name, closed_days, rate)
        if result.ok:
            return MSG_UPDATED.format(shop=render_shop(result.value))
        if result.error_code == EMPTY_NAME:
            return MSG_EMPTY_NAME
        return MSG_UPDATE_NOT_FOUND.format(name=name[:NAME_PREVIEW_LENGTH])

    def recommend(self, conversation_id: str, name: str, args: list[str]) -> str:
        tokens = ([name] if name else []) + args
        excluded = {
            token[len(CLOSED_DAYS_PREFIX) :] for token in tokens if token.startswith(CLOSED_DAYS_PREFIX)
        }
        weekday = self.today_weekday()
        candidates = [
            shop
            for shop in self.store.list_shops(conversation_id)
            if shop.name not in excluded and not shop.is_closed_on(weekday)
        ]

        shop = weighted_pick(candidates, rng=self.rng, max_attempts=self.max_attempts)
        if shop is None:
            return MSG_NO_IDEA
        return render_shop(shop)

    def remove_shop(self, conversation_id: str, name: str, args: list[str]) -> str:
        result = self.store.delete_shop(conversation_id, name)
        if result.ok:
            return MSG_REMOVED.format(name=name)
        if result.error_code == EMPTY_NAME:
            return MSG_EMPTY_NAME
        return MSG_REMOVE_NOT_FOUND.format(name=name[:NAME_PREVIEW_LENGTH])

    def remove_all(self, conversation_id: str, name: str, args: list[str]) -> str:
        self.store.delete_all(conversation_id)
        return MSG_REMOVED_ALL

    def dump_all(self, conversation_id: str, name: str, args: list[str]) -> str:
        shops = self.store.list_shops(conversation_id)
        if not shops:
            return MSG_NO_OPTIONS
        return "\n".join(render_add_command(shop) for shop in shops)

    def pick_from_list(self, conversation_id: str, name: str, args: list[str]) -> str:
        options = ([name] if name else []) + args
        if not options:
            return MSG_NO_IDEA
        return self.rng.choice(options)

    def noop(self, conversation_id: str, name: str, args: list[str]) -> None:
        return None
