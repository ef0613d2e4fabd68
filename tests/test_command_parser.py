import pytest

from lunchbot.services.command_parser import (
    Command,
    parse_closed_days,
    parse_line,
    parse_options,
    parse_rate,
    split_lines,
)


class TestParseLine:
    def test_keyword_name_and_options(self):
        parsed = parse_line("可吃 麵屋 -13 .5")
        assert parsed.command == Command.ADD
        assert parsed.name == "麵屋"
        assert parsed.options == ["-13", ".5"]

    def test_repeated_spaces_are_dropped(self):
        parsed = parse_line("  不吃   麵屋  ")
        assert parsed.keyword == "不吃"
        assert parsed.args == ["麵屋"]

    def test_blank_line(self):
        assert parse_line("") is None
        assert parse_line("    ") is None

    def test_keyword_only(self):
        parsed = parse_line("有啥")
        assert parsed.command == Command.LIST_ALL
        assert parsed.name == ""
        assert parsed.options == []

    def test_unknown_keyword(self):
        parsed = parse_line("午安 大家")
        assert parsed.command is None

    def test_keyword_must_match_exactly(self):
        assert parse_line("吃啥?").command is None
        assert parse_line("要吃啥").command == Command.PICK

    def test_split_lines(self):
        assert split_lines("可吃 A\n有啥") == ["可吃 A", "有啥"]
        assert split_lines("") == []


class TestParseOptions:
    def test_closed_days_and_rate(self):
        assert parse_options(["-135", ".5"]) == ([1, 3, 5], 0.5)

    def test_defaults(self):
        assert parse_options([]) == ([], 1.0)

    def test_closed_days_wrap_modulo_7(self):
        assert parse_closed_days("-7") == [0]
        assert parse_closed_days("-89") == [1, 2]

    def test_closed_days_drop_garbage_and_duplicates(self):
        assert parse_closed_days("-3a3x1") == [1, 3]
        assert parse_closed_days("-") == []

    @pytest.mark.parametrize("token", [".", ".abc", ".5.5", ".nan", ".inf"])
    def test_invalid_rate_keeps_default(self, token):
        assert parse_options([token]) == ([], 1.0)

    def test_rate_parses_the_modifier_token(self):
        assert parse_rate(".25") == 0.25

    def test_last_modifier_wins(self):
        assert parse_options(["-1", "-26", ".5", ".2"]) == ([2, 6], 0.2)

    def test_unprefixed_tokens_ignored(self):
        assert parse_options(["hello", "5"]) == ([], 1.0)
