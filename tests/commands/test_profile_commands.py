"""Tests for /tier, /plots, /perk, /group, /playtime and the command registry."""

from unittest.mock import AsyncMock

import pytest

from playerstore.commands import (
    BufferedSender,
    CommandRegistry,
    GroupCommand,
    PerkCommand,
    PlayTimeCommand,
    PlotLimitCommand,
    TierCommand,
    default_commands,
)
from playerstore.commands.group import GroupOp
from playerstore.commands.perk import PerkOp
from playerstore.exceptions import CommandParseError, UnknownCommandError
from playerstore.models import Group


@pytest.fixture
def sender():
    return BufferedSender("Admin")


@pytest.fixture
async def steve(repository, make_player):
    data = make_player(name="Steve", tier=2, plot_limit=3, perks=frozenset({"fly"}))
    await repository.save(data)
    return data


class TestTierCommand:
    @pytest.mark.asyncio
    async def test_promote(self, repository, sender, steve):
        command = TierCommand(repository)

        assert await command.execute(sender, ["+", "Steve"]) is True

        assert (await repository.find_by_id(steve.id)).tier == 3
        assert sender.messages == ["Steve is tier 3"]

    @pytest.mark.asyncio
    async def test_demote_clamps_at_zero(self, repository, sender, steve):
        await TierCommand(repository).execute(sender, ["decrement", "Steve", "10"])

        assert (await repository.find_by_id(steve.id)).tier == 0


class TestPlotLimitCommand:
    @pytest.mark.asyncio
    async def test_set_and_show(self, repository, sender, steve):
        command = PlotLimitCommand(repository)

        await command.execute(sender, ["set", "Steve", "8"])
        await command.execute(sender, ["show", "Steve"])

        assert (await repository.find_by_id(steve.id)).plot_limit == 8
        assert sender.messages == ["Steve can claim 8 plot(s)"] * 2


class TestPerkCommand:
    @pytest.mark.asyncio
    async def test_add_perk_is_lowercased(self, repository, sender, steve):
        await PerkCommand(repository).execute(sender, ["add", "Steve", "Nick"])

        assert (await repository.find_by_id(steve.id)).perks == {"fly", "nick"}
        assert sender.messages == ["Steve has perks: fly, nick"]

    @pytest.mark.asyncio
    async def test_add_existing_perk_keeps_set(self, repository, sender, steve):
        await PerkCommand(repository).execute(sender, ["add", "Steve", "fly"])

        assert (await repository.find_by_id(steve.id)).perks == {"fly"}

    @pytest.mark.asyncio
    async def test_remove_and_clear(self, repository, sender, steve):
        command = PerkCommand(repository)

        await command.execute(sender, ["remove", "Steve", "fly"])
        assert (await repository.find_by_id(steve.id)).perks == frozenset()

        await command.execute(sender, ["add", "Steve", "hat"])
        await command.execute(sender, ["clear", "Steve"])
        assert (await repository.find_by_id(steve.id)).perks == frozenset()
        assert sender.messages[-1] == "Steve has no perks"

    def test_add_requires_perk(self):
        with pytest.raises(CommandParseError, match="a perk is required to add"):
            PerkCommand(AsyncMock()).parse(["add", "Steve"])

    def test_show_is_default_operation_config(self):
        config = PerkCommand(AsyncMock()).parse(["show", "Steve"])

        assert config.operation is PerkOp.SHOW
        assert config.perk is None


class TestGroupCommand:
    @pytest.mark.asyncio
    async def test_set_group(self, repository, sender, steve):
        assert await GroupCommand(repository).execute(
            sender, ["set", "Steve", "moderator"]
        )

        assert (await repository.find_by_id(steve.id)).group is Group.MODERATOR
        assert sender.messages == ["Steve is in group MODERATOR"]

    @pytest.mark.asyncio
    async def test_unknown_group_is_parse_error(self, repository, sender, steve):
        command = GroupCommand(repository)

        assert await command.execute(sender, ["set", "Steve", "wizard"]) is False

        assert (await repository.find_by_id(steve.id)).group is Group.MEMBER
        assert "invalid group value: 'wizard'" in sender.messages[0]

    def test_set_requires_group(self):
        with pytest.raises(CommandParseError, match="a group is required"):
            GroupCommand(AsyncMock()).parse(["set", "Steve"])

    def test_parse_show(self):
        config = GroupCommand(AsyncMock()).parse(["SHOW", "Steve"])

        assert config.operation is GroupOp.SHOW


class TestPlayTimeCommand:
    @pytest.mark.asyncio
    async def test_reports_play_time(self, repository, sender, steve):
        assert await PlayTimeCommand(repository).execute(sender, ["steve"]) is True

        assert sender.messages == [
            "Steve has played for 5h 0m 0s "
            "(first login 2024-03-01 12:00 UTC, last seen 2024-03-03 12:00 UTC)"
        ]
        assert await repository.find_by_id(steve.id) == steve

    @pytest.mark.asyncio
    async def test_unknown_player(self, repository, sender):
        assert await PlayTimeCommand(repository).execute(sender, ["Ghost"]) is False
        assert sender.messages == ["Error: Player 'Ghost' was not found"]


class TestCommandRegistry:
    def test_default_commands(self):
        registry = default_commands(AsyncMock())

        assert registry.names() == ["credit", "group", "perk", "playtime", "plots", "tier"]

    def test_lookup_ignores_slash_and_case(self):
        registry = default_commands(AsyncMock())

        assert isinstance(registry.get("/Tier"), TierCommand)

    def test_unknown_command(self):
        with pytest.raises(UnknownCommandError):
            CommandRegistry().get("fly")

    @pytest.mark.asyncio
    async def test_dispatch(self, repository, sender, steve):
        registry = default_commands(repository)

        assert await registry.dispatch(sender, "credit", ["show", "Steve"]) is True
        assert await registry.dispatch(sender, "teleport", ["Steve"]) is False

        assert sender.messages == [
            "Steve has 5 vote credit(s)",
            "Error: Unknown command 'teleport'",
        ]

    def test_register_override_logs_warning(self, caplog):
        registry = CommandRegistry([TierCommand(AsyncMock())])

        registry.register(TierCommand(AsyncMock()))

        assert "already registered" in caplog.text
