"""Tests for command matching, role gating and the bundled commands."""

import importlib
from types import SimpleNamespace

import pytest
from conftest import ROLE_ID_MOD, raw_advance, raw_chat, raw_media, raw_user

from dubbot.core import Command, CommandRouter, PluginError, has_role
from dubbot.models import ChatEvent, ChatType, Event, UserRole


def chat_event(command, role=UserRole.NONE, args=()):
    return ChatEvent(
        chat_id="c1",
        message=f"!{command}",
        type=ChatType.COMMAND,
        user_id="u1",
        username="alice",
        user_role=role,
        command=command,
        args=list(args),
    )


def command_module(**exports):
    module = SimpleNamespace(__name__="test_command", __doc__="Does a thing.\n\nMore.", **exports)
    return module


class TestHasRole:
    def test_no_minimum(self):
        assert has_role(UserRole.NONE, None)
        assert has_role(None, UserRole.NONE)

    def test_levels(self):
        assert has_role(UserRole.MOD, UserRole.BOUNCER)
        assert has_role(UserRole.VIP, UserRole.BOUNCER)
        assert not has_role(UserRole.RESIDENT_DJ, UserRole.BOUNCER)
        assert not has_role(None, UserRole.BOUNCER)


class TestCommandFromModule:
    def test_valid(self):
        command = Command.from_module(
            command_module(triggers=["Skip", "s"], handler=lambda e, c: None)
        )
        assert command.triggers == frozenset({"skip", "s"})
        assert command.description == "Does a thing."
        assert command.minimum_role is None

    def test_case_sensitive_keeps_triggers(self):
        command = Command.from_module(
            command_module(triggers=["Skip"], handler=lambda e, c: None), case_sensitive=True
        )
        assert command.triggers == frozenset({"Skip"})

    @pytest.mark.parametrize(
        "exports",
        [
            {"handler": lambda e, c: None},
            {"triggers": ["x"]},
            {"triggers": "x", "handler": lambda e, c: None},
            {"triggers": ["x"], "handler": "not callable"},
            {"triggers": ["x"], "handler": lambda e, c: None, "minimum_role": "mod"},
        ],
    )
    def test_invalid(self, exports):
        with pytest.raises(PluginError):
            Command.from_module(command_module(**exports))


class TestCommandRouter:
    """Test dispatching chat commands."""

    def make(self, triggers, minimum_role=None, insufficient=None):
        calls = []
        command = Command(
            name="test",
            triggers=frozenset(triggers),
            handler=lambda event, context: calls.append("handler"),
            minimum_role=minimum_role,
            insufficient_permissions_handler=insufficient,
        )
        return command, calls

    def test_case_insensitive_match(self):
        command, calls = self.make(["skip"])
        CommandRouter([command]).route(chat_event("SKIP"), None)
        assert calls == ["handler"]

    def test_case_sensitive_match(self):
        command, calls = self.make(["skip"])
        CommandRouter([command], case_sensitive=True).route(chat_event("SKIP"), None)
        assert calls == []

    def test_every_match_fires(self):
        first, first_calls = self.make(["skip"])
        second, second_calls = self.make(["skip", "s"])
        router = CommandRouter([first, second])

        router.route(chat_event("skip"), None)

        assert first_calls == ["handler"]
        assert second_calls == ["handler"]

    def test_non_command_chat_is_ignored(self):
        command, calls = self.make(["hi"])
        event = chat_event("hi")
        event.command = None
        CommandRouter([command]).route(event, None)
        assert calls == []

    def test_insufficient_role(self):
        denied = []
        command, calls = self.make(
            ["skip"], UserRole.BOUNCER, lambda event, context: denied.append(event.username)
        )

        CommandRouter([command]).route(chat_event("skip", UserRole.RESIDENT_DJ), None)

        assert calls == []
        assert denied == ["alice"]

    def test_insufficient_role_without_hook(self):
        command, calls = self.make(["skip"], UserRole.BOUNCER)
        CommandRouter([command]).route(chat_event("skip"), None)
        assert calls == []

    def test_sufficient_role(self):
        command, calls = self.make(["skip"], UserRole.BOUNCER)
        CommandRouter([command]).route(chat_event("skip", UserRole.MOD), None)
        assert calls == ["handler"]

    def test_failing_command_does_not_stop_others(self):
        def broken(event, context):
            raise RuntimeError("boom")

        failing = Command(name="broken", triggers=frozenset({"go"}), handler=broken)
        working, calls = self.make(["go"])
        router = CommandRouter()
        router.add(failing)
        router.add(working)

        router.route(chat_event("go"), None)

        assert calls == ["handler"]


class TestBundledCommands:
    """Test the commands shipped in dubbot.components.commands."""

    @pytest.fixture
    def router(self, bot, tracker):
        commands = [
            Command.from_module(importlib.import_module(f"dubbot.components.commands.{name}"))
            for name in ("help", "lastplayed", "skip", "woot")
        ]
        bot.context.commands.extend(commands)
        router = CommandRouter(commands)
        bot.on(Event.CHAT, router.route)
        return router

    def test_skip_requires_bouncer(self, router, client):
        client.emit("chat-message", raw_chat("c1", "!skip"))

        assert client.actions == []
        assert client.sent_chat == ["@alice you need to be a bouncer or above to skip"]

    def test_skip_with_reason(self, router, client):
        client.emit("chat-message", raw_chat("c1", "!skip too long", raw_user(role=ROLE_ID_MOD)))

        assert client.actions == [("skip",)]
        assert client.sent_chat == ["Skipped by alice: too long"]

    def test_skip_with_nothing_playing(self, router, client):
        client.action_results["skip"] = False
        client.emit("chat-message", raw_chat("c1", "!skip", raw_user(role=ROLE_ID_MOD)))

        assert client.sent_chat == ["@alice nothing was skipped"]

    def test_woot_alias(self, router, client):
        client.emit("chat-message", raw_chat("c1", "!DubUp"))
        assert client.actions == [("woot",)]
        assert client.sent_chat == []

    def test_help_lists_commands(self, router, client):
        client.emit("chat-message", raw_chat("c1", "!help"))
        assert client.sent_chat == [
            "Available commands: !help, !lastplayed, !skip, !woot"
        ]

    def test_lastplayed(self, router, client):
        client.emit(
            "room_playlist-update", raw_advance(user=raw_user("d1", "first"), media=raw_media("x"))
        )
        client.emit("room_playlist-update", raw_advance(media=raw_media("y")))
        client.emit("room_playlist-update", raw_advance(media=raw_media("x", "Song X")))

        client.emit("chat-message", raw_chat("c1", "!lastplayed"))

        assert len(client.sent_chat) == 1
        assert client.sent_chat[0].startswith("Song X was last played ")
        assert client.sent_chat[0].endswith(" ago by first")

    def test_lastplayed_first_time(self, router, client):
        client.emit("room_playlist-update", raw_advance(media=raw_media("x", "Song X")))
        client.emit("chat-message", raw_chat("c1", "!lastplayed"))
        assert client.sent_chat == ["Song X hasn't been played recently"]

    def test_lastplayed_nothing_playing(self, router, client):
        client.emit("chat-message", raw_chat("c1", "!lastplayed"))
        assert client.sent_chat == ["Nothing is playing right now"]
