"""
Pilot tests for the Textual front end.

The app is driven with key presses; assertions are made against the
controller it adapts and the screen stack.
"""
import asyncio

import pytest

from ai_chat.Chat.conversation_controller import Screen
from ai_chat.UI.chat_screen import ChatScreen, format_transcript_line
from ai_chat.UI.history_screen import HistoryScreen
from ai_chat.UI.settings_screen import SettingsScreen
from ai_chat.app import ChatApp, build_arg_parser, build_controller
from ai_chat.Chat.chat_models import ChatMessage


class StubGateway:
    def __init__(self, reply="pong", blocking=False):
        self.reply = reply
        self.sent = []
        self.closed = False
        self.release = asyncio.Event() if blocking else None

    async def send(self, provider, model, context_snapshot, new_user_text=None):
        self.sent.append((provider, model, [m.content for m in context_snapshot]))
        if self.release is not None:
            await self.release.wait()
        return self.reply

    def reload(self, provider):
        pass

    async def aclose(self):
        self.closed = True


async def _settle(pilot, times=3):
    for _ in range(times):
        await pilot.pause()


async def _type(pilot, text):
    for ch in text:
        await pilot.press("space" if ch == " " else ch)


@pytest.mark.ui
class TestChatApp:

    @pytest.mark.asyncio
    async def test_startup(self, make_controller):
        app = ChatApp(make_controller(gateway=StubGateway()))
        async with app.run_test() as pilot:
            await _settle(pilot)
            assert isinstance(app.screen, ChatScreen)
            assert app.title == "AI Chat (OPENAI)"
            assert app.controller.transcript[0].content.startswith("welcome to ai-chat!")

    @pytest.mark.asyncio
    async def test_submit_message(self, make_controller, history_dir):
        gateway = StubGateway(reply="**pong**")
        app = ChatApp(make_controller(gateway=gateway))
        async with app.run_test() as pilot:
            await _settle(pilot)
            await _type(pilot, "ping")
            await pilot.press("enter")
            await app.workers.wait_for_complete()
            await _settle(pilot)

            contents = [(m.role, m.content) for m in app.controller.transcript]
            assert ("user", "ping") in contents
            assert ("assistant", "pong") in contents
            assert gateway.sent == [("openai", "gpt-4o", ["ping"])]
            assert app.chat_screen.query_one("#chat-input").value == ""
            assert [p.stem for p in history_dir.glob("*.toml")] == [app.controller.session.id]

    @pytest.mark.asyncio
    async def test_input_disabled_while_waiting(self, make_controller):
        gateway = StubGateway(blocking=True)
        app = ChatApp(make_controller(gateway=gateway))
        async with app.run_test() as pilot:
            await _settle(pilot)
            await _type(pilot, "hi")
            await pilot.press("enter")
            await _settle(pilot)

            chat_input = app.chat_screen.query_one("#chat-input")
            assert app.controller.is_busy
            assert chat_input.disabled

            gateway.release.set()
            await app.workers.wait_for_complete()
            await _settle(pilot)

            assert not app.controller.is_busy
            assert not chat_input.disabled

    @pytest.mark.asyncio
    async def test_settings_toggle_and_escape(self, make_controller):
        app = ChatApp(make_controller(gateway=StubGateway()))
        async with app.run_test() as pilot:
            await _settle(pilot)
            await pilot.press("ctrl+s")
            await _settle(pilot)
            assert app.controller.screen == Screen.SETTINGS
            assert isinstance(app.screen, SettingsScreen)

            await pilot.press("escape")
            await _settle(pilot)
            assert app.controller.screen == Screen.CHAT
            assert isinstance(app.screen, ChatScreen)

            await pilot.press("ctrl+s")
            await _settle(pilot)
            await pilot.press("ctrl+s")
            await _settle(pilot)
            assert isinstance(app.screen, ChatScreen)

    @pytest.mark.asyncio
    async def test_choose_provider_in_settings(self, make_controller):
        app = ChatApp(make_controller(gateway=StubGateway()))
        async with app.run_test() as pilot:
            await _settle(pilot)
            await pilot.press("ctrl+s")
            await _settle(pilot)
            await pilot.press("down")
            await pilot.press("enter")
            await _settle(pilot)

            assert app.controller.provider == "claude"
            assert app.title == "AI Chat (CLAUDE)"
            assert app.controller.transcript[-1].content == (
                "provider changed to claude (claude-3-5-sonnet-20240620)"
            )
            assert isinstance(app.screen, SettingsScreen)

    @pytest.mark.asyncio
    async def test_history_and_new_chat(self, make_controller):
        app = ChatApp(make_controller(gateway=StubGateway()))
        async with app.run_test() as pilot:
            await _settle(pilot)
            await _type(pilot, "first chat")
            await pilot.press("enter")
            await app.workers.wait_for_complete()
            await _settle(pilot)
            first_id = app.controller.session.id

            await pilot.press("ctrl+o")
            await _settle(pilot)
            assert isinstance(app.screen, HistoryScreen)
            assert [s.label for s in app.screen.sessions] == ["first chat (openai)"]

            await pilot.click("#new-chat-button")
            await _settle(pilot)
            assert isinstance(app.screen, ChatScreen)
            assert app.controller.session.id != first_id

            await pilot.press("ctrl+o")
            await _settle(pilot)
            await pilot.press("enter")
            await _settle(pilot)
            assert isinstance(app.screen, ChatScreen)
            assert app.controller.session.id == first_id
            assert app.controller.transcript[-1].content == "loaded chat: first chat"

    @pytest.mark.asyncio
    async def test_ctrl_o_toggles_history(self, make_controller):
        app = ChatApp(make_controller(gateway=StubGateway()))
        async with app.run_test() as pilot:
            await _settle(pilot)
            await pilot.press("ctrl+o")
            await _settle(pilot)
            assert isinstance(app.screen, HistoryScreen)

            await pilot.press("ctrl+o")
            await _settle(pilot)
            assert isinstance(app.screen, ChatScreen)
            assert app.controller.screen == Screen.CHAT

    @pytest.mark.asyncio
    async def test_ctrl_n_starts_new_chat(self, make_controller):
        app = ChatApp(make_controller(gateway=StubGateway()))
        async with app.run_test() as pilot:
            await _settle(pilot)
            old_id = app.controller.session.id
            await pilot.press("ctrl+n")
            await _settle(pilot)
            assert app.controller.session.id != old_id
            assert app.controller.transcript[-1].content == "started new chat with openai (gpt-4o)"

    @pytest.mark.asyncio
    async def test_quit_saves_and_closes_gateway(self, make_controller, store):
        gateway = StubGateway()
        controller = make_controller(gateway=gateway)
        app = ChatApp(controller)
        async with app.run_test() as pilot:
            await _settle(pilot)
            controller.session.add_message(ChatMessage(role="user", content="keep me"))
            await pilot.press("ctrl+q")
            await _settle(pilot)

        assert store.load(controller.session.id).session.messages[0].content == "keep me"
        assert gateway.closed


class TestTranscriptFormatting:

    @pytest.mark.parametrize("role, label, style", [
        ("user", "user", "yellow"),
        ("assistant", "ai", "green"),
        ("system", "system", "cyan"),
    ])
    def test_line_format(self, role, label, style):
        message = ChatMessage(role=role, content="text")
        line = format_transcript_line(message)
        assert line.plain == f"{message.timestamp:%H:%M:%S} {label}: text"
        assert any(span.style == style for span in line.spans)


class TestCommandLine:

    def test_arguments(self):
        args = build_arg_parser().parse_args(["-p", "gemini", "--history-dir", "/tmp/h", "--debug"])
        assert args.provider == "gemini"
        assert args.history_dir == "/tmp/h"
        assert args.debug is True
        assert args.config is None

    def test_unknown_provider_rejected(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args(["--provider", "llama"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args(["--version"])
        assert "ai-chat 1.0.0" in capsys.readouterr().out

    def test_build_controller_from_config(self, isolate_test_environment, history_dir):
        config_file = isolate_test_environment / "config" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text(
            '[general]\ndefault_provider = "gemini"\ncontext_limit = 4\nautosave_interval = 3\n',
            encoding="utf-8",
        )

        controller = build_controller(history_dir=history_dir)

        assert controller.provider == "gemini"
        assert controller.context.capacity == 4
        assert controller.autosave_interval == 3
        assert controller.store.history_dir == history_dir
        assert history_dir.is_dir()

    def test_build_controller_cli_provider_wins(self, history_dir):
        assert build_controller(provider="grok", history_dir=history_dir).provider == "grok"

    def test_build_controller_ignores_unknown_configured_provider(self, isolate_test_environment, history_dir):
        config_file = isolate_test_environment / "config" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text('[general]\ndefault_provider = "llama"\n', encoding="utf-8")
        assert build_controller(history_dir=history_dir).provider == "openai"
