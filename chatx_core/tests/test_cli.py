import io
from datetime import timedelta

import pytest

from chatx_core import cli
from chatx_core.api import service
from chatx_core.config.settings import ChatxSettings
from chatx_core.dispatcher import DispatchOutcome
from chatx_core.host.local import LocalClipboardHost


@pytest.fixture
def clipboard(monkeypatch):
    state = {"text": "from clipboard"}
    monkeypatch.setattr("pyperclip.paste", lambda: state["text"])
    monkeypatch.setattr("pyperclip.copy", lambda text: state.__setitem__("text", text))
    return state


@pytest.fixture
def recorded(monkeypatch):
    calls = []

    def fake_run_action(action, text, host, options=None):
        calls.append((action, text, host.modifiers.shift))
        return DispatchOutcome.COPIED

    monkeypatch.setattr(cli, "run_action", fake_run_action)
    return calls


def test_local_host_copies_and_prints(clipboard):
    out = io.StringIO()
    host = LocalClipboardHost(out=out)
    assert host.selected_text() == "from clipboard"
    assert host.context.can_paste is False
    host.copy_text("result")
    host.show_text("result", preview=True)
    host.show_success()
    assert clipboard["text"] == "result"
    assert out.getvalue() == "result\n"
    assert host.status == "success"


def test_cli_uses_clipboard_when_no_text(clipboard, recorded):
    assert cli.main(["translate"]) == 0
    assert recorded == [("translate", "from clipboard", False)]


def test_cli_text_and_shift(clipboard, recorded):
    assert cli.main(["chat", "--text", "hi", "--shift"]) == 0
    assert recorded == [("chat", "hi", True)]


def test_cli_interactive_reset(monkeypatch, clipboard, recorded):
    monkeypatch.setattr("sys.stdin", io.StringIO("one\n\n/reset\ntwo\n"))
    assert cli.main(["chat", "--interactive"]) == 0
    assert recorded == [("chat", "one", False), ("chat", "", True), ("chat", "two", False)]


def test_cli_failure_exit_code(monkeypatch, clipboard):
    monkeypatch.setattr(cli, "run_action", lambda *a, **kw: DispatchOutcome.FAILED)
    assert cli.main(["polish", "--text", "x"]) == 1


def test_cli_requires_action(capsys):
    with pytest.raises(SystemExit):
        cli.main([])


def test_cli_list(capsys):
    assert cli.main(["--list"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0].startswith("chat")
    assert "stablediffusion" in out


def test_default_dispatcher_is_shared(monkeypatch):
    monkeypatch.setattr(service, "_store", None)
    monkeypatch.setattr(service, "_dispatcher", None)
    assert service.get_default_dispatcher() is service.get_default_dispatcher()


def test_default_store_ttl_follows_first_options(monkeypatch):
    monkeypatch.setattr(service, "_store", None)
    monkeypatch.setattr(service, "_dispatcher", None)
    first = service.get_default_dispatcher(ChatxSettings(conversation_ttl_minutes=5))
    assert service._store.ttl == timedelta(minutes=5)
    assert service.get_default_dispatcher(ChatxSettings(conversation_ttl_minutes=60)) is first
    assert service._store.ttl == timedelta(minutes=5)
