"""测试 chat 与一次性动作处理器。"""

import pytest

from chatx_core.actions import ChatActionHandler, OneTimeActionHandler, build_handler_registry, strip_wrapping_quotes
from chatx_core.config.settings import ActionOptions, ChatxSettings
from chatx_core.domain.actions import ActionKind
from chatx_core.domain.exceptions import NetworkError
from chatx_core.domain.models import ActionRequest, HostContext, Message, Modifiers
from chatx_core.infrastructure.storage.memory_store import InMemoryConversationStore
from chatx_core.prompts import resolve_instruction


def make_options(**kw):
    kw.setdefault("api_key", "sk-test-0123456789")
    return ChatxSettings(**kw)


def make_request(action_id, text="hello", shift=False, options=None):
    return ActionRequest(
        action_id=action_id,
        selected_text=text,
        modifiers=Modifiers(shift=shift),
        context=HostContext(app_identifier="com.example.editor", app_name="Editor"),
        options=options if options is not None else make_options(),
    )


def test_chat_turns_accumulate():
    store = InMemoryConversationStore()
    handler = ChatActionHandler(store)
    for i in range(3):
        req = make_request("chat", text=f"q{i}")
        assert handler.precheck(req).allow
        payload = handler.build_payload(req)
        assert payload.messages[-1] == Message(role="user", content=f"q{i}")
        assert handler.on_success(req, f"  a{i}\n") == f"a{i}"
    msgs = store.messages("com.example.editor")
    assert len(msgs) == 6
    assert [m.role for m in msgs] == ["user", "assistant"] * 3
    assert [m.content for m in msgs[::2]] == ["q0", "q1", "q2"]


def test_chat_failure_rolls_back():
    store = InMemoryConversationStore()
    handler = ChatActionHandler(store)
    req = make_request("chat", text="first")
    handler.build_payload(req)
    handler.on_success(req, "reply")

    req2 = make_request("chat", text="second")
    handler.build_payload(req2)
    handler.on_failure(req2, NetworkError(code="NETWORK_ERROR", message="boom"))
    assert len(store.messages("com.example.editor")) == 2


def test_chat_reset_modifier_clears_history():
    store = InMemoryConversationStore()
    handler = ChatActionHandler(store)
    req = make_request("chat")
    handler.build_payload(req)
    handler.on_success(req, "reply")

    result = handler.precheck(make_request("chat", shift=True))
    assert result.allow is False
    assert result.message == "Editor(com.example.editor)'s chat history has been cleared"
    assert store.messages("com.example.editor") == []


def test_chat_payload_uses_options():
    handler = ChatActionHandler(InMemoryConversationStore())
    payload = handler.build_payload(make_request("chat", options=make_options(model="gpt-4o", temperature=0.2)))
    assert payload.model == "gpt-4o"
    assert payload.temperature == 0.2


def test_chat_handler_rejects_other_actions():
    store = InMemoryConversationStore()
    handler = ChatActionHandler(store)
    assert handler.build_payload(make_request("translate")) is None
    assert store.messages("com.example.editor") == []


def test_one_time_disabled_is_silent():
    handler = OneTimeActionHandler(ActionKind.POLISH)
    req = make_request("polish")
    result = handler.precheck(req)
    assert result.allow is False
    assert result.message is None


def test_one_time_language_selection():
    options = make_options(
        actions={"translate": ActionOptions(enabled=True, primary_language="French", secondary_language="Japanese")}
    )
    handler = OneTimeActionHandler(ActionKind.TRANSLATE)
    assert handler.precheck(make_request("translate", options=options)).allow

    primary = handler.build_payload(make_request("translate", text="bonjour", options=options))
    assert len(primary.messages) == 1
    content = primary.messages[0].content
    assert content.startswith(resolve_instruction("translate", "French", ""))
    assert content.endswith('\n\n"""bonjour"""')

    secondary = handler.build_payload(make_request("translate", shift=True, options=options))
    assert "into Japanese" in secondary.messages[0].content


def test_one_time_instruction_override():
    options = make_options(actions={"custom": ActionOptions(enabled=True, instruction="Reply in haiku.")})
    handler = OneTimeActionHandler(ActionKind.CUSTOM)
    payload = handler.build_payload(make_request("custom", text="spring", options=options))
    assert payload.messages[0].content.startswith("Reply in haiku.\n")


def test_one_time_strips_quotes():
    handler = OneTimeActionHandler(ActionKind.TRANSLATE)
    req = make_request("translate")
    assert handler.on_success(req, '"hello"') == "hello"
    assert handler.on_success(req, "  no quotes \n") == "no quotes"
    assert handler.on_success(req, '""inner""') == '"inner"'


def test_strip_wrapping_quotes_one_side():
    assert strip_wrapping_quotes('"left') == "left"
    assert strip_wrapping_quotes('right"') == "right"


def test_registry_is_read_only():
    registry = build_handler_registry(InMemoryConversationStore())
    assert set(registry) == {k.value for k in ActionKind}
    assert isinstance(registry["chat"], ChatActionHandler)
    assert registry["summarize"].kind is ActionKind.SUMMARIZE
    with pytest.raises(TypeError):
        registry["chat"] = None
