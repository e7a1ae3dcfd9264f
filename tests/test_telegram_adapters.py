from __future__ import annotations

import asyncio

import pytest
from telethon.errors import RPCError
from telethon.tl.types.messages import AffectedMessages

from adapters.telegram_chat import TelegramChatGateway
from adapters.telegram_mapper import build_inbound_message
from core.errors import PlatformActionError


class DummySender:
    def __init__(self, username=None, first_name=None, last_name=None) -> None:
        self.username = username
        self.first_name = first_name
        self.last_name = last_name


class DummyMessage:
    def __init__(self, *, text, sender=None, sender_id=99) -> None:
        self.chat_id = -100123
        self.id = 10
        self.raw_text = text
        self.sender = sender
        self.sender_id = sender_id


class DummyClient:
    def __init__(self, *, delete_result=None, error=None) -> None:
        self.sent: list[tuple] = []
        self.deleted: list[tuple] = []
        self._delete_result = delete_result
        self._error = error

    async def send_message(self, entity, message, reply_to=None, parse_mode=()):
        if self._error:
            raise self._error
        self.sent.append((entity, message, reply_to, parse_mode))

    async def delete_messages(self, entity, message_ids):
        if self._error:
            raise self._error
        self.deleted.append((entity, message_ids))
        return self._delete_result


def test_build_inbound_message_uses_username() -> None:
    message = build_inbound_message(DummyMessage(text="hello", sender=DummySender(username="alice")))
    assert message.conversation_id == -100123
    assert message.message_id == 10
    assert message.sender == "@alice"
    assert message.text == "hello"


def test_build_inbound_message_falls_back_to_name_then_id() -> None:
    named = build_inbound_message(DummyMessage(text="x", sender=DummySender(first_name="Bob", last_name="Lee")))
    assert named.sender == "Bob Lee"
    anonymous = build_inbound_message(DummyMessage(text="x", sender=None, sender_id=555))
    assert anonymous.sender == "id:555"


def test_build_inbound_message_media_without_caption_has_empty_text() -> None:
    assert build_inbound_message(DummyMessage(text=None)).text == ""


def test_gateway_send_passes_reply_to() -> None:
    client = DummyClient()
    asyncio.run(TelegramChatGateway(client).send_message(-1, "hi", reply_to=5))
    assert client.sent == [(-1, "hi", 5, None)]


def test_gateway_delete_succeeds_when_messages_affected() -> None:
    client = DummyClient(delete_result=[AffectedMessages(pts=1, pts_count=1)])
    asyncio.run(TelegramChatGateway(client).delete_message(-1, 5))
    assert client.deleted == [(-1, [5])]


def test_gateway_delete_without_effect_is_a_failure() -> None:
    client = DummyClient(delete_result=[AffectedMessages(pts=1, pts_count=0)])
    with pytest.raises(PlatformActionError):
        asyncio.run(TelegramChatGateway(client).delete_message(-1, 5))


def test_gateway_maps_rpc_errors() -> None:
    client = DummyClient(error=RPCError(None, "MESSAGE_DELETE_FORBIDDEN", 403))
    gateway = TelegramChatGateway(client)
    with pytest.raises(PlatformActionError, match="MESSAGE_DELETE_FORBIDDEN"):
        asyncio.run(gateway.delete_message(-1, 5))
    with pytest.raises(PlatformActionError):
        asyncio.run(gateway.send_message(-1, "hi"))


def test_gateway_sends_reason_markup_as_plain_text() -> None:
    client = DummyClient()
    text = "Причина: uses **caps** and [click](http://evil.example) __now__"
    asyncio.run(TelegramChatGateway(client).send_message(-1, text))

    _, sent_text, reply_to, parse_mode = client.sent[0]
    assert sent_text == text
    assert reply_to is None
    assert parse_mode is None
