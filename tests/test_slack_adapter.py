"""
Tests for SlackBotAdapter and SlackFormatter.

The Slack Web API client is an AsyncMock; no network calls are made.

Run with: pytest tests/test_slack_adapter.py -v
"""

from unittest.mock import AsyncMock

import pytest
from prometheus_client import REGISTRY

from llm_router.adapters.base_bot_adapter import BotResponse
from llm_router.adapters.slack.slack_adapter import SlackBotAdapter
from llm_router.adapters.slack.slack_formatter import (
    APOLOGY_TEXT,
    EMPTY_REPLY_TEXT,
    THINKING_TEXT,
    SlackFormatter,
)
from llm_router.domain.value_objects import ModelId

PLACEHOLDER_TS = "1700000000.000200"


def _active_queries():
    return REGISTRY.get_sample_value("llm_router_active_queries")


def _event(**overrides):
    event = {
        "type": "message",
        "text": "fast simple test",
        "channel": "C123",
        "user": "U456",
        "ts": "1700000000.000100",
    }
    event.update(overrides)
    return event


def _section_text(kwargs):
    return kwargs["blocks"][0]["text"]["text"]


@pytest.fixture()
def client():
    client = AsyncMock()
    client.chat_postMessage.return_value = {"ok": True, "ts": PLACEHOLDER_TS}
    client.chat_update.return_value = {"ok": True}
    return client


@pytest.fixture()
def adapter(invoker, client):
    return SlackBotAdapter(invoker, client, stream_responses=False)


class TestHandleMessage:
    @pytest.mark.asyncio
    async def test_placeholder_then_update_in_thread(self, adapter, client):
        await adapter.handle_message(_event())

        post = client.chat_postMessage.await_args_list[0].kwargs
        assert post["channel"] == "C123"
        assert post["thread_ts"] == "1700000000.000100"
        assert _section_text(post) == THINKING_TEXT

        update = client.chat_update.await_args.kwargs
        assert update["ts"] == PLACEHOLDER_TS
        assert _section_text(update) == "gpt35 reply"

    @pytest.mark.asyncio
    async def test_reply_stays_in_existing_thread(self, adapter, client):
        await adapter.handle_message(_event(thread_ts="1699999999.000001"))

        post = client.chat_postMessage.await_args_list[0].kwargs
        assert post["thread_ts"] == "1699999999.000001"

    @pytest.mark.asyncio
    async def test_only_message_text_reaches_model(self, adapter, backends):
        await adapter.handle_message(_event(text="fast simple test", user="U999"))

        assert backends[ModelId.GPT35].invoke_calls == ["fast simple test"]

    @pytest.mark.asyncio
    async def test_bot_messages_are_ignored(self, adapter, client, backends):
        await adapter.handle_message(_event(bot_id="B1"))
        await adapter.handle_message(_event(subtype="bot_message"))

        client.chat_postMessage.assert_not_called()
        assert backends[ModelId.GPT35].invoke_calls == []

    @pytest.mark.asyncio
    async def test_failure_replaces_placeholder_with_apology(
        self, adapter, client, backends
    ):
        backends[ModelId.GPT35].error = RuntimeError("provider exploded")

        await adapter.handle_message(_event())

        update = client.chat_update.await_args.kwargs
        assert _section_text(update) == APOLOGY_TEXT
        assert "provider exploded" not in str(update)

    @pytest.mark.asyncio
    async def test_failed_placeholder_post_still_apologises(self, adapter, client):
        client.chat_postMessage.side_effect = [RuntimeError("slack down"), {"ok": True}]

        await adapter.handle_message(_event())

        apology = client.chat_postMessage.await_args_list[1].kwargs
        assert _section_text(apology) == APOLOGY_TEXT
        client.chat_update.assert_not_called()

    @pytest.mark.asyncio
    async def test_long_reply_is_split_across_messages(self, invoker, client, backends):
        backends[ModelId.GPT35].reply = ("word " * 700).strip()
        adapter = SlackBotAdapter(invoker, client, stream_responses=False)

        await adapter.handle_message(_event())

        client.chat_update.assert_awaited_once()
        # placeholder + one continuation chunk
        assert client.chat_postMessage.await_count == 2
        continuation = client.chat_postMessage.await_args_list[1].kwargs
        assert continuation["thread_ts"] == "1700000000.000100"

    @pytest.mark.asyncio
    async def test_long_whitespace_reply_is_delivered_as_empty(
        self, adapter, client, backends
    ):
        backends[ModelId.GPT35].reply = " " * 4000

        await adapter.handle_message(_event())

        update = client.chat_update.await_args.kwargs
        assert _section_text(update) == EMPTY_REPLY_TEXT
        client.chat_update.assert_awaited_once()


class TestStreamingReplies:
    @pytest.mark.asyncio
    async def test_placeholder_is_edited_while_streaming(self, invoker, client, backends):
        backends[ModelId.GPT35].fragments = ["aaaa", "bbbb", "cccc"]
        adapter = SlackBotAdapter(
            invoker, client, stream_responses=True, stream_update_chars=4
        )

        await adapter.handle_message(_event())

        updates = [_section_text(c.kwargs) for c in client.chat_update.await_args_list]
        assert updates[:3] == [
            "aaaa :writing_hand:",
            "aaaabbbb :writing_hand:",
            "aaaabbbbcccc :writing_hand:",
        ]
        assert updates[-1] == "aaaabbbbcccc"
        assert backends[ModelId.GPT35].invoke_calls == []

    @pytest.mark.asyncio
    async def test_mid_stream_failure_apologises(self, invoker, client, backends):
        backends[ModelId.GPT35].fragments = ["partial", "never"]
        backends[ModelId.GPT35].error = RuntimeError("cut off")
        backends[ModelId.GPT35].fail_after = 1
        adapter = SlackBotAdapter(
            invoker, client, stream_responses=True, stream_update_chars=1000
        )

        await adapter.handle_message(_event())

        assert _section_text(client.chat_update.await_args.kwargs) == APOLOGY_TEXT

    @pytest.mark.asyncio
    async def test_failed_partial_update_closes_backend_stream(
        self, invoker, client, backends
    ):
        backends[ModelId.GPT35].fragments = ["aaaa", "bbbb"]
        client.chat_update.side_effect = RuntimeError("slack rate limited")
        adapter = SlackBotAdapter(
            invoker, client, stream_responses=True, stream_update_chars=4
        )
        active_before = _active_queries()

        await adapter.handle_message(_event())

        assert backends[ModelId.GPT35].stream_closed
        assert _active_queries() == active_before


class TestSlackFormatter:
    def test_error_response_is_generic(self):
        formatted = SlackFormatter().format_response(BotResponse(text="", error="boom"))
        assert formatted["text"] == "I'm sorry, I couldn't process your message."

    def test_empty_reply_gets_placeholder_text(self):
        formatted = SlackFormatter().format_response(BotResponse(text=""))
        assert _section_text(formatted)

    def test_split_prefers_paragraph_breaks(self):
        text = "a" * 20 + "\n\n" + "b" * 20
        assert SlackFormatter().split_long_message(text, max_length=30) == [
            "a" * 20,
            "b" * 20,
        ]

    def test_split_all_whitespace_keeps_one_chunk(self):
        assert SlackFormatter().split_long_message(" " * 25, max_length=10) == [""]

    def test_split_forces_break_without_whitespace(self):
        chunks = SlackFormatter().split_long_message("x" * 25, max_length=10)

        assert all(len(chunk) <= 10 for chunk in chunks)
        assert "".join(chunks) == "x" * 25
