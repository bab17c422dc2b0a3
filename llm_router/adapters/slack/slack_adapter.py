"""Slack Bot Adapter - Answers Slack messages through the model pipeline."""

import logging
from slack_sdk.web.async_client import AsyncWebClient

from llm_router.adapters.base_bot_adapter import BaseBotAdapter, BotMessage, BotResponse
from llm_router.adapters.slack.slack_formatter import MAX_SECTION_LENGTH, SlackFormatter
from llm_router.config.logging_config import correlation_id_var
from llm_router.config.settings import Config
from llm_router.services.model_invoker import ModelInvoker

logger = logging.getLogger(__name__)


class SlackBotAdapter(BaseBotAdapter):
    """Slack bot adapter - posts a placeholder, then replaces it with the reply."""

    def __init__(
        self,
        invoker: ModelInvoker,
        client: AsyncWebClient,
        formatter: SlackFormatter | None = None,
        stream_responses: bool | None = None,
        stream_update_chars: int | None = None,
    ):
        super().__init__(invoker)
        self._client = client
        self._formatter = formatter or SlackFormatter()
        self._stream_responses = (
            Config.SLACK_STREAM_RESPONSES if stream_responses is None else stream_responses
        )
        self._stream_update_chars = stream_update_chars or Config.SLACK_STREAM_UPDATE_CHARS

    async def handle_message(self, event: dict) -> None:
        """Handle incoming message from Slack.

        Replies go to the message's thread. Any failure is logged and answered
        with a generic apology.
        """
        if self._is_bot_message(event):
            logger.debug("Ignoring bot message to prevent loops")
            return

        message = self.parse_event(event)
        correlation_id_var.set(f"slack:{message.channel_id}:{message.message_id}")
        logger.info(
            "[SLACK] Message from user=%s in channel=%s (%d chars)",
            message.platform_user_id,
            message.channel_id,
            len(message.text),
        )

        placeholder_ts = None
        try:
            placeholder = await self._client.chat_postMessage(
                channel=message.channel_id,
                thread_ts=message.thread_id,
                **self._formatter.format_thinking(),
            )
            placeholder_ts = placeholder.get("ts")

            if self._stream_responses:
                answer = await self._stream_into_placeholder(message, placeholder_ts)
            else:
                answer = await self.generate_reply(message)

            logger.info("[SLACK] Reply ready (%d chars)", len(answer))
            await self.send_response(
                message.channel_id,
                BotResponse(text=answer),
                thread_id=message.thread_id,
                placeholder_ts=placeholder_ts,
            )

        except Exception as e:
            logger.exception("Error processing message: %s", e)
            await self._send_apology(message, placeholder_ts)

    async def send_response(
        self,
        channel_id: str,
        response: BotResponse,
        thread_id: str | None = None,
        placeholder_ts: str | None = None,
    ) -> None:
        """Send formatted response to Slack.

        The first chunk replaces the placeholder when there is one; further
        chunks of a long reply are posted in the thread.
        """
        if response.error:
            chunks_formatted = [self._formatter.format_error()]
        else:
            chunks = self._formatter.split_long_message(response.text or "")
            chunks_formatted = [
                self._formatter.format_response(BotResponse(text=chunk))
                for chunk in chunks
            ]

        first, rest = chunks_formatted[0], chunks_formatted[1:]
        if placeholder_ts:
            await self._client.chat_update(channel=channel_id, ts=placeholder_ts, **first)
        else:
            await self._client.chat_postMessage(
                channel=channel_id, thread_ts=thread_id, **first
            )

        for formatted in rest:
            await self._client.chat_postMessage(
                channel=channel_id,
                thread_ts=thread_id,
                **formatted,
            )

    def parse_event(self, event: dict) -> BotMessage:
        message_ts = event.get("ts", "")
        return BotMessage(
            text=event.get("text") or "",
            channel_id=event.get("channel", ""),
            message_id=message_ts,
            platform_user_id=event.get("user"),
            thread_id=event.get("thread_ts") or message_ts or None,
            raw_event=event,
        )

    async def _stream_into_placeholder(
        self, message: BotMessage, placeholder_ts: str | None
    ) -> str:
        """Drain the reply stream, editing the placeholder as text arrives."""
        stream = await self.stream_reply(message)
        parts: list[str] = []
        shown = 0
        try:
            async for fragment in stream:
                parts.append(fragment)
                current = "".join(parts)
                if (
                    placeholder_ts
                    and len(current) - shown >= self._stream_update_chars
                    and len(current) < MAX_SECTION_LENGTH
                ):
                    await self._client.chat_update(
                        channel=message.channel_id,
                        ts=placeholder_ts,
                        **self._formatter.format_partial(current),
                    )
                    shown = len(current)
        finally:
            # a failed chat_update leaves the backend stream suspended
            await stream.aclose()

        logger.debug(
            "[SLACK] Streamed %d fragments from %s", stream.fragment_count, stream.model_id
        )
        return "".join(parts)

    async def _send_apology(self, message: BotMessage, placeholder_ts: str | None) -> None:
        try:
            await self.send_response(
                message.channel_id,
                BotResponse(text="", error="failed"),
                thread_id=message.thread_id,
                placeholder_ts=placeholder_ts,
            )
        except Exception as e:
            logger.error("Failed to send apology to channel %s: %s", message.channel_id, e)

    def _is_bot_message(self, event: dict) -> bool:
        """Check if message is from a bot to prevent infinite loops."""
        bot_id = event.get("bot_id")
        if bot_id is not None and str(bot_id).strip() != "":
            return True
        if event.get("subtype") == "bot_message":
            return True
        return False
