"""Base Bot Adapter - Abstract base classes for all bot adapters (Slack, Teams, etc.)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

from llm_router.services.llm_backend import FragmentStream
from llm_router.services.model_invoker import ModelInvoker

logger = logging.getLogger(__name__)


@dataclass
class BotMessage:
    """Normalized message from any platform."""

    text: str
    channel_id: str
    message_id: str
    platform_user_id: str | None = None
    thread_id: str | None = None
    raw_event: dict | None = None


@dataclass
class BotResponse:
    """Response to send back to platform."""

    text: str
    error: str | None = None


class BaseBotAdapter(ABC):
    """Abstract base for all bot adapters.

    Only the message text reaches the model pipeline; everything else on the
    platform event is used for delivery.
    """

    def __init__(self, invoker: ModelInvoker):
        self._invoker = invoker

    @abstractmethod
    async def handle_message(self, event: dict) -> None:
        """Handle incoming message from platform."""
        ...

    @abstractmethod
    async def send_response(
        self, channel_id: str, response: BotResponse, thread_id: str | None = None
    ) -> None:
        """Send formatted response back to platform."""
        ...

    async def generate_reply(self, message: BotMessage) -> str:
        """Select a model for the message text and return its full reply."""
        return await self._invoker.run_query(message.text)

    async def stream_reply(self, message: BotMessage) -> FragmentStream:
        """Select a model for the message text and stream its reply."""
        return await self._invoker.stream_query(message.text)
