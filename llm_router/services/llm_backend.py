"""
LLM backend handles.

Every registered model is reached through a ChatBackend:

    text = await backend.invoke("Hello")
    async for fragment in backend.stream("Hello"):
        ...

LangChainBackend adapts any LangChain chat model (ChatOpenAI, ChatAnthropic).
FragmentStream is the pull-based stream handed to callers of
ModelInvoker.stream_query().
"""

import logging
from typing import Any, AsyncIterator, Optional, Protocol, runtime_checkable

from langchain_core.language_models.chat_models import BaseChatModel
from langsmith import traceable

from llm_router.domain.exceptions import InvocationError

logger = logging.getLogger(__name__)


@runtime_checkable
class ChatBackend(Protocol):
    """Text-completion capability of one provider model."""

    async def invoke(self, prompt: str) -> str: ...

    def stream(self, prompt: str) -> AsyncIterator[str]: ...


def message_text(content: Any) -> str:
    """Flatten LangChain message content to plain text.

    OpenAI returns a string; Anthropic may return a list of content blocks
    ({"type": "text", "text": ...}) mixed with other block types.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class LangChainBackend:
    """ChatBackend over a LangChain chat model."""

    def __init__(self, chat_model: BaseChatModel, name: str):
        self._chat_model = chat_model
        self.name = name

    @traceable(run_type="llm", name="backend_invoke")
    async def invoke(self, prompt: str) -> str:
        message = await self._chat_model.ainvoke(prompt)
        return message_text(message.content)

    async def stream(self, prompt: str) -> AsyncIterator[str]:
        async for chunk in self._chat_model.astream(prompt):
            text = message_text(chunk.content)
            if text:
                yield text

    def __repr__(self) -> str:
        return f"LangChainBackend({self.name!r})"


class FragmentStream:
    """
    Ordered, finite, non-restartable stream of text fragments.

    Pull with ``await stream.next()`` (None marks end-of-stream) or iterate
    with ``async for``. A backend failure surfaces from the pull that hit it
    as InvocationError; after that, and after exhaustion, every pull reports
    end-of-stream.
    """

    def __init__(self, model_id: str, fragments: AsyncIterator[str]):
        self.model_id = model_id
        self._fragments = fragments
        self._finished = False
        self.fragment_count = 0

    @property
    def finished(self) -> bool:
        return self._finished

    async def next(self) -> Optional[str]:
        if self._finished:
            return None
        try:
            fragment = await self._fragments.__anext__()
        except StopAsyncIteration:
            self._finished = True
            return None
        except Exception as e:
            self._finished = True
            logger.error(
                "Stream from %s failed after %d fragments: %s",
                self.model_id,
                self.fragment_count,
                e,
            )
            raise InvocationError(str(self.model_id)) from e
        self.fragment_count += 1
        return fragment

    def __aiter__(self) -> "FragmentStream":
        return self

    async def __anext__(self) -> str:
        fragment = await self.next()
        if fragment is None:
            raise StopAsyncIteration
        return fragment

    async def aclose(self) -> None:
        """Abandon the stream and release the backend iterator."""
        self._finished = True
        close = getattr(self._fragments, "aclose", None)
        if close is not None:
            await close()
