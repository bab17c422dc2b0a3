"""Slack Response Formatter - Formats bot responses into Slack Block Kit format."""

import logging
from llm_router.adapters.base_bot_adapter import BotResponse

logger = logging.getLogger(__name__)

# Slack rejects section text longer than this
MAX_SECTION_LENGTH = 3000

APOLOGY_TEXT = ":robot_face: _I'm sorry, I couldn't process your message._"
THINKING_TEXT = ":robot_face: _Thinking..._"
EMPTY_REPLY_TEXT = "_(the model returned an empty reply)_"


class SlackFormatter:
    """Formats BotResponse into Slack Block Kit format."""

    def format_response(self, response: BotResponse) -> dict:
        """Format BotResponse to Slack blocks."""
        if response.error:
            return self.format_error()

        answer_text = response.text or EMPTY_REPLY_TEXT
        return {
            "blocks": [
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": answer_text},
                }
            ],
            "text": answer_text[:150],  # Fallback for notifications
        }

    def format_partial(self, partial_text: str) -> dict:
        """Format a reply that is still streaming in."""
        return self.format_response(BotResponse(text=f"{partial_text} :writing_hand:"))

    def format_error(self) -> dict:
        """Generic failure message; details stay in the logs."""
        return {
            "blocks": [
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": APOLOGY_TEXT},
                }
            ],
            "text": "I'm sorry, I couldn't process your message.",
        }

    def format_thinking(self) -> dict:
        """Return placeholder message shown while the model is working."""
        return {
            "blocks": [
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": THINKING_TEXT},
                }
            ],
            "text": "Thinking...",
        }

    def split_long_message(
        self, text: str, max_length: int = MAX_SECTION_LENGTH
    ) -> list[str]:
        """Split long text into chunks, breaking at paragraph boundaries."""
        if len(text) <= max_length:
            return [text]

        chunks = []
        remaining = text

        while remaining:
            if len(remaining) <= max_length:
                chunks.append(remaining)
                break

            # Find a good break point (paragraph or sentence)
            chunk = remaining[:max_length]
            break_point = chunk.rfind("\n\n")  # Paragraph
            if break_point == -1:
                break_point = chunk.rfind(". ")  # Sentence
            if break_point == -1:
                break_point = chunk.rfind(" ")  # Word
            if break_point == -1:
                break_point = max_length - 1  # Force break

            piece = remaining[: break_point + 1].strip()
            if piece:
                chunks.append(piece)
            remaining = remaining[break_point + 1 :].strip()

        # all-whitespace text leaves no chunk; still deliver one message
        return chunks or [""]
