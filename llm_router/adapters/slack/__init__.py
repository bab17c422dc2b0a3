from llm_router.adapters.slack.slack_adapter import SlackBotAdapter
from llm_router.adapters.slack.slack_formatter import SlackFormatter

__all__ = ["SlackBotAdapter", "SlackFormatter"]
