"""LLM Slack Router - routes chat messages to the best-fitting LLM backend."""

__version__ = "1.0.0"
