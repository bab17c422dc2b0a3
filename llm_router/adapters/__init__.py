"""
Bot Adapters Module
===================

Adapters connect external chat platforms to the model pipeline. They:
1. Receive events from the platform
2. Hand the plain message text to the ModelInvoker
3. Format the reply back into the platform's message format

Available Adapters:
- slack: Slack bot adapter (see adapters/slack/)
"""
