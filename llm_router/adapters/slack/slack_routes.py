"""
Slack Routes (Webhook Endpoints)
================================

FastAPI routes to receive webhooks from Slack and forward to SlackBotAdapter.

ENDPOINTS:
----------
POST /slack/events      - Receives Slack events (message, app_mention)

SECURITY:
---------
All requests are verified using Slack's signing secret to prevent spoofing.
See: https://api.slack.com/authentication/verifying-requests-from-slack

BACKGROUND PROCESSING:
----------------------
Slack requires response within 3 seconds. We return 200 OK immediately
and process messages in background tasks.
"""

import hashlib
import hmac
import json
import logging
import time
from collections import OrderedDict

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, Response

from llm_router.adapters.slack.slack_adapter import SlackBotAdapter
from llm_router.config.settings import Config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slack", tags=["slack"])

# Reject requests older than this to prevent replay attacks
MAX_REQUEST_AGE_SECONDS = 300

# How many dispatched (channel, ts) pairs to remember
MAX_REMEMBERED_EVENTS = 1000


class DispatchedEvents:
    """
    Bounded memory of the Slack messages already handed to the adapter.

    An @mention in a channel the bot reads arrives twice, once as `message`
    and once as `app_mention`, with the same channel and ts. Either may come
    first; only the first is answered.
    """

    def __init__(self, max_size: int = MAX_REMEMBERED_EVENTS):
        self._keys: OrderedDict[tuple[str, str], None] = OrderedDict()
        self._max_size = max_size

    def first_delivery(self, event: dict) -> bool:
        """Record the event; False if its (channel, ts) was seen before."""
        key = (event.get("channel", ""), event.get("ts", ""))
        if key in self._keys:
            return False
        self._keys[key] = None
        if len(self._keys) > self._max_size:
            self._keys.popitem(last=False)
        return True


def verify_slack_signature(
    body: bytes,
    timestamp: str,
    signature: str,
    signing_secret: str,
    now: float | None = None,
) -> bool:
    """
    Verify that the request came from Slack using signing secret.

    See: https://api.slack.com/authentication/verifying-requests-from-slack
    """
    if not signing_secret:
        logger.warning("SLACK_SIGNING_SECRET not configured, rejecting request")
        return False

    try:
        request_timestamp = int(timestamp)
    except (ValueError, TypeError):
        logger.warning("Invalid timestamp in Slack request")
        return False

    current_timestamp = int(now if now is not None else time.time())
    if abs(current_timestamp - request_timestamp) > MAX_REQUEST_AGE_SECONDS:
        logger.warning("Slack request timestamp too old")
        return False

    sig_basestring = f"v0:{timestamp}:{body.decode('utf-8')}"
    expected_signature = (
        "v0="
        + hmac.new(
            signing_secret.encode("utf-8"),
            sig_basestring.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
    )

    # Compare signatures (timing-safe)
    return hmac.compare_digest(expected_signature, signature or "")


async def _process_message_event(adapter: SlackBotAdapter, event: dict) -> None:
    """Background task to process message events."""
    try:
        await adapter.handle_message(event)
    except Exception as e:
        logger.exception(f"Error processing Slack message: {e}")


@router.post("/events")
@inject
async def slack_events(
    request: Request,
    background_tasks: BackgroundTasks,
    adapter: FromDishka[SlackBotAdapter],
):
    """
    Handle all Slack events.

    SLACK EVENT TYPES:
    ------------------
    1. url_verification - Slack verifying your endpoint (one-time setup)
    2. event_callback - Actual events (messages, mentions)

    IMPORTANT: Must respond within 3 seconds. Processing happens in background.
    """
    if not Config.SLACK_ENABLED:
        logger.debug("Slack integration disabled, ignoring event")
        return Response(status_code=200)

    body = await request.body()

    timestamp = request.headers.get("X-Slack-Request-Timestamp", "")
    signature = request.headers.get("X-Slack-Signature", "")

    if not verify_slack_signature(
        body, timestamp, signature, Config.SLACK_SIGNING_SECRET
    ):
        logger.warning("Invalid Slack signature, rejecting request")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON")

    if data.get("type") == "url_verification":
        logger.info("[SLACK] URL verification challenge received")
        return {"challenge": data.get("challenge")}

    # Slack re-delivers events it thinks timed out; the first delivery is
    # already being processed.
    if request.headers.get("X-Slack-Retry-Num"):
        logger.info(
            "[SLACK] Ignoring retry #%s (%s)",
            request.headers.get("X-Slack-Retry-Num"),
            request.headers.get("X-Slack-Retry-Reason", "unknown"),
        )
        return Response(status_code=200)

    if data.get("type") == "event_callback":
        event = data.get("event", {})
        event_type = event.get("type")

        logger.debug(f"[SLACK] Event type: {event_type}")

        # Skip bot messages, message_changed, message_deleted, etc.
        answerable = (event_type == "message" and event.get("subtype") is None) or (
            event_type == "app_mention"
        )

        if answerable:
            dispatched: DispatchedEvents = request.app.state.slack_dispatched_events
            if not dispatched.first_delivery(event):
                logger.debug(
                    f"[SLACK] Duplicate {event_type} for ts={event.get('ts')}, ignoring"
                )
            else:
                logger.info(
                    f"[SLACK] {event_type} from {event.get('user', 'unknown')} "
                    f"in {event.get('channel', '')}"
                )
                background_tasks.add_task(_process_message_event, adapter, event)

    # Slack expects 200 OK response within 3 seconds
    return Response(status_code=200)
