"""Best-effort failure alerts to a Discord webhook."""

import logging
import traceback
from typing import Optional

from ski_conditions.config import ALERT_MAX_LENGTH
from ski_conditions.http import post_json

logger = logging.getLogger(__name__)


def format_alert(error: BaseException, limit: int = ALERT_MAX_LENGTH) -> str:
    """Message plus traceback in a code block, trimmed to fit the webhook limit."""
    header = f"Error updating ski conditions: {error}\n"
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    room = limit - len(header) - len("``````")
    if room <= 0:
        return header[:limit]
    if len(trace) > room:
        # Keep the end of the trace, where the failing call is
        trace = trace[-room:]

    return f"{header}```{trace}```"


def notify_failure(error: BaseException, webhook_url: Optional[str]) -> bool:
    """
    Send an alert for an unrecoverable failure.

    Never raises: a failed alert is only logged.

    Returns:
        True if the alert was delivered
    """
    if not webhook_url:
        logger.debug("No alert webhook configured")
        return False

    try:
        post_json(webhook_url, {"content": format_alert(error)})
    except Exception as e:
        logger.error(f"Failed to send error notification: {e}")
        return False

    logger.info("Sent error notification")
    return True
