"""
Slack notification system for task assignment.

Tells the selected member about a task they were assigned. Delivery is
fire-and-forget: failures are logged and reported as False, never raised.
"""

import os
import logging
from datetime import datetime
from typing import Optional
import httpx
from pydantic import BaseModel

from taskflow.assignment.models import Member, Priority

logger = logging.getLogger(__name__)

SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"


class AssignmentNotification(BaseModel):
    """Assignment notification details."""
    member: Member
    task_id: str
    task_title: str
    project_name: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    score: Optional[float] = None
    rationale: Optional[str] = None
    due_date: Optional[datetime] = None


def _get_slack_headers() -> dict:
    """Get Slack API headers."""
    token = os.getenv("SLACK_BOT_TOKEN")
    if not token:
        raise ValueError("SLACK_BOT_TOKEN not configured")
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json"
    }


async def notify_assignee(notification: AssignmentNotification) -> bool:
    """
    Notify a member via Slack DM about a task assigned to them.

    Args:
        notification: Assignment notification details

    Returns:
        True if notification sent successfully
    """
    member = notification.member

    if not member.slack_user_id:
        logger.warning(f"No Slack user ID for {member.name or member.id}, cannot send DM")
        return False

    try:
        headers = _get_slack_headers()
    except ValueError as e:
        logger.warning(f"Skipping assignment notification: {e}")
        return False

    payload = {
        "channel": member.slack_user_id,  # DM uses the user ID as channel
        "text": build_assignment_message(notification),
        "blocks": build_slack_blocks(notification)
    }

    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(SLACK_POST_MESSAGE_URL, headers=headers, json=payload)
            response.raise_for_status()
            result = response.json()

        if not result.get("ok"):
            logger.error(f"Slack API error: {result.get('error', 'unknown_error')}")
            return False

        logger.info(f"Assignment notification sent to {member.name or member.id}")
        return True

    except Exception as e:
        logger.error(f"Failed to send assignment notification: {e}", exc_info=True)
        return False


def build_assignment_message(notification: AssignmentNotification) -> str:
    """Build plain text assignment message."""
    urgency_emoji = {
        Priority.HIGH: "🔴",
        Priority.MEDIUM: "🟡",
        Priority.LOW: "🟢"
    }.get(notification.priority, "⚪")

    lines = [
        f"{urgency_emoji} *New task assigned to you*",
        "",
        f"*Task:* {notification.task_title}",
        f"*Priority:* {notification.priority.value.upper()}",
    ]

    if notification.project_name:
        lines.append(f"*Project:* {notification.project_name}")
    if notification.due_date:
        lines.append(f"*Due:* {notification.due_date:%Y-%m-%d}")
    if notification.rationale:
        lines.append("")
        lines.append(f"*Why you:* {notification.rationale}")

    return "\n".join(lines)


def build_slack_blocks(notification: AssignmentNotification) -> list[dict]:
    """Build Slack Block Kit blocks for rich formatting."""
    blocks = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": "📋 New task assigned"
            }
        },
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f"*{notification.task_title}*"
            }
        },
        {
            "type": "section",
            "fields": [
                {
                    "type": "mrkdwn",
                    "text": f"*Priority:*\n{notification.priority.value.upper()}"
                },
                {
                    "type": "mrkdwn",
                    "text": f"*Due:*\n{notification.due_date:%Y-%m-%d}" if notification.due_date else "*Due:*\nNot set"
                }
            ]
        }
    ]

    if notification.rationale:
        context_text = f"*Why you:* {notification.rationale}"
        if notification.score is not None:
            context_text += f" (score {notification.score:.1f})"
        blocks.append({
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": context_text
            }
        })

    blocks.append({"type": "divider"})

    return blocks
