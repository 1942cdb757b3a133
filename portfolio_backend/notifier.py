"""
Webhook notifications for newly published posts.

Delivery is best effort: the notifier is scheduled as a background task
after the post has been stored, and any failure only ends up in the logs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol

import requests

from portfolio_backend.errors import NotifierError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10  # seconds

DEFAULT_ICON_URL = "https://i.imgur.com/AfFp7pu.png"


class Notifier(Protocol):
    """Interface for post notifications."""

    def notify(
        self,
        post_title: Optional[str],
        post_url: str,
        post_description: Optional[str],
    ) -> None:
        ...


@dataclass
class EmbedStyle:
    username: str = "estebandev.xyz"
    avatar_url: str = DEFAULT_ICON_URL
    footer_text: str = "estebandev.xyz/blog"
    footer_icon_url: str = DEFAULT_ICON_URL
    color: int = 0x2B4F7D
    content: str = (
        "Una nueva publicación se ha subido en https://estebandev.xyz/blog \n||@here||"
    )


def build_embed_payload(
    post_title: Optional[str],
    post_url: str,
    post_description: Optional[str],
    style: EmbedStyle,
    now: Optional[datetime] = None,
) -> dict:
    """Build a Discord-style webhook payload with a single embed."""
    timestamp = (now or datetime.now(timezone.utc)).isoformat()
    embed = {
        "title": post_title or "Embed Title",
        "description": post_description or "Embed description",
        "url": post_url,
        "color": style.color,
        "fields": [],
        "footer": {"text": style.footer_text, "icon_url": style.footer_icon_url},
        "timestamp": timestamp,
    }
    return {
        "username": style.username,
        "content": style.content,
        "avatar_url": style.avatar_url,
        "embeds": [embed],
    }


@dataclass
class InMemoryNotifier:
    """Records payloads instead of sending them. Used for tests/dev."""

    style: EmbedStyle = field(default_factory=EmbedStyle)
    sent: list[dict] = field(default_factory=list)

    def notify(
        self,
        post_title: Optional[str],
        post_url: str,
        post_description: Optional[str],
    ) -> None:
        payload = build_embed_payload(
            post_title, post_url, post_description, self.style
        )
        self.sent.append(payload)
        logger.info("Recorded notification for %s", post_url)


@dataclass
class WebhookNotifier:
    """Posts the embed payload to a configured webhook URL."""

    url: str
    style: EmbedStyle = field(default_factory=EmbedStyle)
    timeout: float = REQUEST_TIMEOUT

    def __post_init__(self):
        self._session = requests.Session()

    def send(self, payload: dict) -> None:
        response = self._session.post(self.url, json=payload, timeout=self.timeout)
        if not response.ok:
            raise NotifierError(
                f"Failed to send embed. HTTP status: {response.status_code}"
            )

    def notify(
        self,
        post_title: Optional[str],
        post_url: str,
        post_description: Optional[str],
    ) -> None:
        payload = build_embed_payload(
            post_title, post_url, post_description, self.style
        )
        try:
            self.send(payload)
        except (NotifierError, requests.RequestException) as exc:
            logger.error("Error while sending the embed for %s: %s", post_url, exc)
            return
        logger.info("Embed successfully sent for %s", post_url)
