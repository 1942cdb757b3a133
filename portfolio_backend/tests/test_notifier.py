import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import requests

from portfolio_backend.notifier import (
    EmbedStyle,
    InMemoryNotifier,
    WebhookNotifier,
    build_embed_payload,
)


class BuildEmbedPayloadTests(unittest.TestCase):
    def test_payload_shape(self):
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        payload = build_embed_payload(
            "Hello", "https://example.com/posts/1", "desc", EmbedStyle(), now=now
        )
        self.assertEqual(payload["username"], "estebandev.xyz")
        self.assertIn("||@here||", payload["content"])
        embed = payload["embeds"][0]
        self.assertEqual(embed["title"], "Hello")
        self.assertEqual(embed["url"], "https://example.com/posts/1")
        self.assertEqual(embed["color"], 0x2B4F7D)
        self.assertEqual(embed["footer"]["text"], "estebandev.xyz/blog")
        self.assertEqual(embed["timestamp"], "2024-01-01T12:00:00+00:00")

    def test_missing_fields_fall_back(self):
        payload = build_embed_payload(None, "u", None, EmbedStyle(color=1))
        embed = payload["embeds"][0]
        self.assertEqual(embed["title"], "Embed Title")
        self.assertEqual(embed["description"], "Embed description")
        self.assertEqual(embed["color"], 1)


class WebhookNotifierTests(unittest.TestCase):
    def setUp(self):
        self.notifier = WebhookNotifier(url="https://hooks.example.com/abc")

    def test_posts_payload_to_webhook(self):
        with patch.object(
            self.notifier._session, "post", return_value=MagicMock(ok=True)
        ) as mock_post:
            self.notifier.notify("t", "https://example.com/posts/3", "d")

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://hooks.example.com/abc")
        self.assertEqual(kwargs["json"]["embeds"][0]["title"], "t")
        self.assertIn("timeout", kwargs)

    def test_non_2xx_is_logged_not_raised(self):
        response = MagicMock(ok=False, status_code=500)
        with patch.object(self.notifier._session, "post", return_value=response):
            with self.assertLogs("portfolio_backend.notifier", level="ERROR") as logs:
                self.notifier.notify("t", "https://example.com/posts/3", "d")
        self.assertIn("HTTP status: 500", logs.output[0])

    def test_network_error_is_logged_not_raised(self):
        with patch.object(
            self.notifier._session,
            "post",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            with self.assertLogs("portfolio_backend.notifier", level="ERROR"):
                self.notifier.notify("t", "https://example.com/posts/3", "d")


class InMemoryNotifierTests(unittest.TestCase):
    def test_records_payloads(self):
        notifier = InMemoryNotifier()
        notifier.notify("a", "https://example.com/posts/1", "b")
        self.assertEqual(len(notifier.sent), 1)
        self.assertEqual(notifier.sent[0]["embeds"][0]["description"], "b")


if __name__ == "__main__":
    unittest.main()
