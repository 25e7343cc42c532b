"""Unit tests for IdempotencyKeyBuilder."""

import pytest

from infrastructure.idempotency import IdempotencyKeyBuilder


@pytest.mark.unit
class TestIdempotencyKeyBuilder:
    def test_format(self):
        key = IdempotencyKeyBuilder("notification_send").build("send", user_id="u1")

        namespace, operation, digest = key.split(":")
        assert namespace == "notification_send"
        assert operation == "send"
        assert len(digest) == 16

    def test_component_order_does_not_matter(self):
        builder = IdempotencyKeyBuilder("notification_send")

        assert builder.build("send", a="1", b="2") == builder.build("send", b="2", a="1")

    def test_different_components_differ(self):
        builder = IdempotencyKeyBuilder("notification_send")

        assert builder.build("send", user_id="u1", idempotency_key="k") != builder.build(
            "send", user_id="u2", idempotency_key="k"
        )

    def test_namespace_changes_key(self):
        first = IdempotencyKeyBuilder("a").build("send", user_id="u1")
        second = IdempotencyKeyBuilder("b").build("send", user_id="u1")

        assert first.split(":")[2] != second.split(":")[2]
