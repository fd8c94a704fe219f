"""Tests for transactional email templates and sending through Resend."""

from datetime import datetime

import pytest

from storefront import email_service
from storefront.email_templates import (
    generate_color,
    generate_paragraph,
    generate_subject,
    generate_title,
    order_status_template,
    password_reset_template,
)
from storefront.schemas import OrderNotification


@pytest.fixture
def order():
    return OrderNotification(
        id="ord_123",
        order_status="Shipped",
        created_at=datetime(2024, 5, 17, 14, 30),
        shipping_info={
            "address": "12 Vitosha Blvd",
            "city": "Sofia",
            "state": "Sofia City",
            "country": "Bulgaria",
        },
        order_items=[
            {
                "name": "Trail <Runner>",
                "image": "https://cdn.test/Products/a.png",
                "quantity": 2,
                "size": 42,
                "price": 120,
            },
            {"name": "Socks", "quantity": 1, "price": 9.5},
        ],
        items_price=249.5,
        shipping_price=5,
        total_price=254.5,
    )


class TestStatusHelpers:
    @pytest.mark.parametrize("status", ["Processing", "Shipped", "Delivered"])
    def test_known_statuses_have_distinct_copy(self, status):
        assert generate_subject(status) != "Order status update"
        assert generate_title(status) != "Order status update"
        assert generate_paragraph(status) != "Order status update"

    def test_colors(self):
        assert generate_color("Processing") == "#ffae00"
        assert generate_color("Shipped") == "#007bff"
        assert generate_color("Delivered") == "#40be65"

    def test_unknown_status_falls_back(self):
        assert generate_subject("Cancelled") == "Order status update"
        assert generate_title("Cancelled") == "Order status update"
        assert generate_paragraph("Cancelled") == "Order status update"
        assert generate_color("Cancelled") == "#007bff"


class TestTemplates:
    def test_password_reset_contains_link(self):
        mjml = password_reset_template("https://shop.test/password/reset/abc123")
        assert "<mjml>" in mjml
        assert 'href="https://shop.test/password/reset/abc123"' in mjml
        assert "Reset password" in mjml

    def test_order_status_template(self, order):
        mjml = order_status_template(order)

        assert "Order #ord_123" in mjml
        assert generate_title("Shipped") in mjml
        assert "#007bff" in mjml
        assert "12 Vitosha Blvd, Sofia, Sofia City, Bulgaria" in mjml
        assert "Trail &lt;Runner&gt;" in mjml
        assert "Trail <Runner>" not in mjml
        assert "Size: 42" in mjml
        assert "254.50" in mjml
        assert "17 May 2024" in mjml

    def test_item_without_image_or_size(self, order):
        order.order_items = order.order_items[1:]
        mjml = order_status_template(order)
        assert "<mj-image" not in mjml
        assert "Size:" not in mjml
        assert "Socks" in mjml


class FakeEmails:
    def __init__(self):
        self.sent = []

    def send(self, params):
        self.sent.append(params)
        return {"id": f"email_{len(self.sent)}"}


@pytest.fixture
def outbox(monkeypatch):
    emails = FakeEmails()
    monkeypatch.setattr(email_service, "RESEND_API_KEY", "re_test")
    monkeypatch.setattr(email_service.resend, "Emails", emails)
    monkeypatch.setattr(email_service, "mjml_to_html", lambda mjml: {"html": f"<html>{mjml}</html>", "errors": []})
    return emails


class TestSendEmail:
    @pytest.mark.asyncio
    async def test_password_reset_email(self, outbox):
        response = await email_service.send_password_reset_email(
            "bob@example.com", "https://shop.test/password/reset/abc123"
        )

        assert response == {"id": "email_1"}
        sent = outbox.sent[0]
        assert sent["to"] == ["bob@example.com"]
        assert sent["subject"].endswith("Password Recovery")
        assert "abc123" in sent["html"]
        assert sent["html"].startswith("<html>")

    @pytest.mark.asyncio
    async def test_order_status_email_uses_status_subject(self, outbox, order):
        await email_service.send_order_status_email("bob@example.com", order)
        assert outbox.sent[0]["subject"] == generate_subject("Shipped")

    @pytest.mark.asyncio
    async def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(email_service, "RESEND_API_KEY", None)
        with pytest.raises(email_service.EmailError, match="not configured"):
            await email_service.send_email("bob@example.com", "Hi", "<mjml></mjml>")

    @pytest.mark.asyncio
    async def test_provider_error_is_wrapped(self, outbox, monkeypatch):
        def boom(params):
            raise RuntimeError("rate limited")

        monkeypatch.setattr(outbox, "send", boom)
        with pytest.raises(email_service.EmailError, match="rate limited"):
            await email_service.send_email(["a@example.com", "b@example.com"], "Hi", "<mjml></mjml>")

    def test_compile_failure(self, monkeypatch):
        def broken(mjml):
            raise ValueError("unclosed tag")

        monkeypatch.setattr(email_service, "mjml_to_html", broken)
        with pytest.raises(email_service.EmailError, match="unclosed tag"):
            email_service.compile_mjml_to_html("<mjml>")
