"""
MJML Email Templates
Transactional emails for password resets and order-status updates.
Rendered by email_service for the checkout and auth services.
"""

from html import escape
from typing import Optional

from .config import FRONTEND_URL, STORE_CURRENCY, STORE_NAME
from .schemas import OrderNotification

# Storefront theme colors
THEME = {
    "primary": "#417cd6",
    "background": "#f4f4f4",
    "card_bg": "#ffffff",
    "text_primary": "#151515",
    "text_secondary": "#333333",
    "text_muted": "#9b9b9b",
    "border": "#e5e5e5",
}

STATUS_COLORS = {
    "Processing": "#ffae00",
    "Shipped": "#007bff",
    "Delivered": "#40be65",
}
DEFAULT_STATUS_COLOR = "#007bff"

STATUS_SUBJECTS = {
    "Processing": "Your order has been received!",
    "Shipped": "Your order has been shipped!",
    "Delivered": "Your order has been delivered!",
}

STATUS_TITLES = {
    "Processing": "Thank you for your purchase!",
    "Shipped": "Your order is on its way!",
    "Delivered": "Your order has been delivered!",
}

STATUS_PARAGRAPHS = {
    "Processing": (
        "Thank you for shopping with us. We have received your order and started "
        "processing it. You will receive another email with all the details soon."
    ),
    "Shipped": (
        "Your order is on its way. You can follow its progress from the order status "
        "below. If you have any questions, don't hesitate to contact us."
    ),
    "Delivered": (
        "Your order has been delivered. We hope you enjoy your purchase. If you have "
        "any questions, don't hesitate to contact us."
    ),
}

ORDER_STATUS_UPDATE = "Order status update"


def generate_subject(status: str) -> str:
    return STATUS_SUBJECTS.get(status, ORDER_STATUS_UPDATE)


def generate_title(status: str) -> str:
    return STATUS_TITLES.get(status, ORDER_STATUS_UPDATE)


def generate_paragraph(status: str) -> str:
    return STATUS_PARAGRAPHS.get(status, ORDER_STATUS_UPDATE)


def generate_color(status: str) -> str:
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def format_money(amount: float) -> str:
    return f"{STORE_CURRENCY} {amount:.2f}"


def get_navigation() -> str:
    """Header links back to the storefront"""
    links = [
        ("Home", ""),
        ("Shop", "/shop"),
        ("Contact Us", "/contact"),
        ("About us", "/about_us"),
    ]
    items = "\n".join(
        f'<mj-navbar-link href="{FRONTEND_URL}{path}" color="{THEME["text_secondary"]}">{label}</mj-navbar-link>'
        for label, path in links
    )
    return f"""
        <mj-section background-color="{THEME['card_bg']}" padding="16px 20px">
          <mj-column>
            <mj-text font-size="22px" font-weight="800" color="{THEME['text_primary']}" align="center">
              {escape(STORE_NAME)}
            </mj-text>
            <mj-navbar align="center">
              {items}
            </mj-navbar>
          </mj-column>
        </mj-section>
    """


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    extra_sections: str = "",
) -> str:
    """Base MJML layout shared by every storefront email"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="{THEME['card_bg']}" padding="0 40px 40px 40px">
          <mj-column>
            <mj-button
              href="{escape(cta_url)}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="500"
              border-radius="8px"
              padding="14px 19px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{escape(title)}</mj-title>
        <mj-preview>{escape(preview_text)}</mj-preview>
        <mj-font name="Fira Sans" href="https://fonts.googleapis.com/css?family=Fira+Sans:ital,wght@0,400;0,500;0,800" />
        <mj-attributes>
          <mj-all font-family="'Fira Sans', Arial, Helvetica, sans-serif" />
          <mj-text font-size="16px" line-height="1.5" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        {get_navigation()}

        <mj-section background-color="{THEME['card_bg']}" padding="24px 40px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        {extra_sections}

        {cta_section}

        <!-- Footer -->
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}">
              {escape(STORE_NAME)}
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def password_reset_template(reset_url: str) -> str:
    """Password reset MJML template"""
    content = f"""
    <mj-text font-size="28px" font-weight="800" color="{THEME['text_primary']}" line-height="1.2">
      Reset your password
    </mj-text>
    <mj-text>
      We received a request to reset the password for your account.
      Click the button below to choose a new one.
    </mj-text>
    <mj-text font-size="13px" color="{THEME['text_muted']}">
      If you didn't request this, you can safely ignore this email. Your password won't be changed.
    </mj-text>
    """
    return get_base_template(
        title="Reset your password",
        preview_text=f"Reset your {STORE_NAME} password",
        content_sections=content,
        cta_url=reset_url,
        cta_label="Reset password",
    )


def _order_item_rows(order: OrderNotification) -> str:
    rows = []
    for item in order.order_items:
        image = ""
        if item.image:
            image = f'<mj-image src="{escape(item.image)}" width="100px" height="104px" padding="0" />'
        size = f"Size: {item.size}" if item.size is not None else ""
        rows.append(
            f"""
            <mj-section background-color="{THEME['card_bg']}" padding="8px 40px">
              <mj-group>
                <mj-column width="30%">
                  {image}
                </mj-column>
                <mj-column width="70%">
                  <mj-text font-weight="500" color="{THEME['text_primary']}">{escape(item.name)}</mj-text>
                  <mj-text font-size="14px">Qty: {item.quantity} {size}</mj-text>
                  <mj-text font-size="14px" font-weight="500">{format_money(item.price)}</mj-text>
                </mj-column>
              </mj-group>
            </mj-section>
            """
        )
    return "\n".join(rows)


def order_status_template(order: OrderNotification) -> str:
    """Order status update MJML template"""
    status = order.order_status
    shipping = order.shipping_info
    address = ", ".join(
        escape(part) for part in (shipping.address, shipping.city, shipping.state, shipping.country)
    )

    content = f"""
    <mj-text font-size="14px" color="{THEME['text_muted']}">
      Order #{escape(order.id)}
    </mj-text>
    <mj-text font-size="28px" font-weight="800" color="{THEME['text_primary']}" line-height="1.2">
      {escape(generate_title(status))}
    </mj-text>
    <mj-text>
      {escape(generate_paragraph(status))}
    </mj-text>
    <mj-divider border-color="{THEME['border']}" border-width="1px" />
    <mj-text font-size="14px">
      <strong>Order status:</strong>
      <span style="color: {generate_color(status)}; font-weight: bold;">{escape(status)}</span>
    </mj-text>
    <mj-text font-size="14px">
      <strong>Placed on:</strong> {order.created_at.strftime("%d %b %Y, %H:%M")}
    </mj-text>
    <mj-text font-size="14px">
      <strong>Shipping address:</strong> {address}
    </mj-text>
    """

    totals = f"""
        {_order_item_rows(order)}
        <mj-section background-color="{THEME['card_bg']}" padding="8px 40px 24px 40px">
          <mj-column>
            <mj-divider border-color="{THEME['border']}" border-width="1px" />
            <mj-table font-size="14px">
              <tr><td>Subtotal</td><td style="text-align: right;">{format_money(order.items_price)}</td></tr>
              <tr><td>Shipping</td><td style="text-align: right;">{format_money(order.shipping_price)}</td></tr>
              <tr style="font-weight: bold;"><td>Total</td><td style="text-align: right;">{format_money(order.total_price)}</td></tr>
            </mj-table>
          </mj-column>
        </mj-section>
    """

    return get_base_template(
        title=generate_title(status),
        preview_text=generate_subject(status),
        content_sections=content,
        extra_sections=totals,
        cta_url=f"{FRONTEND_URL}/orders",
        cta_label="View your order",
    )
