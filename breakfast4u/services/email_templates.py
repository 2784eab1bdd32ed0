"""
HTML email bodies for welcome, order confirmation and contact messages
"""
from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Iterable, Optional

from breakfast4u.utils.helpers import format_currency

BRAND = "Breakfast4U"
ACCENT = "#f97316"


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str


@dataclass(frozen=True)
class OrderLine:
    name: str
    quantity: int
    amount: float


def _wrap(body: str) -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f"{body}"
        "</div>"
    )


def _panel(body: str) -> str:
    return (
        '<div style="background-color: #f3f4f6; padding: 15px; border-radius: 5px; margin: 20px 0;">'
        f"{body}"
        "</div>"
    )


def welcome(name: str) -> EmailContent:
    return EmailContent(
        subject=f"Welcome to {BRAND}!",
        html=_wrap(
            f'<h2 style="color: {ACCENT};">Welcome to {BRAND}, {escape(name)}!</h2>'
            "<p>Thank you for joining our community of breakfast lovers.</p>"
            "<p>Start exploring delicious breakfast options in your area and "
            "discover your perfect morning meal!</p>"
            f"<p>Best regards,<br>The {BRAND} Team</p>"
        ),
    )


def order_confirmation(order_number: str, lines: Iterable[OrderLine], total: float) -> EmailContent:
    items = "".join(
        f"<li>{line.quantity}x {escape(line.name)} - {format_currency(line.amount)}</li>"
        for line in lines
    )
    return EmailContent(
        subject=f"Order Confirmation - {order_number}",
        html=_wrap(
            f'<h2 style="color: {ACCENT};">Order Confirmed!</h2>'
            f"<p>Your order <strong>{escape(order_number)}</strong> has been confirmed.</p>"
            + _panel(
                f"<h3>Order Details:</h3><ul>{items}</ul><hr>"
                f"<p><strong>Total: {format_currency(total)}</strong></p>"
            )
            + "<p>We'll notify you when your order is ready!</p>"
            f"<p>Best regards,<br>The {BRAND} Team</p>"
        ),
    )


def contact_confirmation(name: str, subject: str) -> EmailContent:
    return EmailContent(
        subject=f"We received your message - {BRAND}",
        html=_wrap(
            f'<h2 style="color: {ACCENT};">Thank you for contacting us, {escape(name)}!</h2>'
            f"<p>We have received your message regarding: <strong>{escape(subject)}</strong></p>"
            "<p>Our team will review your inquiry and get back to you within 24 hours.</p>"
            f"<p>Best regards,<br>The {BRAND} Support Team</p>"
        ),
    )


def contact_admin_notification(
    name: str,
    email: str,
    phone: Optional[str],
    category: str,
    subject: str,
    message: str,
    submitted_at: datetime,
) -> EmailContent:
    return EmailContent(
        subject=f"New Contact Form Submission - {category}",
        html=_wrap(
            f'<h2 style="color: {ACCENT};">New Contact Form Submission</h2>'
            + _panel(
                f"<p><strong>Name:</strong> {escape(name)}</p>"
                f"<p><strong>Email:</strong> {escape(email)}</p>"
                f"<p><strong>Phone:</strong> {escape(phone or 'Not provided')}</p>"
                f"<p><strong>Category:</strong> {escape(category)}</p>"
                f"<p><strong>Subject:</strong> {escape(subject)}</p>"
                f"<p><strong>Message:</strong></p><p>{escape(message)}</p>"
            )
            + f"<p><strong>Submitted at:</strong> {submitted_at:%Y-%m-%d %H:%M} UTC</p>"
        ),
    )


def contact_response(name: str, subject: str, message: str, response: str) -> EmailContent:
    return EmailContent(
        subject=f"Re: {subject} - {BRAND} Support",
        html=_wrap(
            f'<h2 style="color: {ACCENT};">Response to Your Inquiry</h2>'
            f"<p>Dear {escape(name)},</p>"
            f"<p>Thank you for contacting {BRAND}. Here's our response to your inquiry:</p>"
            + _panel(
                f"<p><strong>Your Message:</strong></p><p>{escape(message)}</p><hr>"
                f"<p><strong>Our Response:</strong></p><p>{escape(response)}</p>"
            )
            + f"<p>Best regards,<br>The {BRAND} Support Team</p>"
        ),
    )
