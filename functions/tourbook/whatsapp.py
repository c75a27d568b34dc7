"""
WhatsApp hand-off for booking requests.

Nothing is sent from the server; the guest's browser opens a ``wa.me`` deep
link with the booking summary prefilled.
"""

from __future__ import annotations

from urllib.parse import quote

WHATSAPP_BASE_URL = "https://wa.me"


def _format_price(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def build_booking_message(
    tour_title: str,
    booking: dict,
    total_price: float,
    booking_id: int,
    currency: str = "SAR",
) -> str:
    return (
        "🛍️ New Tour Booking Request!\n\n"
        f"Tour: {tour_title}\n"
        f"Guest: {booking['guest_name']}\n"
        f"Email: {booking['guest_email']}\n"
        f"Phone: {booking['guest_phone']}\n"
        f"Guests: {booking['guest_count']}\n"
        f"Preferred Date: {booking.get('preferred_date') or 'Flexible'}\n"
        f"Total Price: {_format_price(total_price)} {currency}\n"
        f"Message: {booking.get('message') or 'None'}\n\n"
        f"Booking ID: {booking_id}"
    )


def build_whatsapp_url(number: str, message: str) -> str:
    digits = "".join(ch for ch in number if ch.isdigit())
    # Same unreserved set as JavaScript's encodeURIComponent.
    text = quote(message, safe="!'()*")
    return f"{WHATSAPP_BASE_URL}/{digits}?text={text}"
