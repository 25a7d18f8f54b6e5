"""
Celery tasks for booking e-mails.

This module provides async tasks for:
- Booking confirmation e-mails (to the guest)
- Booking cancellation e-mails (to the guest)

Templates live in bookings/templates/bookings/email/ as
``<name>.html`` and ``<name>.txt``.

Usage:
    from bookings.tasks import send_booking_confirmation_email
    send_booking_confirmation_email.delay(booking_id=123)
"""

from __future__ import annotations

import logging
from smtplib import SMTPException

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from bookings.models import Booking

logger = logging.getLogger(__name__)


def send_templated_email(to: str, subject: str, template_name: str, context: dict) -> None:
    """
    Render ``<template_name>.txt`` and ``.html`` and send them as one e-mail.

    Raises:
        SMTPException: Delivery failed (the calling task retries)
    """
    text_content = render_to_string(f"{template_name}.txt", context)
    html_content = render_to_string(f"{template_name}.html", context)

    email = EmailMultiAlternatives(
        subject=subject,
        body=text_content,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to],
    )
    email.attach_alternative(html_content, "text/html")
    email.send(fail_silently=False)


def _booking_context(booking: Booking) -> dict:
    return {
        "booking": booking,
        "guest_name": booking.guest.get_full_name(),
        "listing": booking.listing,
        "bookings_url": f"{settings.FRONTEND_URL}/bookings",
    }


def _load_booking(booking_id: int) -> Booking | None:
    booking = (
        Booking.objects.select_related("listing", "guest").filter(pk=booking_id).first()
    )
    if booking is None:
        logger.error(f"Booking {booking_id} not found for e-mail")
    return booking


@shared_task(
    bind=True,
    autoretry_for=(SMTPException, ConnectionError),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_booking_confirmation_email(self, booking_id: int) -> bool:
    """
    E-mail the guest that their booking is confirmed.

    Returns:
        True if the e-mail was sent, False if the booking is gone
    """
    booking = _load_booking(booking_id)
    if booking is None:
        return False

    send_templated_email(
        to=booking.guest.email,
        subject=f"Booking Confirmed: {booking.listing.title}",
        template_name="bookings/email/booking_confirmed",
        context=_booking_context(booking),
    )
    logger.info(f"Confirmation e-mail sent for booking {booking_id}")
    return True


@shared_task(
    bind=True,
    autoretry_for=(SMTPException, ConnectionError),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_booking_cancellation_email(self, booking_id: int) -> bool:
    """
    E-mail the guest that their booking was cancelled.

    Returns:
        True if the e-mail was sent, False if the booking is gone
    """
    booking = _load_booking(booking_id)
    if booking is None:
        return False

    send_templated_email(
        to=booking.guest.email,
        subject=f"Reservation Cancelled: {booking.listing.title}",
        template_name="bookings/email/booking_cancelled",
        context=_booking_context(booking),
    )
    logger.info(f"Cancellation e-mail sent for booking {booking_id}")
    return True
