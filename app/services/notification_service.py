"""Notification Service for booking and review emails.

Sends transactional email through Resend:
- Field changes on a booking (approved, rejected, updated, needs approval)
- Booking comments (to the customer or to the venue inbox)
- Review submissions and updates (to the review inbox)

Delivery is best effort. Every send returns a ``NotificationResult``; nothing
in here raises into the calling request.
"""

import html
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.config import settings
from app.core.exceptions import NotificationError
from app.domain.field_approval import Approve, Edit, FieldTransition, Reject, has_value
from app.utils.nested_document import get_path

logger = logging.getLogger(__name__)

# Labels shown in booking emails for well-known fields
FIELD_LABELS = {
    "foodNumberOfCourses": "Fjöldi rétta",
    "foodAllergies": "Ofnæmi",
    "foodMenu": "Matseðill",
}

SECTION_LABELS = {
    "guest_count": "Fjöldi gesta",
    "services": "Valin þjónusta",
    "food": "Matur",
    "drinks": "Drykkir",
    "room_setup": "Uppsetning",
    "tech_and_music": "Tækni",
    "tablecloth": "Borð & Skreyting",
    "notes": "Athugasemdir",
    "event_info": "Viðburður",
    "contact": "Tengiliður",
}

ACCENT_COLOR = "#a77d3b"


@dataclass(frozen=True)
class EmailMessage:
    """Outbound email handed to the provider."""

    sender: str
    to: str
    subject: str
    html: str
    reply_to: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "from": self.sender,
            "to": [self.to],
            "subject": self.subject,
            "html": self.html,
        }
        if self.reply_to:
            payload["reply_to"] = self.reply_to
        return payload


@dataclass(frozen=True)
class NotificationResult:
    """What happened to one notification."""

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"

    status: str
    kind: str | None = None
    recipient: str | None = None
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.status == self.SENT

    @property
    def failed(self) -> bool:
        return self.status == self.FAILED

    @classmethod
    def nothing_to_send(cls) -> "NotificationResult":
        return cls(status=cls.SKIPPED)


class ResendEmailClient:
    """Thin async client for the Resend HTTP API."""

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.api_url = api_url or settings.resend_api_url
        self.timeout = timeout or settings.email_timeout_seconds
        self._http_client: httpx.AsyncClient | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def send(self, message: EmailMessage) -> str | None:
        """Send one email.

        Returns:
            str | None: Provider message id, if the provider returned one

        Raises:
            NotificationError: On transport failure or a non-2xx answer
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = await self.http_client.post(
                self.api_url,
                headers=headers,
                json=message.to_payload(),
            )
        except httpx.HTTPError as e:
            raise NotificationError(f"Email transport failed: {e}") from e

        if response.status_code not in (200, 201, 202):
            raise NotificationError(
                f"Email provider answered {response.status_code}: {response.text[:200]}"
            )

        try:
            return response.json().get("id")
        except ValueError:
            return None


class NotificationService:
    """Service for sending booking and review notifications."""

    # Notification kinds
    FIELD_APPROVED = "field_approved"
    FIELD_REJECTED = "field_rejected"
    FIELD_UPDATED = "field_updated"
    FIELD_NEEDS_APPROVAL = "field_needs_approval"
    COMMENT_TO_CUSTOMER = "comment_to_customer"
    COMMENT_TO_ADMIN = "comment_to_admin"
    REVIEW_SUBMITTED = "review_submitted"
    REVIEW_UPDATED = "review_updated"

    def __init__(self, email_client: ResendEmailClient | None = None) -> None:
        """Initialize notification service."""
        self.email_client = email_client or ResendEmailClient()

    async def close(self) -> None:
        await self.email_client.close()

    # ==================== DELIVERY ====================

    async def deliver(self, kind: str, message: EmailMessage | None) -> NotificationResult:
        """Send a message, converting every failure into a result."""
        if message is None:
            return NotificationResult.nothing_to_send()

        if not message.to:
            logger.warning(f"Notification {kind} has no recipient; skipping")
            return NotificationResult(status=NotificationResult.SKIPPED, kind=kind)

        if not self.email_client.configured:
            logger.warning(f"Email API key not set; skipping {kind} to {message.to}")
            return NotificationResult(
                status=NotificationResult.SKIPPED, kind=kind, recipient=message.to
            )

        try:
            await self.email_client.send(message)
        except NotificationError as e:
            logger.error(f"Notification {kind} to {message.to} failed: {e}")
            return NotificationResult(
                status=NotificationResult.FAILED,
                kind=kind,
                recipient=message.to,
                error=str(e),
            )

        logger.info(f"Notification {kind} sent to {message.to}")
        return NotificationResult(status=NotificationResult.SENT, kind=kind, recipient=message.to)

    # ==================== BOOKING FIELD CHANGES ====================

    def build_field_notification(
        self,
        booking: Any,
        transition: FieldTransition,
        notify_customer: bool = False,
    ) -> tuple[str, EmailMessage] | None:
        """Pick the email (if any) that goes with a field transition.

        - admin approved a value: customer gets "change approved"
        - admin rejected: customer gets "change rejected"
        - admin edited and asked to notify: customer gets "update"
        - customer edited: venue inbox gets "needs approval"

        Args:
            booking: Booking the change was made on
            transition: Result of the state machine
            notify_customer: Admin asked to tell the customer about an edit

        Returns:
            (kind, message) or None when nothing should be sent
        """
        field = transition.field
        label = FIELD_LABELS.get(field, field)
        reference = booking.reference_id
        booking_url = self.booking_url(reference)
        stored_value = get_path(transition.document, field)

        if transition.actor.is_admin:
            if isinstance(transition.action, Approve):
                if not has_value(stored_value):
                    return None
                body = self._value_block(stored_value)
                return self.FIELD_APPROVED, self._customer_message(
                    booking,
                    subject=f"Breyting samþykkt á bókun {reference} - {label}",
                    html_body=self._render_booking_email(
                        "Breyting samþykkt", reference, label, body, "Skoða bókun", booking_url
                    ),
                )

            if isinstance(transition.action, Reject):
                body = (
                    "<p>Breytingin sem þú sendir inn hefur verið hafnað. "
                    "Vinsamlegast hafðu samband ef þú hefur spurningar.</p>"
                )
                return self.FIELD_REJECTED, self._customer_message(
                    booking,
                    subject=f"Breyting hafnað á bókun {reference} - {label}",
                    html_body=self._render_booking_email(
                        "Breyting hafnað", reference, label, body, "Skoða bókun", booking_url
                    ),
                )

            if isinstance(transition.action, Edit) and notify_customer and has_value(stored_value):
                body = self._value_block(stored_value)
                return self.FIELD_UPDATED, self._customer_message(
                    booking,
                    subject=f"Uppfærsla á bókun {reference} - {label}",
                    html_body=self._render_booking_email(
                        "Uppfærsla á bókun", reference, label, body, "Skoða bókun", booking_url
                    ),
                )
            return None

        if not has_value(stored_value):
            return None

        contact_name = self._contact_name(booking)
        body = (
            f"<p><strong>Frá:</strong> {html.escape(transition.actor.email or '')}</p>"
            f"{self._value_block(transition.value)}"
            '<p style="color: #d97706; font-weight: bold;">⚠️ Þessi breyting þarf samþykki</p>'
        )
        return self.FIELD_NEEDS_APPROVAL, EmailMessage(
            sender=f"WL - {contact_name} <{settings.email_from_address}>",
            to=settings.venue_inbox,
            reply_to=transition.actor.email or booking.contact_email,
            subject=(
                f"WL - {contact_name} - Ný uppfærsla á bókun {reference} - {label} (þarf samþykki)"
            ),
            html=self._render_booking_email(
                "Ný uppfærsla á bókun",
                reference,
                label,
                body,
                "Skoða og samþykkja bókun",
                booking_url,
            ),
        )

    async def notify_field_change(
        self,
        booking: Any,
        transition: FieldTransition,
        notify_customer: bool = False,
    ) -> NotificationResult:
        """Send the email belonging to a field transition, if any."""
        try:
            selected = self.build_field_notification(booking, transition, notify_customer)
        except Exception as e:
            logger.exception(f"Could not build field notification for {booking.reference_id}")
            return NotificationResult(status=NotificationResult.FAILED, error=str(e))

        if selected is None:
            return NotificationResult.nothing_to_send()
        kind, message = selected
        return await self.deliver(kind, message)

    # ==================== BOOKING COMMENTS ====================

    async def notify_comment(
        self,
        booking: Any,
        section: str,
        comment: str,
        author_email: str | None,
        author_is_admin: bool,
        notify_customer: bool = False,
        is_internal: bool = False,
    ) -> NotificationResult:
        """Tell the other party about a new booking comment."""
        reference = booking.reference_id
        label = SECTION_LABELS.get(section, section)
        booking_url = self.booking_url(reference)
        body = self._value_block(comment)

        if author_is_admin:
            if not notify_customer or is_internal:
                return NotificationResult.nothing_to_send()
            message = self._customer_message(
                booking,
                subject=f"Uppfærsla á bókun {reference} - {label}",
                html_body=self._render_booking_email(
                    "Ný athugasemd á bókun", reference, label, body, "Skoða bókun", booking_url
                ),
            )
            return await self.deliver(self.COMMENT_TO_CUSTOMER, message)

        contact_name = self._contact_name(booking)
        body = f"<p><strong>Frá:</strong> {html.escape(author_email or '')}</p>{body}"
        message = EmailMessage(
            sender=f"WL - {contact_name} <{settings.email_from_address}>",
            to=settings.venue_inbox,
            reply_to=author_email,
            subject=f"WL - {contact_name} - Ný athugasemd á bókun {reference} - {label}",
            html=self._render_booking_email(
                "Ný athugasemd á bókun", reference, label, body, "Skoða bókun", booking_url
            ),
        )
        return await self.deliver(self.COMMENT_TO_ADMIN, message)

    # ==================== REVIEWS ====================

    async def notify_review(self, review: dict[str, Any], updated: bool = False) -> NotificationResult:
        """Send a review summary to the review inbox."""
        kind = self.REVIEW_UPDATED if updated else self.REVIEW_SUBMITTED
        try:
            message = self._review_message(review, updated)
        except Exception as e:
            logger.exception("Could not build review notification")
            return NotificationResult(status=NotificationResult.FAILED, kind=kind, error=str(e))
        return await self.deliver(kind, message)

    def _review_message(self, review: dict[str, Any], updated: bool) -> EmailMessage:
        def stars(n: Any) -> str | None:
            return f"{n}/5" if isinstance(n, int) else None

        rows: list[tuple[str, Any]] = [
            ("Overall", f"{review.get('overall_stars')}★"),
            ("Recommend", f"{review.get('recommend_score')}/10"),
        ]
        optional_rows = [
            ("Segment", review.get("segment")),
            ("Locale", review.get("locale")),
            ("Booking & communication", stars(review.get("booking_communication_stars"))),
            ("Staff service", stars(review.get("staff_service_stars"))),
            ("Cleanliness", stars(review.get("space_cleanliness_stars"))),
            ("Improve", review.get("improve_one_thing")),
            ("What went wrong", review.get("low_satisfaction_details")),
            ("Follow-up name", review.get("follow_up_name")),
            ("Follow-up contact", review.get("follow_up_contact")),
            ("Ambience / vibe", stars(review.get("ambience_vibe_stars"))),
            ("Tech & equipment", stars(review.get("tech_equipment_stars"))),
            ("Flow on the day", stars(review.get("flow_on_the_day_stars"))),
            ("Value for money", stars(review.get("value_for_money_stars"))),
            ("Best part", review.get("best_part")),
        ]
        for label, value in optional_rows:
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            rows.append((label, value))

        scores = f"{review.get('overall_stars')}★, {review.get('recommend_score')}/10"
        if updated:
            subject = f"White Lotus review updated: {scores}"
            title = "Review updated"
        else:
            subject = f"New White Lotus review: {scores}"
            title = "New review submitted"

        html_rows = ""
        for label, value in rows:
            cell = html.escape(str(value)).replace("\n", "<br/>")
            html_rows += f"""
            <tr>
                <td style="padding: 10px 12px; border-top: 1px solid #eee; font-weight: 600; width: 220px;">{html.escape(label)}</td>
                <td style="padding: 10px 12px; border-top: 1px solid #eee; color: #333;">{cell}</td>
            </tr>"""
        admin_link = f"{settings.public_base_url}/admin/reviews"
        review_id = html.escape(str(review.get("id")))

        body = f"""
        <div style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.45;">
            <h2 style="margin: 0 0 12px; color: #111;">{title}</h2>
            <table style="border-collapse: collapse; width: 100%; max-width: 720px; border: 1px solid #eee;">
                {html_rows}
            </table>
            <p style="margin: 16px 0 0;">
                <a href="{admin_link}"
                   style="display: inline-block; padding: 10px 14px; border-radius: 10px;
                          background: #0f766e; color: #fff; text-decoration: none; font-weight: 700;">
                    Open Admin Reviews
                </a>
            </p>
            <p style="margin: 12px 0 0; color: #888; font-size: 12px;">Review ID: {review_id}</p>
        </div>
        """
        return EmailMessage(
            sender=self._venue_sender(),
            to=settings.review_inbox,
            subject=subject,
            html=body,
        )

    # ==================== HELPERS ====================

    @staticmethod
    def booking_url(reference_id: str) -> str:
        return f"{settings.public_base_url}/whitelotus/booking/{reference_id}"

    @staticmethod
    def _venue_sender() -> str:
        return f"{settings.email_from_name} <{settings.email_from_address}>"

    @staticmethod
    def _contact_name(booking: Any) -> str:
        return booking.contact_name or booking.contact_email or "Óþekkt"

    def _customer_message(self, booking: Any, subject: str, html_body: str) -> EmailMessage:
        return EmailMessage(
            sender=self._venue_sender(),
            to=booking.contact_email,
            reply_to=settings.venue_inbox,
            subject=subject,
            html=html_body,
        )

    @staticmethod
    def _value_block(value: Any) -> str:
        """Render a stored value as a grey pre-wrapped block."""
        if isinstance(value, str):
            text = value
        else:
            text = json.dumps(value, ensure_ascii=False, indent=2)
        return (
            '<div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0;">'
            f'<p style="margin: 0; white-space: pre-wrap;">{html.escape(text)}</p>'
            "</div>"
        )

    def _render_booking_email(
        self,
        title: str,
        reference: str,
        label: str,
        body_html: str,
        link_text: str,
        booking_url: str,
    ) -> str:
        """Generate the shared booking email layout.

        Args:
            title: Heading
            reference: Booking reference id
            label: Field or section label
            body_html: Pre-rendered (escaped) body
            link_text: CTA button text
            booking_url: CTA button URL

        Returns:
            str: HTML email content
        """
        return f"""
        <div style="font-family: Arial, sans-serif; padding: 20px; max-width: 600px; margin: auto;">
            <h2 style="color: {ACCENT_COLOR};">{html.escape(title)}</h2>
            <p><strong>Bókun:</strong> {html.escape(reference)}</p>
            <p><strong>Svið:</strong> {html.escape(label)}</p>
            {body_html}
            <p>
                <a href="{booking_url}"
                   style="background-color: {ACCENT_COLOR}; color: white; padding: 10px 20px;
                          text-decoration: none; border-radius: 5px; display: inline-block;">
                    {html.escape(link_text)}
                </a>
            </p>
        </div>
        """


# Singleton instance
notification_service = NotificationService()


def get_notification_service() -> NotificationService:
    """Dependency hook for the notification service."""
    return notification_service
