"""Shared fixtures: a throwaway SQLite database per test, an HTTP client bound
to the app, and an email client that records instead of sending."""

import os

os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"

from typing import Any  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from app.core.exceptions import NotificationError  # noqa: E402
from app.core.security import create_session_token  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Booking, EventFeedback  # noqa: E402
from app.services.notification_service import (  # noqa: E402
    EmailMessage,
    NotificationService,
    ResendEmailClient,
    get_notification_service,
)

ADMIN_EMAIL = "team@whitelotus.is"
CUSTOMER_EMAIL = "jon@example.is"


class RecordingEmailClient(ResendEmailClient):
    """Email client that keeps messages in memory, or fails on demand."""

    def __init__(self) -> None:
        super().__init__(api_key="test-key", api_url="https://email.test/emails", timeout=1.0)
        self.sent: list[EmailMessage] = []
        self.fail = False

    async def send(self, message: EmailMessage) -> str | None:
        if self.fail:
            raise NotificationError("Email provider answered 503: unavailable")
        self.sent.append(message)
        return f"msg-{len(self.sent)}"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'whitelotus.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def email_client() -> RecordingEmailClient:
    return RecordingEmailClient()


@pytest.fixture
def notifier(email_client) -> NotificationService:
    return NotificationService(email_client)


@pytest.fixture
async def client(session_factory, notifier):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_service] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(email: str = ADMIN_EMAIL, role: str = "admin") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_session_token(email, role=role)}"}

    return _headers


@pytest.fixture
def make_booking(session_factory):
    async def _make(
        reference_id: str = "jon-14-03",
        contact_email: str = CUSTOMER_EMAIL,
        contact_name: str | None = "Jón Jónsson",
        status: str = "pending",
        booking_data: dict[str, Any] | None = None,
    ) -> Booking:
        async with session_factory() as session:
            booking = Booking(
                reference_id=reference_id,
                contact_email=contact_email,
                contact_name=contact_name,
                status=status,
                booking_data=booking_data if booking_data is not None else {},
            )
            session.add(booking)
            await session.commit()
            await session.refresh(booking)
            return booking

    return _make


@pytest.fixture
def load_booking(session_factory):
    async def _load(reference_id: str = "jon-14-03") -> Booking:
        async with session_factory() as session:
            result = await session.execute(
                select(Booking).where(Booking.reference_id == reference_id)
            )
            return result.scalar_one()

    return _load


@pytest.fixture
def load_review(session_factory):
    async def _load(review_id) -> EventFeedback:
        async with session_factory() as session:
            result = await session.execute(
                select(EventFeedback).where(EventFeedback.id == UUID(str(review_id)))
            )
            return result.scalar_one()

    return _load
