"""Shared helpers for tests: in-memory SQLite store, seeded roles, recording mailer, API client."""

from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Role
from app.services.mailer import MailDispatchError

DEFAULT_ROLES = ("USER", "ADMIN")


def make_engine(url: str = "sqlite://") -> Engine:
    """SQLite engine with the schema created and default roles seeded."""
    if url == "sqlite://":
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        # Sessions hop between the event loop and threadpool workers.
        engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine)
    with factory() as db:
        db.add_all([Role(role_name=name) for name in DEFAULT_ROLES])
        db.commit()
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingMailer:
    """Stands in for SmtpMailer; remembers every OTP or fails on demand."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, str]] = []

    async def send_otp(self, email: str, otp: str) -> None:
        if self.fail:
            raise MailDispatchError("SMTP unavailable")
        self.sent.append((email, otp))

    def last_otp_for(self, email: str) -> str:
        return [otp for to, otp in self.sent if to == email][-1]


def make_client(
    session_factory: sessionmaker[Session],
    mailer: RecordingMailer,
) -> TestClient:
    """TestClient over the real app with store and mailer dependencies overridden."""
    from app.api.auth import get_mailer
    from app.core.database import get_db
    from app.main import app

    def _get_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    return TestClient(app)


def clear_overrides() -> None:
    from app.main import app

    app.dependency_overrides.clear()
