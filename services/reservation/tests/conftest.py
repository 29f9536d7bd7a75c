import json
import os
from decimal import Decimal
from typing import Callable, Dict, Generator, Optional

os.environ["DATABASE_URL"] = "sqlite:///./test_reservation.db"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ALGORITHM"] = "HS256"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Field  # noqa: E402

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def make_token(user_id: int, role: str) -> str:
    return jwt.encode({"sub": str(user_id), "role": role}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def auth_header(user_id: int, role: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


def weekly_schedule(open_time: str = "08:00", close_time: str = "23:00", closed=()) -> str:
    return json.dumps(
        {
            day: {"open": open_time, "close": close_time, "enabled": day not in closed}
            for day in WEEKDAYS
        }
    )


@pytest.fixture(autouse=True, scope="function")
def _create_test_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def player_headers() -> Dict[str, str]:
    return auth_header(1, "player")


@pytest.fixture()
def other_player_headers() -> Dict[str, str]:
    return auth_header(2, "player")


@pytest.fixture()
def owner_headers() -> Dict[str, str]:
    return auth_header(10, "owner")


@pytest.fixture()
def admin_headers() -> Dict[str, str]:
    return auth_header(99, "admin")


@pytest.fixture()
def make_field(db_session) -> Callable[..., Field]:
    def _make_field(
        *,
        price_per_hour: Decimal = Decimal("50.00"),
        working_hours: Optional[str] = None,
        id_owner: int = 10,
        city: str = "Baku",
        sport_type: str = "football",
    ) -> Field:
        field = Field(
            field_name="Central Arena",
            sport_type=sport_type,
            city=city,
            address="28 May street",
            price_per_hour=price_per_hour,
            working_hours=working_hours,
            id_owner=id_owner,
        )
        db_session.add(field)
        db_session.commit()
        db_session.refresh(field)
        return field

    return _make_field
