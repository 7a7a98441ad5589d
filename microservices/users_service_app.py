"""
Users Microservice (local development target for the batch submitter).

- POST /api/users, GET /api/users (birth-date range + paging),
  GET/PUT/DELETE /api/users/{id},
  PATCH /api/users/{id}/email, PATCH/DELETE /api/users/{id}/address
- Minimum age from settings.USER_MIN_AGE
- In-memory storage only
- Run: uvicorn microservices.users_service_app:app --host 0.0.0.0 --port 8080
  or:  python -m microservices.users_service_app
"""
import logging
import math
import re
from datetime import date
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.settings import settings
from core.exception_handlers import register_exception_handlers
from core.logging import configure_logging, request_logging_middleware
from models.schemas import UserInfo, UserPage
from models.user import Address

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

DEFAULT_PAGE_SIZE = 20

app = FastAPI(title="Users Microservice", version="0.2")
register_exception_handlers(app)
app.middleware("http")(request_logging_middleware)

# ---------------- In-memory stores ---------------- #

# id -> UserInfo
USERS: dict[int, UserInfo] = {}

# email -> id, phone -> id (both unique)
EMAIL_INDEX: dict[str, int] = {}
PHONE_INDEX: dict[str, int] = {}

_next_id = 1

# ---------------- Models ---------------- #

def _check_email(v: str) -> str:
    if not EMAIL_PATTERN.match(v):
        raise ValueError("invalid email")
    return v


class UserForm(BaseModel):
    """Create/update payload; same JSON shape the submitter sends."""
    model_config = ConfigDict(populate_by_name=True)

    email: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    birth_date: date = Field(alias="birthDate")
    address: Optional[Address] = None
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("birth_date")
    @classmethod
    def in_past(cls, v: date) -> date:
        if v >= date.today():
            raise ValueError("must be a date in the past")
        return v

    @field_validator("phone")
    @classmethod
    def empty_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class UpdateEmailForm(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return _check_email(v)

# ---------------- Utils ---------------- #

def reset_store() -> None:
    """Drop all stored users (tests / dev restarts)."""
    global _next_id
    USERS.clear()
    EMAIL_INDEX.clear()
    PHONE_INDEX.clear()
    _next_id = 1


def age_in_years(birth_date: date, today: Optional[date] = None) -> int:
    """Full years between birth_date and today."""
    today = today or date.today()
    had_birthday = (today.month, today.day) >= (birth_date.month, birth_date.day)
    return today.year - birth_date.year - (0 if had_birthday else 1)


def assert_age_is_legal(birth_date: date) -> None:
    required = settings.USER_MIN_AGE
    if age_in_years(birth_date) < required:
        raise HTTPException(status_code=400, detail=f"Users age must be greater than or equal to {required}")


def assert_email_not_taken(email: str) -> None:
    if email in EMAIL_INDEX:
        raise HTTPException(status_code=409, detail="User with this email already registered")


def assert_phone_not_taken(phone: Optional[str], user_id: Optional[int] = None) -> None:
    if phone and PHONE_INDEX.get(phone, user_id) != user_id:
        raise HTTPException(status_code=409, detail="User with this phone already registered")


def get_user_or_404(user_id: int) -> UserInfo:
    user = USERS.get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail=f"User with id {user_id} was not found")
    return user


def _store(user: UserInfo, previous: Optional[UserInfo] = None) -> UserInfo:
    if previous:
        EMAIL_INDEX.pop(previous.email, None)
        if previous.phone:
            PHONE_INDEX.pop(previous.phone, None)
    USERS[user.id] = user
    EMAIL_INDEX[user.email] = user.id
    if user.phone:
        PHONE_INDEX[user.phone] = user.id
    return user


def _page_param(raw: Optional[str], default: int, minimum: int) -> int:
    # unparsable or out-of-range paging values fall back to the default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default

# ---------------- Routes ---------------- #

@app.get("/health")
async def health():
    return {"service": "users", "status": "ok"}


@app.post("/api/users", status_code=201, response_model=UserInfo)
async def register_user(form: UserForm):
    global _next_id
    assert_age_is_legal(form.birth_date)
    assert_email_not_taken(form.email)
    assert_phone_not_taken(form.phone)

    user = UserInfo(
        id=_next_id,
        email=form.email,
        first_name=form.first_name,
        last_name=form.last_name,
        birth_date=form.birth_date.isoformat(),
        address=form.address,
        phone=form.phone,
    )
    _next_id += 1
    _store(user)
    logger.info("[users] Registered user id=%s email=%s", user.id, user.email)
    return user


@app.get("/api/users", response_model=UserPage)
async def get_all(
    from_: Optional[date] = Query(None, alias="from"),
    to: Optional[date] = Query(None),
    page: Optional[str] = Query(None),
    size: Optional[str] = Query(None),
):
    if from_ and to and from_ > to:
        raise HTTPException(status_code=400, detail="From date must be before to date")

    users = sorted(USERS.values(), key=lambda u: u.id)
    if from_ or to:
        users = [
            u for u in users
            if (from_ is None or date.fromisoformat(u.birth_date) >= from_)
            and (to is None or date.fromisoformat(u.birth_date) <= to)
        ]

    page_number = _page_param(page, 0, 0)
    page_size = _page_param(size, DEFAULT_PAGE_SIZE, 1)
    start = page_number * page_size
    return UserPage(
        content=users[start:start + page_size],
        page=page_number,
        size=page_size,
        total_elements=len(users),
        total_pages=math.ceil(len(users) / page_size),
    )


@app.get("/api/users/{user_id}", response_model=UserInfo)
async def get_by_id(user_id: int):
    return get_user_or_404(user_id)


@app.put("/api/users/{user_id}", response_model=UserInfo)
async def update_by_id(user_id: int, form: UserForm):
    existing = get_user_or_404(user_id)

    # age and email are only re-checked when they change
    birth_date = form.birth_date.isoformat()
    if birth_date != existing.birth_date:
        assert_age_is_legal(form.birth_date)
    if form.email != existing.email:
        assert_email_not_taken(form.email)
    assert_phone_not_taken(form.phone, user_id)

    updated = existing.model_copy(update={
        "email": form.email,
        "first_name": form.first_name,
        "last_name": form.last_name,
        "birth_date": birth_date,
        "address": form.address,
        "phone": form.phone,
    })
    logger.info("[users] Updated user id=%s", user_id)
    return _store(updated, previous=existing)


@app.patch("/api/users/{user_id}/email", response_model=UserInfo)
async def update_email(user_id: int, form: UpdateEmailForm):
    assert_email_not_taken(form.email)
    existing = get_user_or_404(user_id)
    logger.info("[users] Updated email of user id=%s", user_id)
    return _store(existing.model_copy(update={"email": form.email}), previous=existing)


@app.patch("/api/users/{user_id}/address", response_model=UserInfo)
async def update_address(user_id: int, address: Address):
    existing = get_user_or_404(user_id)
    return _store(existing.model_copy(update={"address": address}), previous=existing)


@app.delete("/api/users/{user_id}/address", status_code=204)
async def delete_address(user_id: int):
    existing = get_user_or_404(user_id)
    _store(existing.model_copy(update={"address": None}), previous=existing)
    return Response(status_code=204)


@app.delete("/api/users/{user_id}", status_code=204)
async def delete_by_id(user_id: int):
    user = get_user_or_404(user_id)
    del USERS[user_id]
    EMAIL_INDEX.pop(user.email, None)
    if user.phone:
        PHONE_INDEX.pop(user.phone, None)
    logger.info("[users] Deleted user id=%s", user_id)
    return Response(status_code=204)


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(app, host=settings.USERS_SERVICE_HOST, port=settings.USERS_SERVICE_PORT)
