from pydantic import Field

from llmrelay.schemas.base import RecordModel

MIN_PASSWORD_LENGTH = 12
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class User(RecordModel):
    id: str
    username: str
    email: str
    password_hash: str
    created: str  # ISO-8601 UTC


class UserCreate(RecordModel):
    username: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class UserUpdate(RecordModel):
    username: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)


class UserResponse(RecordModel):
    id: str
    username: str
    email: str
    created: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, email=user.email, created=user.created)


class LoginRequest(RecordModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(RecordModel):
    user_id: str
