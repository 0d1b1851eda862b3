import uuid
from datetime import datetime, timezone

import structlog

from llmrelay.core.exceptions import ConflictError, NotFoundError
from llmrelay.core.security import hash_password, verify_password
from llmrelay.core.store import USERS, RecordStore
from llmrelay.schemas.users import User, UserCreate, UserUpdate

logger = structlog.get_logger()


class UserService:
    def __init__(self, store: RecordStore):
        self._store = store

    def list_users(self) -> list[User]:
        return [User.model_validate(r) for r in self._store.load(USERS)]

    def get_user(self, user_id: str) -> User:
        for record in self._store.load(USERS):
            if record.get("id") == user_id:
                return User.model_validate(record)
        raise NotFoundError(f"User '{user_id}' not found.")

    def find_by_username(self, username: str) -> User | None:
        for record in self._store.load(USERS):
            if record.get("username") == username:
                return User.model_validate(record)
        return None

    def create_user(self, data: UserCreate) -> User:
        user = User(
            id=str(uuid.uuid4()),
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            created=datetime.now(timezone.utc).isoformat(),
        )
        with self._store.transaction(USERS) as records:
            if any(r.get("username") == data.username for r in records):
                logger.warning("username_taken", username=data.username)
                raise ConflictError(f"Username '{data.username}' already exists.")
            records.append(user.to_record())
        logger.info("user_created", user_id=user.id, username=user.username)
        return user

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        changes = data.model_dump(exclude_none=True)
        password = changes.pop("password", None)
        if password is not None:
            changes["password_hash"] = hash_password(password)

        with self._store.transaction(USERS) as records:
            for index, record in enumerate(records):
                if record.get("id") != user_id:
                    continue
                if "username" in changes and any(
                    r.get("username") == changes["username"] and r.get("id") != user_id for r in records
                ):
                    raise ConflictError(f"Username '{changes['username']}' already exists.")
                updated = User.model_validate(record).model_copy(update=changes)
                records[index] = updated.to_record()
                break
            else:
                raise NotFoundError(f"User '{user_id}' not found.")

        logger.info("user_updated", user_id=user_id, fields=sorted(changes))
        return updated

    def delete_user(self, user_id: str) -> None:
        with self._store.transaction(USERS) as records:
            remaining = [r for r in records if r.get("id") != user_id]
            if len(remaining) == len(records):
                raise NotFoundError(f"User '{user_id}' not found.")
            records[:] = remaining
        logger.info("user_deleted", user_id=user_id)

    def authenticate(self, username: str, password: str) -> str | None:
        """Return the user id when the password matches, else None."""
        user = self.find_by_username(username)
        if user is None:
            logger.warning("login_unknown_user", username=username)
            return None
        if not verify_password(password, user.password_hash):
            logger.warning("login_password_mismatch", username=username)
            return None
        logger.info("user_login", user_id=user.id)
        return user.id
