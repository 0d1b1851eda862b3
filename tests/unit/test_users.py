import pytest

from llmrelay.core.exceptions import ConflictError, NotFoundError
from llmrelay.core.store import USERS
from llmrelay.schemas.users import UserCreate, UserUpdate
from llmrelay.services.users import UserService

PASSWORD = "a-long-enough-password"


@pytest.fixture
def users(store):
    return UserService(store)


@pytest.fixture
def bob(users):
    return users.create_user(UserCreate(username="bob", email="bob@example.com", password=PASSWORD))


class TestUsers:
    def test_password_is_hashed(self, bob, store):
        record = store.load(USERS)[0]
        assert record["passwordHash"].startswith("$2")
        assert PASSWORD not in record.values()

    def test_duplicate_username(self, users, bob):
        with pytest.raises(ConflictError):
            users.create_user(UserCreate(username="bob", email="other@example.com", password=PASSWORD))

    def test_update_password(self, users, bob):
        users.update_user(bob.id, UserUpdate(password="another-long-password"))
        assert users.authenticate("bob", "another-long-password") == bob.id
        assert users.authenticate("bob", PASSWORD) is None

    def test_rename_into_taken_username(self, users, bob):
        carol = users.create_user(UserCreate(username="carol", email="carol@example.com", password=PASSWORD))
        with pytest.raises(ConflictError):
            users.update_user(carol.id, UserUpdate(username="bob"))

    def test_delete(self, users, bob):
        users.delete_user(bob.id)
        with pytest.raises(NotFoundError):
            users.get_user(bob.id)


class TestAuthenticate:
    def test_correct_password(self, users, bob):
        assert users.authenticate("bob", PASSWORD) == bob.id

    def test_wrong_password(self, users, bob):
        assert users.authenticate("bob", "wrong-password!!") is None

    def test_unknown_user(self, users):
        assert users.authenticate("nobody", PASSWORD) is None
