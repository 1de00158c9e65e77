"""
Unit tests for the in-memory user store.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from errors import InternalFault
from models import User
from store import UserStore, seeded_store


def make_user(user_id, username="curler01"):
    return User(
        id=user_id,
        username=username,
        password="abc12345",
        favoriteClub="Park City Curling Club",
    )


@pytest.fixture
def store():
    return seeded_store()


class TestUserStore:

    def test_seeded_with_two_users(self, store):
        assert len(store) == 2
        assert [u.username for u in store.list_all()] == ["sallyStudent", "johnBlocton"]

    def test_append_keeps_order(self, store):
        store.append(make_user("a"))
        store.append(make_user("b"))
        assert [u.id for u in store.list_all()][-2:] == ["a", "b"]

    def test_append_duplicate_id(self, store):
        store.append(make_user("a"))
        with pytest.raises(InternalFault):
            store.append(make_user("a"))
        assert len(store) == 3

    def test_delete_preserves_order(self):
        store = UserStore([make_user("a"), make_user("b"), make_user("c")])
        assert store.delete_by_id("b") is True
        assert [u.id for u in store.list_all()] == ["a", "c"]

    def test_delete_unknown(self, store):
        assert store.delete_by_id("missing") is False
        assert len(store) == 2

    def test_list_all_is_a_snapshot(self, store):
        users = store.list_all()
        users.clear()
        assert len(store) == 2

    def test_stores_are_independent(self):
        first, second = seeded_store(), seeded_store()
        first.delete_by_id("3c8da4d5-1597-46e7-baa1-e402aed70d80")
        assert len(first) == 1
        assert len(second) == 2
