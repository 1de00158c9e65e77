"""
In-memory user store.

The store keeps users in insertion order for the lifetime of the process.
A single lock serialises readers and writers so that the uniqueness of ids
and the ordering hold when requests are dispatched concurrently.
"""
import threading
from typing import Iterable, List, Optional

from errors import InternalFault
from models import User, seed_users


class UserStore:

    def __init__(self, users: Optional[Iterable[User]] = None):
        self._lock = threading.Lock()
        self._users: List[User] = []
        for user in users or ():
            self.append(user)

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def list_all(self) -> List[User]:
        """Return a snapshot of every user, in insertion order."""
        with self._lock:
            return list(self._users)

    def delete_by_id(self, user_id: str) -> bool:
        """Remove the user with ``user_id``. Returns False when nothing matched."""
        with self._lock:
            index = next((i for i, u in enumerate(self._users) if u.id == user_id), None)
            if index is None:
                return False
            del self._users[index]
            return True

    def append(self, user: User) -> None:
        # No re-validation here, the record is expected to be complete.
        with self._lock:
            if any(u.id == user.id for u in self._users):
                raise InternalFault(f"Duplicate user id {user.id}")
            self._users.append(user)


def seeded_store() -> UserStore:
    return UserStore(seed_users())
