import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from itertools import count

IdGenerator = Callable[[], str]
Clock = Callable[[], datetime]


def uuid_ids() -> str:
    return str(uuid.uuid4())


def new_invite_code() -> str:
    return uuid.uuid4().hex[:8].upper()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SequentialIds:

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self._counter = count(1)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
