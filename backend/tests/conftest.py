import os

# Must be set before carrom_league.database creates its engine.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_SEED_ON_EMPTY", "false")

import pytest

from carrom_league.ids import SequentialIds
from factories import build_tournament


@pytest.fixture()
def ids():
    return SequentialIds("t")


@pytest.fixture()
def tournament(ids):
    return build_tournament(ids=ids)
