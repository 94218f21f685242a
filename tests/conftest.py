# tests/conftest.py
from __future__ import annotations

import os
import random
from pathlib import Path

import numpy as np
import pytest

from pager_hours.workers import UserRecord, WorkerDirectory


# -----------------------------
# Global, deterministic seeding
# -----------------------------
@pytest.fixture(autouse=True, scope="session")
def _seed_everything() -> None:
    """
    Make tests deterministic across runs. If you need a different seed in a test,
    override locally.
    """
    seed = int(os.environ.get("PYTEST_SEED", "1234"))
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)


# -----------------------------
# Path helpers
# -----------------------------
@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (where pyproject.toml lives)."""
    return Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return Path(__file__).resolve().parent / "fixtures"


# -----------------------------
# User directory fakes
# -----------------------------
class FakeUsers:
    """In-memory user directory that counts lookups."""

    def __init__(self, records: list[UserRecord]) -> None:
        self.records = {r.id: r for r in records}
        self.calls: list[str] = []

    def get_user(self, user_id: str) -> UserRecord:
        self.calls.append(user_id)
        return self.records[user_id]


@pytest.fixture
def users() -> FakeUsers:
    return FakeUsers(
        [
            UserRecord("PBER", "berlin@example.com", "Europe/Berlin", "Bea"),
            UserRecord("PSOF", "sofia@example.com", "Sofia", "Sasho"),
            UserRecord("PLAX", "la@example.com", "America/Los_Angeles", "Lou"),
            UserRecord("PNYC", "ny@example.com", "Eastern Time (US & Canada)", "Nia"),
            UserRecord("PTYO", "tokyo@example.com", "Asia/Tokyo", "Taro"),
        ]
    )


@pytest.fixture
def directory(users: FakeUsers) -> WorkerDirectory:
    return WorkerDirectory(users)
