"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add commit_gate/ to Python path so `from commitgate.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "commit_gate"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

import pytest

os.environ["COMMITGATE_DEV_MODE"] = "true"

from fakes import make_context, make_user  # noqa: E402


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def context():
    return make_context()
