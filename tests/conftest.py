"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - api/       : HTTP contract tests (ASGI app, services on mock repositories)
    - component/ : Service tests (mocked repositories)
    - unit/      : Unit tests (pure functions and models, no I/O)
"""
import os
import sys

import pytest

# Configuration is read at import time; pin the test environment first
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.fixtures import (
    make_admin,
    make_auth_user,
    make_store_staff,
    make_user_id,
)


@pytest.fixture
def admin_user():
    return make_admin()


@pytest.fixture
def manager_user():
    from core.jwt_manager import UserRole
    return make_auth_user(role=UserRole.MANAGER)


@pytest.fixture
def coordinator_user():
    from core.jwt_manager import UserRole
    return make_auth_user(role=UserRole.COORDINATOR)


@pytest.fixture
def store_staff_user():
    """Store staff assigned to store 1"""
    return make_store_staff(store_id=1)


@pytest.fixture
def user_id():
    return make_user_id()
