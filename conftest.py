"""
EA Foods — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from rest_framework.test import APIClient

from tests.factories import OpsManagerFactory, UserFactory


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Active customer with default password TestPass2026!"""
    return UserFactory()


@pytest.fixture
def ops_user(db):
    """Active operations manager."""
    return OpsManagerFactory()


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as a customer."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def ops_client(ops_user):
    """API client authenticated as an operations manager."""
    client = APIClient()
    client.force_authenticate(user=ops_user)
    return client
