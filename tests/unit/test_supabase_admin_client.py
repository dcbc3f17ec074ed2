"""
Tests for the cached service-role Supabase client.
"""

import pytest

from document_service import supabase_client
from document_service.config import ServiceSettings


@pytest.fixture(autouse=True)
def fresh_client():
    supabase_client.reset_admin_client()
    yield
    supabase_client.reset_admin_client()


def test_returns_none_without_service_key(mocker):
    mocker.patch(
        "document_service.supabase_client.get_settings",
        return_value=ServiceSettings(supabase_url="https://x.supabase.co", supabase_service_role_key=None),
    )
    create = mocker.patch("document_service.supabase_client.create_client")

    assert supabase_client.get_admin_client() is None
    create.assert_not_called()


def test_creates_client_once(mocker):
    mocker.patch(
        "document_service.supabase_client.get_settings",
        return_value=ServiceSettings(supabase_url="https://x.supabase.co/", supabase_service_role_key="key"),
    )
    create = mocker.patch("document_service.supabase_client.create_client")

    first = supabase_client.get_admin_client()
    second = supabase_client.get_admin_client()

    assert first is second
    create.assert_called_once_with("https://x.supabase.co", "key")


def test_reset_drops_cached_client(mocker):
    mocker.patch(
        "document_service.supabase_client.get_settings",
        return_value=ServiceSettings(supabase_url="https://x.supabase.co", supabase_service_role_key="key"),
    )
    create = mocker.patch("document_service.supabase_client.create_client")

    supabase_client.get_admin_client()
    supabase_client.reset_admin_client()
    supabase_client.get_admin_client()

    assert create.call_count == 2
