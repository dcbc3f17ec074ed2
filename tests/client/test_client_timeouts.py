"""
Tests for the timeout race used by the direct Supabase path.
"""

import threading
import time

import pytest

from document_client.timeouts import ClientTimeouts, DocumentClientError, DocumentTimeoutError, run_with_timeout


class TestRunWithTimeout:
    def test_returns_result(self):
        assert run_with_timeout(lambda: 42, 1, "too slow") == 42

    def test_propagates_errors(self):
        def fail():
            raise ValueError("bad input")

        with pytest.raises(ValueError, match="bad input"):
            run_with_timeout(fail, 1, "too slow")

    def test_times_out_without_waiting_for_call(self):
        release = threading.Event()

        started = time.monotonic()
        with pytest.raises(DocumentTimeoutError, match="too slow"):
            run_with_timeout(lambda: release.wait(5), 0.05, "too slow")
        elapsed = time.monotonic() - started

        release.set()
        assert elapsed < 2

    def test_timeout_error_is_client_error(self):
        assert issubclass(DocumentTimeoutError, DocumentClientError)


class TestClientTimeouts:
    def test_defaults(self):
        timeouts = ClientTimeouts()

        assert timeouts.list_endpoint == 20
        assert timeouts.upload_endpoint == 60
        assert timeouts.upload_direct == 90
        assert timeouts.remove_direct == 20

    def test_frozen(self):
        with pytest.raises(Exception):
            ClientTimeouts().list_endpoint = 1
