"""
Timeout budgets and the timeout race used by the direct Supabase path.
"""

import concurrent.futures
from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")


class DocumentClientError(Exception):
    """User-facing failure of a client operation."""


class DocumentTimeoutError(DocumentClientError):
    """A direct Supabase call lost the race against its timeout."""


@dataclass(frozen=True)
class ClientTimeouts:
    """
    Per-operation timeouts in seconds.

    Endpoint timeouts bound the HTTP call to the document service; direct
    timeouts bound the fallback calls straight to Supabase.
    """

    list_endpoint: float = 20
    upload_endpoint: float = 60
    update_endpoint: float = 15
    delete_endpoint: float = 20
    url_endpoint: float = 15

    list_direct: float = 15
    upload_direct: float = 90
    insert_direct: float = 15
    update_direct: float = 15
    remove_direct: float = 20
    delete_direct: float = 15


def run_with_timeout(fn: Callable[[], T], timeout: float, message: str) -> T:
    """
    Run fn in a worker thread and give up after timeout seconds.

    The losing call is abandoned, not cancelled: the worker thread keeps
    running until the SDK call returns on its own.

    Raises:
        DocumentTimeoutError: with message if the timeout elapses first
    """
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    future = executor.submit(fn)
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        raise DocumentTimeoutError(message)
    finally:
        executor.shutdown(wait=False)
