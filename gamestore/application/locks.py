"""
Per-account serialisation of balance mutations.

Every debit and credit for an account runs inside ``account_lock(account_id)``
for its whole read-check-write. Within one process this gives a total order
of balance mutations per account; across processes the same mutations also
take a row lock with select_for_update() and write with a conditional F()
update, so the database remains the final arbiter.

Locks for different accounts are independent.
"""

import threading
from contextlib import contextmanager

_registry_guard = threading.Lock()
_account_locks = {}


def _lock_for(account_id):
    with _registry_guard:
        lock = _account_locks.get(account_id)
        if lock is None:
            lock = _account_locks[account_id] = threading.Lock()
        return lock


@contextmanager
def account_lock(account_id):
    """Hold the mutual-exclusion scope for ``account_id``."""
    lock = _lock_for(account_id)
    with lock:
        yield


def release_account_lock(account_id):
    """Forget the lock of a closed account so the registry does not grow unbounded."""
    with _registry_guard:
        _account_locks.pop(account_id, None)
