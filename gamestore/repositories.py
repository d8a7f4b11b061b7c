"""
Stores — thin data access over the ORM models.

Account Store, Catalogue Store and Transaction Ledger operations used by the
application layer and the views. Missing rows surface as NotFound, database
errors as PersistenceFailure.

Reads are idempotent, so a transient OperationalError/InterfaceError is
retried with exponential backoff a bounded number of times. Inside an open
database transaction a failed query poisons the transaction, so there the
error is reported immediately. Writes are never retried.
"""

import logging
import time

from django.conf import settings
from django.db import (
    DatabaseError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    transaction,
)
from django.db.models import ProtectedError

from gamestore.domain.exceptions import InvalidArgument, NotFound, PersistenceFailure
from gamestore.models import Account, CatalogueItem, TransactionRecord

logger = logging.getLogger(__name__)


def _retry_settings():
    config = getattr(settings, "GAMESTORE", {})
    return config.get("READ_RETRY_ATTEMPTS", 3), config.get("READ_RETRY_BACKOFF", 0.05)


def run_read(operation, description):
    """Run a read-only ``operation`` with bounded retry on transient errors."""
    attempts, backoff_base = _retry_settings()
    attempts = max(1, attempts)
    for attempt in range(attempts):
        try:
            return operation()
        except (OperationalError, InterfaceError) as exc:
            if transaction.get_connection().in_atomic_block or attempt >= attempts - 1:
                logger.error("Read failed: %s (%s)", description, exc)
                raise PersistenceFailure(f"Could not read {description}") from exc
            logger.warning(
                "Retrying read: %s attempt=%s error=%s", description, attempt + 1, exc
            )
            time.sleep(backoff_base * (2 ** attempt))


def run_write(operation, description):
    """Run a write ``operation`` once, translating database errors."""
    try:
        return operation()
    except DatabaseError as exc:
        logger.error("Write failed: %s (%s)", description, exc)
        raise PersistenceFailure(f"Could not write {description}") from exc


def _get(model, entity, identifier, **lookup):
    def load():
        try:
            return model.objects.get(**lookup)
        except model.DoesNotExist:
            raise NotFound(entity, identifier)

    return run_read(load, f"{entity} {identifier}")


# Account Store

def get_account(account_id):
    return _get(Account, "account", account_id, pk=account_id)


def get_account_by_username(username):
    return _get(Account, "account", username, username=username)


def account_exists_by_username(username):
    return run_read(
        lambda: Account.objects.filter(username=username).exists(),
        f"username {username}",
    )


def account_exists_by_email(email):
    return run_read(
        lambda: Account.objects.filter(email=email).exists(),
        f"email {email}",
    )


def list_accounts():
    return run_read(lambda: list(Account.objects.all()), "accounts")


def save_account(account, update_fields=None):
    """
    Insert or update ``account`` and return it.

    A username or email claimed by a concurrent request trips the UNIQUE
    constraint; that is reported like the up-front duplicate check.
    """
    try:
        with transaction.atomic():
            account.save(update_fields=update_fields)
    except IntegrityError as exc:
        field = "Email" if "email" in str(exc).lower() else "Username"
        logger.warning("Duplicate %s on save: account=%s (%s)", field.lower(), account.pk, exc)
        raise InvalidArgument(f"{field} already exists") from exc
    except DatabaseError as exc:
        logger.error("Write failed: account %s (%s)", account.username, exc)
        raise PersistenceFailure(f"Could not write account {account.username}") from exc
    return account


def delete_account(account_id):
    """Delete an account; its transaction records cascade."""
    account = get_account(account_id)
    run_write(account.delete, f"account {account_id}")


# Catalogue Store

def get_catalogue_item(item_id):
    return _get(CatalogueItem, "item", item_id, pk=item_id)


def list_catalogue():
    return run_read(lambda: list(CatalogueItem.objects.all()), "catalogue")


def save_catalogue_item(item):
    """Insert or update a catalogue item and return it."""
    run_write(item.save, f"item {item.title}")
    return item


def update_catalogue_item(item_id, **fields):
    """Overwrite ``fields`` on an existing item. Ledger amounts are unaffected."""
    item = get_catalogue_item(item_id)
    for name, value in fields.items():
        setattr(item, name, value)
    return save_catalogue_item(item)


def delete_catalogue_item(item_id):
    """Delete an item. Items referenced by ledger records are kept."""
    item = get_catalogue_item(item_id)

    def remove():
        try:
            item.delete()
        except ProtectedError as exc:
            logger.warning("Item %s has transaction records; not deleted", item_id)
            raise InvalidArgument(
                f"Item {item_id} has transaction records and cannot be deleted"
            ) from exc

    run_write(remove, f"item {item_id}")


def search_catalogue_by_genre(genre):
    """Items whose genre contains ``genre``. A blank genre lists everything."""
    if not genre:
        return list_catalogue()
    return run_read(
        lambda: list(CatalogueItem.objects.filter(genre__contains=genre)),
        f"catalogue genre {genre}",
    )


# Transaction Ledger

def save_transaction_record(record):
    """Insert a new record. The store assigns its id."""
    run_write(record.save, f"transaction record for account {record.account_id}")
    return record


def get_transaction_record(record_id):
    return _get(TransactionRecord, "transaction", record_id, pk=record_id)


def list_transactions():
    return run_read(lambda: list(TransactionRecord.objects.all()), "transactions")


def list_transactions_by_account(account_id):
    return run_read(
        lambda: list(TransactionRecord.objects.filter(account_id=account_id)),
        f"transactions for account {account_id}",
    )


def delete_transaction_record(record_id):
    record = get_transaction_record(record_id)
    run_write(record.delete, f"transaction {record_id}")
