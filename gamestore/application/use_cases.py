"""
Application Use Case — Purchase / Lease Transactions

create_transaction() is the transaction processor. It validates the request,
prices it, debits the account and appends a ledger record.

Core guarantees provided:

- Fail-fast validation in a fixed order: kind, account, item, balance.
- Per-account serialisation: account_lock() plus select_for_update() make
  the balance check and the debit a single step for each account.
- Race-condition safety: the debit is a conditional UPDATE with a database
  F() expression, so it never drives the balance below zero.
- Atomicity: the debit and the ledger insert run in one transaction.atomic()
  block. If that block fails, the balance is re-read to confirm the rollback;
  a debit that cannot be confirmed as undone raises InconsistentState.
- No idempotency: every call charges and records a new transaction.
"""

import logging

from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from gamestore.application.locks import account_lock
from gamestore.domain.dates import compute_transaction_dates
from gamestore.domain.exceptions import (
    InconsistentState,
    InsufficientFunds,
    InvalidArgument,
    NotFound,
    PersistenceFailure,
)
from gamestore.models import Account, TransactionKind, TransactionRecord
from gamestore.repositories import get_account, get_catalogue_item, save_transaction_record

logger = logging.getLogger(__name__)


def parse_kind(kind):
    if kind not in TransactionKind.values:
        raise InvalidArgument(
            f"kind must be one of {', '.join(TransactionKind.values)}, got {kind!r}"
        )
    return TransactionKind(kind)


def _current_balance(account_id):
    return (
        Account.objects
        .filter(pk=account_id)
        .values_list("balance", flat=True)
        .first()
    )


def _confirm_rolled_back(account_id, item_id, cost, opening_balance, error):
    """
    Check that a failed debit + record unit left the balance untouched.

    Raises PersistenceFailure when the rollback is confirmed and
    InconsistentState otherwise.
    """
    try:
        balance = _current_balance(account_id)
    except DatabaseError:
        balance = None

    if balance is not None and balance == opening_balance:
        logger.error(
            "Transaction rolled back: account=%s item=%s amount=%s error=%s",
            account_id, item_id, cost, error,
        )
        raise PersistenceFailure("Could not record transaction") from error

    logger.critical(
        "RECONCILIATION REQUIRED: account=%s item=%s amount=%s "
        "opening_balance=%s current_balance=%s error=%s",
        account_id, item_id, cost, opening_balance, balance, error,
    )
    raise InconsistentState(account_id, item_id, cost) from error


def create_transaction(account_id, item_id, kind, now=None):
    """
    Charge an account for a purchase or lease of a catalogue item.

    ``now`` is the processor's clock reading; the UTC calendar date of it
    becomes the transaction date. Returns the persisted TransactionRecord.
    """
    kind = parse_kind(kind)
    account = get_account(account_id)
    item = get_catalogue_item(item_id)
    cost = item.cost_for(kind)

    with account_lock(account.pk):
        transaction_date, expiry_date = compute_transaction_dates(
            now or timezone.now(), kind
        )
        opening_balance = None
        debited = False
        try:
            with transaction.atomic():
                # Lock the account row; other processes wait here
                try:
                    locked = Account.objects.select_for_update().get(pk=account.pk)
                except Account.DoesNotExist:
                    raise NotFound("account", account_id)
                opening_balance = locked.balance

                if locked.balance < cost:
                    logger.warning(
                        "Insufficient funds: account=%s item=%s kind=%s required=%s available=%s",
                        account.pk, item.pk, kind, cost, locked.balance,
                    )
                    raise InsufficientFunds(account.pk, cost, locked.balance)

                updated = (
                    Account.objects
                    .filter(pk=account.pk, balance__gte=cost)
                    .update(balance=F("balance") - cost)
                )
                if not updated:
                    available = _current_balance(account.pk)
                    logger.warning(
                        "Conditional debit matched no row: account=%s required=%s available=%s",
                        account.pk, cost, available,
                    )
                    raise InsufficientFunds(account.pk, cost, available)
                debited = True

                record = save_transaction_record(
                    TransactionRecord(
                        account_id=account.pk,
                        item_id=item.pk,
                        kind=kind,
                        amount=cost,
                        transaction_date=transaction_date,
                        expiry_date=expiry_date,
                    )
                )
        except (DatabaseError, PersistenceFailure) as exc:
            if not debited:
                logger.error(
                    "Transaction failed before debit: account=%s item=%s error=%s",
                    account.pk, item.pk, exc,
                )
                raise PersistenceFailure("Could not record transaction") from exc
            _confirm_rolled_back(account.pk, item.pk, cost, opening_balance, exc)

    logger.info(
        "Transaction created: id=%s account=%s item=%s kind=%s amount=%s expiry=%s",
        record.pk, account.pk, item.pk, kind, cost, expiry_date,
    )
    return record
