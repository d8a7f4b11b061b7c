"""
Application Use Cases — Accounts

Registration, profile edits, crediting funds and closing accounts. Crediting
follows the same per-account locking protocol as the debit in
gamestore.application.use_cases, so a top-up racing a purchase is ordered
with it.
"""

import logging
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.db.models import F

from gamestore.application.locks import account_lock, release_account_lock
from gamestore.domain.exceptions import InvalidArgument, NotFound, PersistenceFailure
from gamestore.domain.money import MONEY_MAX, parse_money
from gamestore.models import Account
from gamestore.repositories import (
    account_exists_by_email,
    account_exists_by_username,
    delete_account,
    get_account,
    save_account,
)

logger = logging.getLogger(__name__)


def _require_text(value, field):
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{field} is required")
    return value.strip()


def _ensure_username_free(username):
    if account_exists_by_username(username):
        logger.warning("Username already exists: %s", username)
        raise InvalidArgument("Username already exists")


def _ensure_email_free(email):
    if account_exists_by_email(email):
        logger.warning("Email already exists: %s", email)
        raise InvalidArgument("Email already exists")


def register_account(username, email, password_hash, balance=Decimal("0.00")):
    username = _require_text(username, "username")
    email = _require_text(email, "email")
    password_hash = _require_text(password_hash, "passwordHash")
    balance = parse_money(balance, field="balance", allow_zero=True)

    _ensure_username_free(username)
    _ensure_email_free(email)

    account = save_account(
        Account(
            username=username,
            email=email,
            password_hash=password_hash,
            balance=balance,
        )
    )
    logger.info("Account registered: id=%s username=%s", account.pk, username)
    return account


def update_profile(account_id, username=None, email=None):
    """Edit username and/or email. The balance is never touched here."""
    account = get_account(account_id)
    fields = []

    if username is not None:
        username = _require_text(username, "username")
        if username != account.username:
            _ensure_username_free(username)
            account.username = username
            fields.append("username")

    if email is not None:
        email = _require_text(email, "email")
        if email != account.email:
            _ensure_email_free(email)
            account.email = email
            fields.append("email")

    if fields:
        save_account(account, update_fields=fields)
        logger.info("Profile updated: account=%s fields=%s", account.pk, fields)
    return account


def add_funds(account_id, amount):
    """
    Credit ``amount`` to an account and return the re-read account.

    The credit is a single F() update under the account lock; it is not
    retried on failure.
    """
    amount = parse_money(amount)
    account = get_account(account_id)

    with account_lock(account.pk):
        try:
            with transaction.atomic():
                try:
                    locked = Account.objects.select_for_update().get(pk=account.pk)
                except Account.DoesNotExist:
                    raise NotFound("account", account_id)
                if locked.balance + amount > MONEY_MAX:
                    raise InvalidArgument(
                        f"Balance would exceed {MONEY_MAX} after adding {amount}"
                    )
                Account.objects.filter(pk=locked.pk).update(balance=F("balance") + amount)
                locked.refresh_from_db(fields=["balance"])
        except DatabaseError as exc:
            logger.error("Credit failed: account=%s amount=%s error=%s", account.pk, amount, exc)
            raise PersistenceFailure("Could not add funds") from exc

    logger.info(
        "Funds added: account=%s amount=%s balance=%s", locked.pk, amount, locked.balance
    )
    return locked


def close_account(account_id):
    delete_account(account_id)
    release_account_lock(account_id)
    logger.info("Account closed: id=%s", account_id)
