from datetime import date, datetime, timedelta, timezone

from gamestore.domain.kinds import TransactionKind

LEASE_PERIOD_DAYS = 30


def transaction_date_for(reference):
    """Return the UTC calendar date of ``reference``.

    Aware datetimes are converted to UTC, naive datetimes are taken to be UTC
    already, and a plain ``date`` is returned unchanged.
    """
    if isinstance(reference, datetime):
        if reference.tzinfo is not None:
            reference = reference.astimezone(timezone.utc)
        return reference.date()
    if isinstance(reference, date):
        return reference
    raise TypeError(f"Expected a date or datetime, got {type(reference).__name__}")


def compute_transaction_dates(reference, kind):
    """
    Compute ``(transaction_date, expiry_date)`` for a transaction of ``kind``.

    A lease expires LEASE_PERIOD_DAYS calendar days after the transaction
    date. Date arithmetic keeps this independent of month length and DST.
    A purchase never expires, so its expiry date is None.
    """
    transaction_date = transaction_date_for(reference)
    if kind == TransactionKind.LEASE:
        return transaction_date, transaction_date + timedelta(days=LEASE_PERIOD_DAYS)
    if kind == TransactionKind.PURCHASE:
        return transaction_date, None
    raise ValueError(f"Unknown transaction kind: {kind!r}")
