"""
Persistence Models — Game Store (Django ORM)

Three tables back the storefront:

- Account holds the mutable balance. It is the only shared mutable value
  in the transaction path and is protected by a CHECK constraint as well as
  by the locking protocol in gamestore.application.locks.
- CatalogueItem holds purchase and lease prices. The transaction path only
  reads it.
- TransactionRecord is the append-only ledger. Its amount is a snapshot of
  the price at charge time, so later catalogue price changes never rewrite
  history.

Money is stored as DecimalField with two decimal places.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q

from gamestore.domain.kinds import TransactionKind
from gamestore.domain.money import MONEY_DIGITS, MONEY_PLACES


class Account(models.Model):
    """
    A customer account with a non-negative balance.

    The credential hash is stored exactly as supplied by the client.
    """

    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(max_length=254, unique=True)
    password_hash = models.CharField(max_length=255)
    balance = models.DecimalField(
        max_digits=MONEY_DIGITS,
        decimal_places=MONEY_PLACES,
        default=Decimal("0.00"),
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name="account_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"Account {self.id} ({self.username}) - Balance: {self.balance}"


class CatalogueItem(models.Model):
    title = models.CharField(max_length=200)
    genre = models.CharField(max_length=100)
    developer = models.CharField(max_length=200)
    release_date = models.DateField()
    price = models.DecimalField(max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    lease_price = models.DecimalField(max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    description = models.TextField()

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(price__gt=0),
                name="catalogue_item_price_positive",
            ),
            models.CheckConstraint(
                condition=Q(lease_price__gt=0),
                name="catalogue_item_lease_price_positive",
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.genre})"

    def cost_for(self, kind):
        """Price charged for a transaction of ``kind``."""
        if kind == TransactionKind.PURCHASE:
            return self.price
        return self.lease_price


class TransactionRecord(models.Model):
    """
    A single purchase or lease.

    Key decisions:
    - account cascades: closing an account removes its history.
    - item is PROTECTed so a ledger entry never points at a deleted item.
    - expiry_date is NULL for purchases and set for leases; a CHECK
      constraint ties the two together.
    - Records are immutable once created. Only deletion is allowed.
    """

    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    item = models.ForeignKey(
        CatalogueItem,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    kind = models.CharField(max_length=8, choices=TransactionKind.choices)
    amount = models.DecimalField(max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES)
    transaction_date = models.DateField()
    expiry_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(kind=TransactionKind.LEASE, expiry_date__isnull=False)
                    | Q(kind=TransactionKind.PURCHASE, expiry_date__isnull=True)
                ),
                name="transaction_record_expiry_matches_kind",
            ),
        ]

    def __str__(self):
        return f"{self.kind} {self.id} - {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError(f"Transaction record {self.pk} is immutable")
        super().save(*args, **kwargs)
