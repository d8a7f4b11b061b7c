from django.db import models


class TransactionKind(models.TextChoices):
    PURCHASE = "Purchase", "Purchase"
    LEASE = "Lease", "Lease"
