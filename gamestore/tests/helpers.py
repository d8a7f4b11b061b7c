import itertools
from datetime import date
from decimal import Decimal

from gamestore.models import Account, CatalogueItem

_sequence = itertools.count(1)


def make_account(balance="50.00", username=None, email=None):
    n = next(_sequence)
    return Account.objects.create(
        username=username or f"player{n}",
        email=email or f"player{n}@example.com",
        password_hash="pbkdf2_sha256$placeholder",
        balance=Decimal(balance),
    )


def make_item(price="40.00", lease_price="10.00", genre="Action RPG", title=None):
    n = next(_sequence)
    return CatalogueItem.objects.create(
        title=title or f"Game {n}",
        genre=genre,
        developer="Northwind Studios",
        release_date=date(2023, 11, 3),
        price=Decimal(price),
        lease_price=Decimal(lease_price),
        description="A test title.",
    )
