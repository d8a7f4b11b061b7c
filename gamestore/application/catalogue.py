"""
Application Use Cases — Catalogue maintenance

Adding, replacing and removing catalogue items. Price changes apply to
transactions created afterwards only; ledger records keep the amount charged
at the time.
"""

import logging
from datetime import date

from gamestore.domain.exceptions import InvalidArgument
from gamestore.domain.money import parse_money
from gamestore.models import CatalogueItem
from gamestore.repositories import (
    delete_catalogue_item,
    save_catalogue_item,
    update_catalogue_item,
)

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("title", "genre", "developer", "description")


def _parse_release_date(value):
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidArgument("releaseDate is required")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidArgument("releaseDate must be an ISO date (YYYY-MM-DD)")


def parse_item_fields(data):
    """Validate a full item payload (wire names) into model field values."""
    fields = {}
    for field in TEXT_FIELDS:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgument(f"{field} is required")
        fields[field] = value.strip()

    fields["release_date"] = _parse_release_date(data.get("releaseDate"))
    fields["price"] = parse_money(data.get("price"), field="price")
    fields["lease_price"] = parse_money(data.get("leasePrice"), field="leasePrice")
    return fields


def add_catalogue_item(data):
    if data.get("id") is not None:
        raise InvalidArgument("id is assigned by the store and must not be supplied")
    item = save_catalogue_item(CatalogueItem(**parse_item_fields(data)))
    logger.info("Catalogue item added: id=%s title=%s", item.pk, item.title)
    return item


def replace_catalogue_item(item_id, data):
    """Overwrite every field of an item. Existing ledger amounts are unchanged."""
    item = update_catalogue_item(item_id, **parse_item_fields(data))
    logger.info(
        "Catalogue item updated: id=%s price=%s lease_price=%s",
        item.pk, item.price, item.lease_price,
    )
    return item


def remove_catalogue_item(item_id):
    delete_catalogue_item(item_id)
    logger.info("Catalogue item removed: id=%s", item_id)
