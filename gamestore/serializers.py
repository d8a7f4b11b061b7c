"""Output representations for the HTTP API. Field names follow the wire format."""

from rest_framework import serializers

from gamestore.models import Account, CatalogueItem, TransactionRecord


class AccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = Account
        fields = ["id", "username", "email", "balance"]
        read_only_fields = fields


class CatalogueItemSerializer(serializers.ModelSerializer):
    leasePrice = serializers.DecimalField(
        source="lease_price", max_digits=12, decimal_places=2, read_only=True
    )
    releaseDate = serializers.DateField(source="release_date", read_only=True)

    class Meta:
        model = CatalogueItem
        fields = [
            "id",
            "title",
            "genre",
            "developer",
            "releaseDate",
            "price",
            "leasePrice",
            "description",
        ]


class TransactionRecordSerializer(serializers.ModelSerializer):
    accountId = serializers.IntegerField(source="account_id", read_only=True)
    itemId = serializers.IntegerField(source="item_id", read_only=True)
    transactionDate = serializers.DateField(source="transaction_date", read_only=True)
    expiryDate = serializers.DateField(source="expiry_date", read_only=True, allow_null=True)

    class Meta:
        model = TransactionRecord
        fields = [
            "id",
            "accountId",
            "itemId",
            "kind",
            "amount",
            "transactionDate",
            "expiryDate",
        ]
