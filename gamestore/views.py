"""
API Layer — Game Store Endpoints (Django REST Framework)

The views are thin controllers:

- Basic input validation and type coercion
- Delegation to the application use cases and stores
- Translation of domain exceptions into HTTP responses

Error mapping:

- InvalidArgument      -> 400
- NotFound             -> 404 (names the missing entity)
- InsufficientFunds    -> 422 (carries required and available amounts)
- PersistenceFailure   -> 503 (generic message, no storage details)
- InconsistentState    -> 500 (distinct code; needs manual reconciliation)

Clients re-read account state after a transaction; nothing here caches it.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from gamestore import repositories
from gamestore.application.accounts import (
    add_funds,
    close_account,
    register_account,
    update_profile,
)
from gamestore.application.catalogue import (
    add_catalogue_item,
    remove_catalogue_item,
    replace_catalogue_item,
)
from gamestore.application.use_cases import create_transaction
from gamestore.domain.exceptions import (
    InconsistentState,
    InsufficientFunds,
    InvalidArgument,
    NotFound,
    PersistenceFailure,
    StorefrontError,
)
from gamestore.serializers import (
    AccountSerializer,
    CatalogueItemSerializer,
    TransactionRecordSerializer,
)


def error_response(exc):
    if isinstance(exc, InvalidArgument):
        return Response(
            {"error": str(exc), "code": "invalid_argument"},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, NotFound):
        return Response(
            {"error": str(exc), "code": "not_found", "entity": exc.entity},
            status=status.HTTP_404_NOT_FOUND,
        )
    if isinstance(exc, InsufficientFunds):
        return Response(
            {
                "error": "Insufficient funds.",
                "code": "insufficient_funds",
                "required": str(exc.required),
                "available": str(exc.available),
            },
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    if isinstance(exc, InconsistentState):
        return Response(
            {
                "error": "Transaction outcome could not be confirmed. Contact support.",
                "code": "inconsistent_state",
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    if isinstance(exc, PersistenceFailure):
        return Response(
            {"error": "Service temporarily unavailable.", "code": "persistence_failure"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    raise exc


def _parse_id(value, field):
    """Accept a JSON integer or a string of ASCII digits; nothing is truncated."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise InvalidArgument(f"{field} must be an integer.")


class TransactionListView(APIView):
    """
    GET  /api/transactions/  lists every ledger record
    POST /api/transactions/  {accountId, itemId, kind} creates a purchase or lease
    """

    def get(self, request):
        try:
            records = repositories.list_transactions()
        except StorefrontError as exc:
            return error_response(exc)
        return Response(TransactionRecordSerializer(records, many=True).data)

    def post(self, request):
        account_id = request.data.get("accountId")
        item_id = request.data.get("itemId")
        kind = request.data.get("kind")

        if account_id is None or item_id is None or kind is None:
            return Response(
                {"error": "accountId, itemId, and kind are required.", "code": "invalid_argument"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            record = create_transaction(
                _parse_id(account_id, "accountId"),
                _parse_id(item_id, "itemId"),
                kind,
            )
        except StorefrontError as exc:
            return error_response(exc)

        return Response(
            TransactionRecordSerializer(record).data,
            status=status.HTTP_201_CREATED,
        )


class TransactionDetailView(APIView):
    def get(self, request, record_id):
        try:
            record = repositories.get_transaction_record(record_id)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(TransactionRecordSerializer(record).data)

    def delete(self, request, record_id):
        try:
            repositories.delete_transaction_record(record_id)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AccountTransactionsView(APIView):
    def get(self, request, account_id):
        try:
            repositories.get_account(account_id)
            records = repositories.list_transactions_by_account(account_id)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(TransactionRecordSerializer(records, many=True).data)


class AccountListView(APIView):
    """
    GET  /api/accounts/  lists every account
    POST /api/accounts/  registers a new account
    """

    def get(self, request):
        try:
            accounts = repositories.list_accounts()
        except StorefrontError as exc:
            return error_response(exc)
        return Response(AccountSerializer(accounts, many=True).data)

    def post(self, request):
        try:
            account = register_account(
                request.data.get("username"),
                request.data.get("email"),
                request.data.get("passwordHash"),
                request.data.get("balance", "0.00"),
            )
        except StorefrontError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)


class AccountDetailView(APIView):
    def get(self, request, account_id):
        try:
            account = repositories.get_account(account_id)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data)

    def patch(self, request, account_id):
        if "balance" in request.data:
            return Response(
                {"error": "balance cannot be edited; use the funds endpoint.", "code": "invalid_argument"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            account = update_profile(
                account_id,
                username=request.data.get("username"),
                email=request.data.get("email"),
            )
        except StorefrontError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data)

    def delete(self, request, account_id):
        try:
            close_account(account_id)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AccountByUsernameView(APIView):
    def get(self, request, username):
        try:
            account = repositories.get_account_by_username(username)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data)


class AccountFundsView(APIView):
    """POST /api/accounts/<id>/funds/ with {amount} credits the balance."""

    def post(self, request, account_id):
        amount = request.data.get("amount")
        if amount is None:
            return Response(
                {"error": "amount is required.", "code": "invalid_argument"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            account = add_funds(account_id, amount)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(AccountSerializer(account).data)


class CatalogueListView(APIView):
    """
    GET  /api/catalogue/?genre=...  lists items whose genre contains the filter
    POST /api/catalogue/            adds an item; the store assigns its id
    """

    def get(self, request):
        try:
            items = repositories.search_catalogue_by_genre(request.query_params.get("genre", ""))
        except StorefrontError as exc:
            return error_response(exc)
        return Response(CatalogueItemSerializer(items, many=True).data)

    def post(self, request):
        try:
            item = add_catalogue_item(request.data)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(CatalogueItemSerializer(item).data, status=status.HTTP_201_CREATED)


class CatalogueDetailView(APIView):
    def get(self, request, item_id):
        try:
            item = repositories.get_catalogue_item(item_id)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(CatalogueItemSerializer(item).data)

    def put(self, request, item_id):
        try:
            item = replace_catalogue_item(item_id, request.data)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(CatalogueItemSerializer(item).data)

    def delete(self, request, item_id):
        try:
            remove_catalogue_item(item_id)
        except StorefrontError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
