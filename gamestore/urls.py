from django.urls import path

from .views import (
    AccountByUsernameView,
    AccountDetailView,
    AccountFundsView,
    AccountListView,
    AccountTransactionsView,
    CatalogueDetailView,
    CatalogueListView,
    TransactionDetailView,
    TransactionListView,
)

urlpatterns = [
    path("transactions/", TransactionListView.as_view(), name="transaction-list"),
    path("transactions/<int:record_id>/", TransactionDetailView.as_view(), name="transaction-detail"),
    path("accounts/", AccountListView.as_view(), name="account-list"),
    path("accounts/<int:account_id>/", AccountDetailView.as_view(), name="account-detail"),
    path("accounts/<int:account_id>/funds/", AccountFundsView.as_view(), name="account-funds"),
    path(
        "accounts/<int:account_id>/transactions/",
        AccountTransactionsView.as_view(),
        name="account-transactions",
    ),
    path("accounts/by-username/<str:username>/", AccountByUsernameView.as_view(), name="account-by-username"),
    path("catalogue/", CatalogueListView.as_view(), name="catalogue-list"),
    path("catalogue/<int:item_id>/", CatalogueDetailView.as_view(), name="catalogue-detail"),
]
