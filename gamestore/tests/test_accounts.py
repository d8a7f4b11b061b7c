from decimal import Decimal
from unittest import mock

from django.test import TestCase

from gamestore.application import locks
from gamestore.application.accounts import (
    add_funds,
    close_account,
    register_account,
    update_profile,
)
from gamestore.application.use_cases import create_transaction
from gamestore.domain.exceptions import InvalidArgument, NotFound
from gamestore.domain.money import MONEY_MAX
from gamestore.models import Account, TransactionRecord
from gamestore.repositories import (
    account_exists_by_email,
    account_exists_by_username,
    get_account_by_username,
    list_transactions_by_account,
    search_catalogue_by_genre,
)
from gamestore.tests.helpers import make_account, make_item


class RegisterAccountTest(TestCase):

    def test_registration_stores_account(self):
        account = register_account("ada", "ada@example.com", "hash$abc", "25.50")

        self.assertEqual(account.balance, Decimal("25.50"))
        self.assertTrue(account_exists_by_username("ada"))
        self.assertTrue(account_exists_by_email("ada@example.com"))
        self.assertEqual(get_account_by_username("ada").id, account.id)

    def test_balance_defaults_to_zero(self):
        account = register_account("ada", "ada@example.com", "hash$abc")

        self.assertEqual(account.balance, Decimal("0.00"))

    def test_duplicate_username_is_rejected(self):
        make_account(username="ada")

        with self.assertRaisesMessage(InvalidArgument, "Username already exists"):
            register_account("ada", "other@example.com", "hash$abc")

    def test_duplicate_email_is_rejected(self):
        make_account(email="ada@example.com")

        with self.assertRaisesMessage(InvalidArgument, "Email already exists"):
            register_account("ada", "ada@example.com", "hash$abc")

    def test_blank_fields_and_negative_balance_are_rejected(self):
        with self.assertRaises(InvalidArgument):
            register_account("", "ada@example.com", "hash$abc")
        with self.assertRaises(InvalidArgument):
            register_account("ada", "ada@example.com", None)
        with self.assertRaises(InvalidArgument):
            register_account("ada", "ada@example.com", "hash$abc", "-1.00")

        self.assertEqual(Account.objects.count(), 0)

    def test_balance_beyond_column_size_is_rejected(self):
        with self.assertRaises(InvalidArgument):
            register_account("ada", "ada@example.com", "hash$abc", "1e12")

        self.assertEqual(Account.objects.count(), 0)

    def test_username_taken_after_the_check_is_still_reported_as_duplicate(self):
        make_account(username="ada")

        with mock.patch(
            "gamestore.application.accounts.account_exists_by_username", return_value=False
        ):
            with self.assertRaisesMessage(InvalidArgument, "Username already exists"):
                register_account("ada", "other@example.com", "hash$abc")

        self.assertEqual(Account.objects.filter(username="ada").count(), 1)

    def test_email_taken_after_the_check_is_still_reported_as_duplicate(self):
        make_account(email="ada@example.com")

        with mock.patch(
            "gamestore.application.accounts.account_exists_by_email", return_value=False
        ):
            with self.assertRaisesMessage(InvalidArgument, "Email already exists"):
                register_account("ada", "ada@example.com", "hash$abc")

    def test_unknown_username(self):
        with self.assertRaises(NotFound):
            get_account_by_username("nobody")


class AddFundsTest(TestCase):

    def setUp(self):
        self.account = make_account(balance="10.00")

    def test_credit_increases_balance(self):
        account = add_funds(self.account.id, "15.25")

        self.assertEqual(account.balance, Decimal("25.25"))
        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("25.25"))

    def test_invalid_amounts_are_rejected(self):
        for amount in ["0", "-5.00", "abc", "1.001", "NaN", None]:
            with self.subTest(amount=amount):
                with self.assertRaises(InvalidArgument):
                    add_funds(self.account.id, amount)

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("10.00"))

    def test_trailing_zeros_are_accepted(self):
        account = add_funds(self.account.id, "1.000")

        self.assertEqual(account.balance, Decimal("11.00"))

    def test_huge_amount_is_rejected(self):
        with self.assertRaises(InvalidArgument):
            add_funds(self.account.id, "1e12")

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("10.00"))

    def test_credit_past_the_maximum_balance_is_rejected(self):
        rich = make_account(balance=str(MONEY_MAX - 1))

        with self.assertRaises(InvalidArgument):
            add_funds(rich.id, "1.01")

        rich.refresh_from_db()
        self.assertEqual(rich.balance, MONEY_MAX - 1)
        self.assertEqual(add_funds(rich.id, "1.00").balance, MONEY_MAX)

    def test_unknown_account(self):
        with self.assertRaises(NotFound):
            add_funds(99999, "5.00")

    def test_funds_enable_a_previously_unaffordable_purchase(self):
        item = make_item(price="30.00", lease_price="5.00")

        add_funds(self.account.id, "20.00")
        create_transaction(self.account.id, item.id, "Purchase")

        self.account.refresh_from_db()
        self.assertEqual(self.account.balance, Decimal("0.00"))


class UpdateProfileTest(TestCase):

    def setUp(self):
        self.account = make_account(balance="42.00", username="ada", email="ada@example.com")

    def test_profile_edit_keeps_balance(self):
        account = update_profile(self.account.id, username="lovelace", email="lovelace@example.com")

        self.assertEqual(account.username, "lovelace")
        self.account.refresh_from_db()
        self.assertEqual(self.account.email, "lovelace@example.com")
        self.assertEqual(self.account.balance, Decimal("42.00"))

    def test_taken_username_is_rejected(self):
        make_account(username="babbage")

        with self.assertRaises(InvalidArgument):
            update_profile(self.account.id, username="babbage")

    def test_email_taken_after_the_check_is_reported_as_duplicate(self):
        make_account(email="babbage@example.com")

        with mock.patch(
            "gamestore.application.accounts.account_exists_by_email", return_value=False
        ):
            with self.assertRaisesMessage(InvalidArgument, "Email already exists"):
                update_profile(self.account.id, email="babbage@example.com")

        self.account.refresh_from_db()
        self.assertEqual(self.account.email, "ada@example.com")

    def test_unchanged_values_are_accepted(self):
        account = update_profile(self.account.id, username="ada", email="ada@example.com")

        self.assertEqual(account.username, "ada")


class CloseAccountTest(TestCase):

    def test_closing_account_removes_its_transactions(self):
        account = make_account(balance="50.00")
        other = make_account(balance="50.00")
        item = make_item()
        create_transaction(account.id, item.id, "Lease")
        create_transaction(other.id, item.id, "Lease")

        close_account(account.id)

        self.assertFalse(Account.objects.filter(pk=account.id).exists())
        self.assertEqual(TransactionRecord.objects.count(), 1)
        self.assertEqual(len(list_transactions_by_account(other.id)), 1)

    def test_closing_account_forgets_its_lock(self):
        account = make_account(balance="50.00")
        create_transaction(account.id, make_item().id, "Lease")
        self.assertIn(account.id, locks._account_locks)

        close_account(account.id)

        self.assertNotIn(account.id, locks._account_locks)

    def test_unknown_account(self):
        with self.assertRaises(NotFound):
            close_account(99999)


class CatalogueSearchTest(TestCase):

    def test_genre_substring_match(self):
        rpg = make_item(genre="Action RPG")
        make_item(genre="Puzzle")

        self.assertEqual([item.id for item in search_catalogue_by_genre("RPG")], [rpg.id])

    def test_blank_genre_lists_everything(self):
        make_item(genre="Action RPG")
        make_item(genre="Puzzle")

        self.assertEqual(len(search_catalogue_by_genre("")), 2)
