from datetime import date, datetime, timedelta, timezone

from django.test import SimpleTestCase

from gamestore.domain.dates import compute_transaction_dates
from gamestore.domain.kinds import TransactionKind


class ComputeTransactionDatesTest(SimpleTestCase):

    def test_purchase_has_no_expiry(self):
        transaction_date, expiry_date = compute_transaction_dates(
            date(2024, 1, 15), TransactionKind.PURCHASE
        )

        self.assertEqual(transaction_date, date(2024, 1, 15))
        self.assertIsNone(expiry_date)

    def test_lease_expires_thirty_calendar_days_later(self):
        cases = [
            (date(2024, 1, 15), date(2024, 2, 14)),
            (date(2024, 2, 15), date(2024, 3, 16)),
            (date(2023, 2, 15), date(2023, 3, 17)),
            (date(2024, 12, 20), date(2025, 1, 19)),
        ]
        for transaction_date, expected in cases:
            with self.subTest(transaction_date=transaction_date):
                self.assertEqual(
                    compute_transaction_dates(transaction_date, TransactionKind.LEASE),
                    (transaction_date, expected),
                )

    def test_lease_across_dst_change_is_calendar_based(self):
        # 2024-03-10 is the US spring-forward date
        reference = datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc)

        transaction_date, expiry_date = compute_transaction_dates(reference, TransactionKind.LEASE)

        self.assertEqual(transaction_date, date(2024, 3, 9))
        self.assertEqual(expiry_date, date(2024, 4, 8))

    def test_aware_datetime_uses_utc_calendar_date(self):
        eastern = timezone(timedelta(hours=-5))
        reference = datetime(2024, 3, 9, 22, 30, tzinfo=eastern)

        transaction_date, _ = compute_transaction_dates(reference, TransactionKind.PURCHASE)

        self.assertEqual(transaction_date, date(2024, 3, 10))

    def test_naive_datetime_is_taken_as_utc(self):
        transaction_date, expiry_date = compute_transaction_dates(
            datetime(2024, 1, 15, 23, 59), TransactionKind.LEASE
        )

        self.assertEqual(transaction_date, date(2024, 1, 15))
        self.assertEqual(expiry_date, date(2024, 2, 14))

    def test_unknown_kind_is_rejected(self):
        with self.assertRaises(ValueError):
            compute_transaction_dates(date(2024, 1, 15), "Rental")
