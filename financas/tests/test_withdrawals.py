# tests/test_withdrawals.py
import datetime
import unittest

from financas.core.errors import ValidationError, WithdrawalLimitError
from financas.core.models import Client, Expense, Income
from financas.core.withdrawals import calculate_withdrawal_limits, validate_withdrawal

TODAY = datetime.date(2025, 7, 20)


def make_client(id, name):
    return Client(id=id, name=name, created_at=datetime.datetime(2025, 1, 1))


def make_income(amount, client_id, payment_date=datetime.date(2025, 7, 1)):
    return Income(id=None, description="Projeto", amount=amount, client_id=client_id, payment_date=payment_date)


def make_withdrawal(amount, source=None, id=None, status="paid", type="business"):
    return Expense(id=id, description="Saque", amount=amount, category="Saque",
                   due_date=datetime.date(2025, 7, 10), status=status, payment_source_id=source, type=type)


class TestWithdrawalLimits(unittest.TestCase):
    def setUp(self):
        self.clients = [make_client("c1", "Acme")]
        self.incomes = [make_income(1000.0, "c1")]
        self.expenses = [make_withdrawal(400.0, source="c1", id="w1")]

    def limits(self, editing=None):
        return calculate_withdrawal_limits(self.clients, self.incomes, self.expenses,
                                           editing_expense_id=editing, today=TODAY)

    def test_available_total(self):
        limits = self.limits()
        self.assertEqual(limits.available_total, 600.0)
        self.assertEqual(limits.client_limits, {"c1": 600.0})

    def test_rejects_amount_above_total(self):
        with self.assertRaises(WithdrawalLimitError) as ctx:
            validate_withdrawal(700.0, self.limits())
        self.assertEqual(ctx.exception.limit, 600.0)
        self.assertEqual(ctx.exception.amount, 700.0)
        self.assertIn("R$ 600,00", str(ctx.exception))
        self.assertIn("total disponível", str(ctx.exception))

    def test_accepts_amount_equal_to_limit(self):
        validate_withdrawal(600.0, self.limits())

    def test_limit_error_is_a_validation_error(self):
        with self.assertRaises(ValidationError):
            validate_withdrawal(601.0, self.limits())

    def test_editing_excludes_its_own_amount(self):
        limits = self.limits(editing="w1")
        self.assertEqual(limits.available_total, 1000.0)
        validate_withdrawal(400.0, limits, "c1", self.clients)

    def test_any_status_counts(self):
        self.expenses.append(make_withdrawal(100.0, status="unpaid"))
        self.expenses.append(make_withdrawal(100.0, status="saved"))
        self.assertEqual(self.limits().available_total, 400.0)

    def test_personal_saque_is_not_a_withdrawal(self):
        self.expenses.append(make_withdrawal(300.0, type="personal"))
        self.assertEqual(self.limits().available_total, 600.0)

    def test_future_income_is_not_available(self):
        self.incomes.append(make_income(5000.0, "c1", payment_date=TODAY + datetime.timedelta(days=1)))
        self.assertEqual(self.limits().available_total, 600.0)

    def test_never_negative(self):
        self.expenses.append(make_withdrawal(2000.0, source="c1"))
        limits = self.limits()
        self.assertEqual(limits.available_total, 0.0)
        self.assertEqual(limits.client_limits["c1"], 0.0)

    def test_client_limit(self):
        self.clients.append(make_client("c2", "Beta"))
        self.incomes.append(make_income(1000.0, "c2"))
        self.expenses.append(make_withdrawal(900.0, source="c2"))
        limits = self.limits()
        self.assertEqual(limits.available_total, 700.0)
        self.assertEqual(limits.client_limits, {"c1": 600.0, "c2": 100.0})

        with self.assertRaises(WithdrawalLimitError) as ctx:
            validate_withdrawal(150.0, limits, "c2", self.clients)
        self.assertEqual(ctx.exception.client_id, "c2")
        self.assertEqual(str(ctx.exception), "Saque excede o disponível de Beta. Máximo: R$ 100,00")

        validate_withdrawal(150.0, limits, "c1", self.clients)

    def test_unknown_source_only_checks_total(self):
        validate_withdrawal(500.0, self.limits(), "removed-client", self.clients)

    def test_end_to_end_client_scenario(self):
        clients = [make_client("C", "Cliente C")]
        incomes = [
            make_income(500.0, "C", payment_date=datetime.date(2025, 7, 1)),
            make_income(300.0, "C", payment_date=datetime.date(2025, 8, 1)),
        ]
        expenses = [make_withdrawal(200.0, source="C", id="s1")]
        limits = calculate_withdrawal_limits(clients, incomes, expenses, today=TODAY)
        self.assertEqual(limits.available_total, 300.0)
        self.assertEqual(limits.client_limits["C"], 300.0)


if __name__ == "__main__":
    unittest.main()
