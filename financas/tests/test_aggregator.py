# tests/test_aggregator.py
import datetime
import unittest

from financas.core import aggregator
from financas.core.models import Client, Expense, Income, Investment

TODAY = datetime.date(2025, 7, 20)
JULY = datetime.date(2025, 7, 1)


def make_income(amount, payment_date, client_id="c1", id=None):
    return Income(id=id, description="Projeto", amount=amount, client_id=client_id, payment_date=payment_date)


def make_expense(amount, category, type="business", status="paid", source=None, due_date=datetime.date(2025, 7, 10), id=None):
    return Expense(id=id, description=category, amount=amount, category=category, due_date=due_date,
                   status=status, payment_source_id=source, type=type)


class TestMonthFilter(unittest.TestCase):
    def test_month_boundaries(self):
        self.assertEqual(aggregator.start_of_month(datetime.date(2025, 7, 19)), datetime.date(2025, 7, 1))
        self.assertEqual(aggregator.end_of_month(datetime.date(2025, 7, 19)), datetime.date(2025, 7, 31))
        self.assertEqual(aggregator.end_of_month(datetime.date(2025, 4, 2)), datetime.date(2025, 4, 30))

    def test_year_boundary(self):
        december = datetime.date(2024, 12, 1)
        january = datetime.date(2025, 1, 1)
        self.assertTrue(aggregator.is_in_month(datetime.date(2024, 12, 31), december))
        self.assertFalse(aggregator.is_in_month(datetime.date(2024, 12, 31), january))
        self.assertTrue(aggregator.is_in_month(datetime.date(2025, 1, 1), january))
        self.assertFalse(aggregator.is_in_month(datetime.date(2025, 1, 1), december))

    def test_leap_year(self):
        self.assertEqual(aggregator.end_of_month(datetime.date(2024, 2, 10)), datetime.date(2024, 2, 29))
        self.assertTrue(aggregator.is_in_month(datetime.date(2024, 2, 29), datetime.date(2024, 2, 1)))
        self.assertFalse(aggregator.is_in_month(datetime.date(2024, 2, 29), datetime.date(2024, 3, 1)))
        self.assertEqual(aggregator.end_of_month(datetime.date(2025, 2, 10)), datetime.date(2025, 2, 28))

    def test_datetime_last_instant_of_month(self):
        self.assertTrue(aggregator.is_in_month(datetime.datetime(2025, 7, 31, 23, 59, 59), JULY))
        self.assertFalse(aggregator.is_in_month(datetime.datetime(2025, 8, 1, 0, 0, 0), JULY))

    def test_filters_use_their_own_dates(self):
        incomes = [make_income(100, datetime.date(2025, 7, 1)), make_income(100, datetime.date(2025, 8, 1))]
        expenses = [make_expense(10, "Impostos", due_date=datetime.date(2025, 6, 30)),
                    make_expense(10, "Impostos", due_date=datetime.date(2025, 7, 31))]
        investments = [Investment(description="CDB", amount=50, category="Renda fixa", date=datetime.date(2025, 7, 15))]

        self.assertEqual(len(aggregator.filter_incomes(incomes, JULY)), 1)
        self.assertEqual(aggregator.filter_expenses(expenses, JULY)[0].due_date, datetime.date(2025, 7, 31))
        self.assertEqual(len(aggregator.filter_investments(investments, JULY)), 1)

    def test_fixed_expense_copies_are_filtered_by_their_own_due_date(self):
        original = make_expense(100, "Ferramentas", due_date=datetime.date(2025, 6, 5))
        original.is_fixed = True
        self.assertEqual(aggregator.filter_expenses([original], JULY), [])


class TestCalculateSummary(unittest.TestCase):
    def setUp(self):
        self.incomes = [
            make_income(1000.0, datetime.date(2025, 7, 5), client_id="c1"),
            make_income(500.0, datetime.date(2025, 7, 15), client_id="c2"),
            make_income(300.0, datetime.date(2025, 7, 25), client_id="c1"),  # ainda não recebida
        ]
        self.expenses = [
            make_expense(400.0, "Saque", status="paid", source="c1"),
            make_expense(100.0, "Impostos", status="paid"),
            make_expense(50.0, "Marketing", status="unpaid", source="c2"),
            make_expense(250.0, "Moradia", type="personal", status="paid"),
        ]
        self.investments = [
            Investment(description="Tesouro", amount=200.0, category="Renda fixa", date=datetime.date(2025, 7, 3)),
        ]

    def summary(self, type=None, today=TODAY):
        return aggregator.calculate_summary(self.incomes, self.expenses, self.investments, type=type, today=today)

    def test_total_summary(self):
        summary = self.summary()
        self.assertEqual(summary.total_income, 1500.0)
        self.assertEqual(summary.total_expenses, 800.0)
        self.assertEqual(summary.total_investments, 200.0)
        self.assertEqual(summary.paid_expenses, 750.0)
        self.assertEqual(summary.unpaid_expenses, 50.0)
        self.assertEqual(summary.saved_expenses, 0.0)
        self.assertEqual(summary.total_withdrawals, 400.0)
        self.assertEqual(summary.personal_paid_expenses, 250.0)
        self.assertEqual(summary.expenses_by_source, {"c1": 400.0, "c2": 50.0})
        self.assertEqual(summary.business_balance, 1500.0 - 100.0 - 400.0 - 200.0)
        self.assertEqual(summary.personal_balance, 400.0 - 250.0)
        self.assertEqual(summary.available_balance, 1500.0 - 750.0 - 200.0)

    def test_business_summary(self):
        summary = self.summary("business")
        self.assertEqual(summary.total_income, 1500.0)
        self.assertEqual(summary.total_expenses, 550.0)
        self.assertEqual(summary.paid_expenses, 500.0)
        self.assertEqual(summary.unpaid_expenses, 50.0)
        self.assertEqual(summary.business_balance, 800.0)
        self.assertEqual(summary.personal_balance, 150.0)
        self.assertEqual(summary.available_balance, 800.0)

    def test_personal_summary_uses_all_expenses_for_balances(self):
        summary = self.summary("personal")
        self.assertEqual(summary.total_income, 0.0)
        self.assertEqual(summary.total_investments, 0.0)
        self.assertEqual(summary.total_expenses, 250.0)
        self.assertEqual(summary.paid_expenses, 250.0)
        self.assertEqual(summary.expenses_by_source, {})
        # Saques e despesas pessoais vêm do mês inteiro, não só das pessoais
        self.assertEqual(summary.total_withdrawals, 400.0)
        self.assertEqual(summary.personal_balance, 150.0)
        self.assertEqual(summary.business_balance, -500.0)
        self.assertEqual(summary.available_balance, -250.0)

    def test_unpaid_withdrawals_and_business_expenses_do_not_count_in_balances(self):
        self.expenses.append(make_expense(999.0, "Saque", status="unpaid"))
        self.expenses.append(make_expense(888.0, "Infraestrutura", status="saved"))
        summary = self.summary()
        self.assertEqual(summary.total_withdrawals, 400.0)
        self.assertEqual(summary.saved_expenses, 888.0)
        self.assertEqual(summary.business_balance, 800.0)

    def test_income_counts_only_after_payment_date(self):
        tomorrow = TODAY + datetime.timedelta(days=1)
        self.incomes = [make_income(700.0, tomorrow)]
        self.assertEqual(self.summary(today=TODAY).total_income, 0.0)
        self.assertEqual(self.summary(today=tomorrow).total_income, 700.0)

    def test_is_pure(self):
        first = self.summary("business")
        second = self.summary("business")
        self.assertEqual(first, second)
        self.assertEqual(len(self.expenses), 4)

    def test_invalid_type(self):
        with self.assertRaises(ValueError):
            self.summary("familia")

    def test_empty_month(self):
        summary = aggregator.calculate_summary([], [], [], today=TODAY)
        self.assertEqual(summary.total_income, 0.0)
        self.assertEqual(summary.available_balance, 0.0)
        self.assertEqual(summary.expenses_by_source, {})


class TestBreakdowns(unittest.TestCase):
    def test_expenses_by_category(self):
        expenses = [
            make_expense(100.0, "Impostos"),
            make_expense(50.0, "Impostos"),
            make_expense(300.0, "Saque"),
            make_expense(80.0, "Lazer", type="personal"),
        ]
        self.assertEqual(
            aggregator.expenses_by_category(expenses),
            {"Saque": 300.0, "Impostos": 150.0, "Lazer": 80.0},
        )
        self.assertEqual(aggregator.expenses_by_category(expenses, type="personal"), {"Lazer": 80.0})

    def test_incomes_by_client(self):
        clients = [Client(id="c1", name="Acme", created_at=datetime.datetime(2025, 1, 1))]
        incomes = [make_income(100.0, JULY, "c1"), make_income(40.0, JULY, "c1"), make_income(10.0, JULY, "gone")]
        self.assertEqual(aggregator.incomes_by_client(incomes, clients), {"Acme": 140.0, "Sem cliente": 10.0})


if __name__ == "__main__":
    unittest.main()
