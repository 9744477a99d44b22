# tests/test_bot_helpers.py
import datetime
import unittest
from unittest.mock import MagicMock

from supabase import Client as SupabaseClient

from financas.bot.session import (
    find_by_id_prefix,
    find_client,
    format_summary,
    match_category,
    month_label,
    parse_status,
    parse_type,
    short_id,
)
from financas.core.aggregator import calculate_summary
from financas.core.errors import ValidationError
from financas.core.models import Client, Expense
from financas.core.state import FinanceSession


def make_client(id, name):
    return Client(id=id, name=name, created_at=datetime.datetime(2025, 1, 1))


class TestParsing(unittest.TestCase):
    def test_parse_type(self):
        self.assertEqual(parse_type("Empresa"), "business")
        self.assertEqual(parse_type(" pf "), "personal")
        with self.assertRaises(ValidationError):
            parse_type("familia")

    def test_parse_status(self):
        self.assertEqual(parse_status("A pagar"), "unpaid")
        self.assertEqual(parse_status("pago"), "paid")
        self.assertEqual(parse_status("guardado"), "saved")
        with self.assertRaises(ValidationError):
            parse_status("atrasado")

    def test_match_category(self):
        self.assertEqual(match_category("saque", "business"), "Saque")
        self.assertEqual(match_category("cartão_de_crédito", "personal"), "Cartão de crédito")
        with self.assertRaises(ValidationError):
            match_category("Saque", "personal")


class TestLookups(unittest.TestCase):
    def setUp(self):
        self.clients = [
            make_client("a1b2c3d4-0000", "Acme"),
            make_client("a1ff0000-1111", "Beta"),
        ]

    def test_find_by_id_prefix(self):
        self.assertEqual(find_by_id_prefix(self.clients, "A1B2").name, "Acme")

    def test_find_by_id_prefix_ambiguous(self):
        with self.assertRaises(ValidationError):
            find_by_id_prefix(self.clients, "a1")

    def test_find_by_id_prefix_missing(self):
        with self.assertRaises(ValidationError):
            find_by_id_prefix(self.clients, "zz")
        with self.assertRaises(ValidationError):
            find_by_id_prefix(self.clients, "")

    def test_find_client_by_name_or_id(self):
        self.assertEqual(find_client(self.clients, "beta").id, "a1ff0000-1111")
        self.assertEqual(find_client(self.clients, "a1b2").name, "Acme")

    def test_short_id(self):
        self.assertEqual(short_id("a1b2c3d4-0000"), "a1b2c3d4")
        self.assertEqual(short_id(None), "")


class TestFormatting(unittest.TestCase):
    def test_month_label(self):
        session = FinanceSession(MagicMock(spec=SupabaseClient), user_id="u",
                                 today=lambda: datetime.date(2025, 3, 9))
        self.assertEqual(month_label(session), "Março/2025")

    def test_format_summary_lists_sources(self):
        session = FinanceSession(MagicMock(spec=SupabaseClient), user_id="u",
                                 today=lambda: datetime.date(2025, 7, 20))
        session.clients = [make_client("c1", "Acme")]
        expenses = [
            Expense(description="Impostos", amount=100.0, category="Impostos",
                    due_date=datetime.date(2025, 7, 1), status="paid", payment_source_id="c1"),
            Expense(description="Outros", amount=10.0, category="Outros",
                    due_date=datetime.date(2025, 7, 1), status="paid", payment_source_id="gone"),
        ]
        summary = calculate_summary([], expenses, [], today=datetime.date(2025, 7, 20))

        text = format_summary(summary, "Julho/2025", session)

        self.assertIn("*Julho/2025*", text)
        self.assertIn("Pagas: R$ 110,00", text)
        self.assertIn("• Acme: R$ 100,00", text)
        self.assertIn("• Cliente removido: R$ 10,00", text)


if __name__ == "__main__":
    unittest.main()
