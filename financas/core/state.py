# financas/core/state.py
"""
Sessão financeira de um usuário.

Guarda o mês selecionado, as listas carregadas do Supabase e a flag
`is_mutating`, que fica ligada enquanto uma escrita está em andamento para que
a interface bloqueie envios repetidos. A flag não serializa nada: duas
escritas simultâneas ainda podem concorrer no banco.
"""
import contextlib
import datetime
import logging
from dataclasses import fields, replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Union

from dateutil.relativedelta import relativedelta
from supabase import Client as SupabaseClient

from financas.core import aggregator, db, projection
from financas.core.errors import ValidationError
from financas.core.models import (
    Client,
    CopyResult,
    Expense,
    FinancialSummary,
    Income,
    Investment,
    TYPE_BUSINESS,
    TYPE_PERSONAL,
    WithdrawalLimits,
)
from financas.core.validation import (
    validate_client_name,
    validate_expense,
    validate_income,
    validate_investment,
)
from financas.core.withdrawals import calculate_withdrawal_limits, validate_withdrawal
from financas.utils.text_utils import parse_month, to_snake_case

logger = logging.getLogger(__name__)

_EXPENSE_FIELDS = {f.name for f in fields(Expense)}
_INCOME_FIELDS = {f.name for f in fields(Income)}
_READONLY_FIELDS = ("id", "created_at")


def _changes_for(updates: Dict[str, Any], allowed: Set[str], table: str) -> Dict[str, Any]:
    changes = {}
    for key, value in updates.items():
        name = to_snake_case(key)
        if name not in allowed or name in _READONLY_FIELDS:
            raise ValidationError(f"Campo '{key}' não pode ser alterado em {table}.")
        changes[name] = value
    return changes


class FinanceSession:
    def __init__(self, supabase_client: SupabaseClient,
                 user_id: Optional[str] = None,
                 selected_month: Optional[datetime.date] = None,
                 today: Callable[[], datetime.date] = datetime.date.today):
        self.supabase_client = supabase_client
        self.user_id = user_id
        self._today = today
        self.selected_month = aggregator.start_of_month(selected_month or today())
        self.is_mutating = False

        self.clients: List[Client] = []
        self.incomes: List[Income] = []
        self.expenses: List[Expense] = []
        self.investments: List[Investment] = []

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def today(self) -> datetime.date:
        return self._today()

    def refresh(self) -> None:
        """Recarrega clientes, receitas, despesas e investimentos do Supabase."""
        self.clients = db.get_clients(self.supabase_client, self.user_id)
        self.incomes = db.get_incomes(self.supabase_client, self.user_id)
        self.expenses = db.get_expenses(self.supabase_client, self.user_id)
        self.investments = db.get_investments(self.supabase_client, self.user_id)
        logger.debug("Dados recarregados para o usuário %s", self.user_id)

    # --- Mês selecionado ---

    def set_selected_month(self, value: Union[datetime.date, str]) -> datetime.date:
        if isinstance(value, str):
            value = parse_month(value)
        self.selected_month = aggregator.start_of_month(value)
        return self.selected_month

    def next_month(self) -> datetime.date:
        return self.set_selected_month(self.selected_month + relativedelta(months=1))

    def previous_month(self) -> datetime.date:
        return self.set_selected_month(self.selected_month - relativedelta(months=1))

    # --- Visões do mês ---

    @property
    def filtered_incomes(self) -> List[Income]:
        return aggregator.filter_incomes(self.incomes, self.selected_month)

    @property
    def filtered_expenses(self) -> List[Expense]:
        return aggregator.filter_expenses(self.expenses, self.selected_month)

    @property
    def filtered_investments(self) -> List[Investment]:
        return aggregator.filter_investments(self.investments, self.selected_month)

    def _summary(self, type: Optional[str] = None) -> FinancialSummary:
        return aggregator.calculate_summary(
            self.filtered_incomes,
            self.filtered_expenses,
            self.filtered_investments,
            type=type,
            today=self.today,
        )

    def get_business_summary(self) -> FinancialSummary:
        return self._summary(TYPE_BUSINESS)

    def get_personal_summary(self) -> FinancialSummary:
        return self._summary(TYPE_PERSONAL)

    def get_total_summary(self) -> FinancialSummary:
        return self._summary()

    def get_client_by_id(self, client_id: str) -> Optional[Client]:
        return next((c for c in self.clients if c.id == client_id), None)

    def get_income_by_id(self, income_id: str) -> Optional[Income]:
        return next((i for i in self.incomes if i.id == income_id), None)

    def get_expense_by_id(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def withdrawal_limits(self, editing_expense_id: Optional[str] = None) -> WithdrawalLimits:
        return calculate_withdrawal_limits(
            self.clients, self.incomes, self.expenses,
            editing_expense_id=editing_expense_id, today=self.today,
        )

    def _check_withdrawal(self, expense: Expense, editing_expense_id: Optional[str] = None) -> None:
        if not expense.is_withdrawal:
            return
        limits = self.withdrawal_limits(editing_expense_id)
        validate_withdrawal(expense.amount, limits, expense.payment_source_id, self.clients)

    # --- Escritas ---

    @contextlib.contextmanager
    def _mutation(self) -> Iterator[None]:
        self.is_mutating = True
        try:
            yield
        finally:
            self.is_mutating = False

    def add_client(self, name: str) -> Optional[Client]:
        if not self.is_authenticated:
            return None
        validate_client_name(name)
        with self._mutation():
            client = db.add_client(self.supabase_client, self.user_id, name.strip())
            self.refresh()
        return client

    def remove_client(self, client_id: str) -> None:
        if not self.is_authenticated:
            return
        with self._mutation():
            db.remove_client(self.supabase_client, self.user_id, client_id)
            self.refresh()

    def add_income(self, income: Income) -> Optional[Income]:
        if not self.is_authenticated:
            return None
        validate_income(income)
        with self._mutation():
            saved = db.add_income(self.supabase_client, self.user_id, income)
            self.refresh()
        return saved

    def update_income(self, income_id: str, updates: Dict[str, Any]) -> Optional[Income]:
        """Aplica um update parcial, validando a receita resultante antes de gravar."""
        if not self.is_authenticated:
            return None
        current = self.get_income_by_id(income_id)
        if current is None:
            raise ValidationError("Receita não encontrada.")

        changes = _changes_for(updates, _INCOME_FIELDS, "incomes")
        updated = replace(current, **changes)
        validate_income(updated)
        with self._mutation():
            db.update_income(self.supabase_client, self.user_id, income_id, changes)
            self.refresh()
        return updated

    def remove_income(self, income_id: str) -> None:
        if not self.is_authenticated:
            return
        with self._mutation():
            db.remove_income(self.supabase_client, self.user_id, income_id)
            self.refresh()

    def add_expense(self, expense: Expense) -> Optional[Expense]:
        """Valida (inclusive o limite de saque) e grava a despesa."""
        if not self.is_authenticated:
            return None
        validate_expense(expense)
        self._check_withdrawal(expense)
        with self._mutation():
            saved = db.add_expense(self.supabase_client, self.user_id, expense)
            self.refresh()
        return saved

    def update_expense(self, expense_id: str, updates: Dict[str, Any]) -> Optional[Expense]:
        """Aplica um update parcial. A despesa editada não conta no próprio limite de saque."""
        if not self.is_authenticated:
            return None
        current = self.get_expense_by_id(expense_id)
        if current is None:
            raise ValidationError("Despesa não encontrada.")

        changes = _changes_for(updates, _EXPENSE_FIELDS, "expenses")
        updated = current.with_changes(**changes)

        validate_expense(updated)
        self._check_withdrawal(updated, editing_expense_id=expense_id)
        with self._mutation():
            db.update_expense(self.supabase_client, self.user_id, expense_id, changes)
            self.refresh()
        return updated

    def update_expense_status(self, expense_id: str, status: str,
                              payment_source_id: Optional[str] = None) -> None:
        if not self.is_authenticated:
            return
        current = self.get_expense_by_id(expense_id)
        if current is None:
            raise ValidationError("Despesa não encontrada.")
        self._check_withdrawal(
            current.with_changes(payment_source_id=payment_source_id),
            editing_expense_id=expense_id,
        )
        with self._mutation():
            db.update_expense_status(self.supabase_client, self.user_id, expense_id, status, payment_source_id)
            self.refresh()

    def remove_expense(self, expense_id: str) -> None:
        if not self.is_authenticated:
            return
        with self._mutation():
            db.remove_expense(self.supabase_client, self.user_id, expense_id)
            self.refresh()

    def add_investment(self, investment: Investment) -> Optional[Investment]:
        if not self.is_authenticated:
            return None
        validate_investment(investment)
        with self._mutation():
            saved = db.add_investment(self.supabase_client, self.user_id, investment)
            self.refresh()
        return saved

    def remove_investment(self, investment_id: str) -> None:
        if not self.is_authenticated:
            return
        with self._mutation():
            db.remove_investment(self.supabase_client, self.user_id, investment_id)
            self.refresh()

    def create_fixed_expense_copies(self, template: Expense, months_ahead: int) -> CopyResult:
        """Cria as cópias da despesa fixa para os próximos meses (ver projection.py)."""
        if not self.is_authenticated:
            return CopyResult()
        self.check_fixed_copies(template, months_ahead)
        with self._mutation():
            result = projection.create_fixed_expense_copies(
                self.supabase_client, self.user_id, template, months_ahead
            )
            self.refresh()
        return result

    def check_fixed_copies(self, template: Expense, months_ahead: int) -> None:
        """Valida as cópias de uma despesa fixa sem gravar nada."""
        if months_ahead < 1:
            raise ValidationError("Informe pelo menos 1 mês para as cópias da despesa fixa.")
        validate_expense(template)
        if template.is_withdrawal:
            # Cópias de saque somam no teto como se fossem um saque só
            self._check_withdrawal(template.with_changes(
                amount=template.amount * months_ahead, payment_source_id=None,
            ))

    def make_expense_fixed(self, expense_id: str, months_ahead: int) -> CopyResult:
        """Marca a despesa como fixa e cria as cópias. Nada é gravado se a validação falhar."""
        if not self.is_authenticated:
            return CopyResult()
        current = self.get_expense_by_id(expense_id)
        if current is None:
            raise ValidationError("Despesa não encontrada.")

        template = current.with_changes(id=None, created_at=None, is_fixed=True)
        self.check_fixed_copies(template, months_ahead)
        if not current.is_fixed:
            self.update_expense(expense_id, {"is_fixed": True})
        return self.create_fixed_expense_copies(template, months_ahead)
