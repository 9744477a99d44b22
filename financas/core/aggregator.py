# financas/core/aggregator.py
"""
Agregações do mês selecionado.

Todas as funções daqui são puras: recebem as listas já carregadas do Supabase
e devolvem novas listas/valores, sem tocar no banco. `today` é sempre um
parâmetro para que o reconhecimento de receitas seja testável.
"""
import calendar
import datetime
from typing import Callable, Dict, Iterable, List, Optional, TypeVar, Union

from financas.core.models import (
    Client,
    Expense,
    FinancialSummary,
    Income,
    Investment,
    STATUS_PAID,
    STATUS_SAVED,
    STATUS_UNPAID,
    TYPE_BUSINESS,
    TYPE_PERSONAL,
    WITHDRAWAL_CATEGORY,
)

T = TypeVar("T")
DateLike = Union[datetime.date, datetime.datetime]


def _as_date(value: DateLike) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


def start_of_month(value: DateLike) -> datetime.date:
    return datetime.date(value.year, value.month, 1)


def end_of_month(value: DateLike) -> datetime.date:
    last_day = calendar.monthrange(value.year, value.month)[1]
    return datetime.date(value.year, value.month, last_day)


def is_in_month(value: DateLike, month: DateLike) -> bool:
    """True se `value` cai entre o primeiro e o último dia do mês de `month` (inclusive)."""
    return start_of_month(month) <= _as_date(value) <= end_of_month(month)


def filter_by_month(records: Iterable[T], month: DateLike, get_date: Callable[[T], DateLike]) -> List[T]:
    return [record for record in records if is_in_month(get_date(record), month)]


def filter_incomes(incomes: Iterable[Income], month: DateLike) -> List[Income]:
    return filter_by_month(incomes, month, lambda i: i.payment_date)


def filter_expenses(expenses: Iterable[Expense], month: DateLike) -> List[Expense]:
    # Despesas fixas já existem como registros próprios em cada mês
    # (ver projection.py), então o filtro é o mesmo das demais.
    return filter_by_month(expenses, month, lambda e: e.due_date)


def filter_investments(investments: Iterable[Investment], month: DateLike) -> List[Investment]:
    return filter_by_month(investments, month, lambda i: i.date)


def is_received(income: Income, today: datetime.date) -> bool:
    """Receita só conta depois da data de pagamento (recebíveis futuros ficam de fora)."""
    return _as_date(income.payment_date) <= today


def _total(items: Iterable) -> float:
    return sum((item.amount for item in items), 0.0)


def calculate_summary(incomes: List[Income],
                      expenses: List[Expense],
                      investments: List[Investment],
                      type: Optional[str] = None,
                      today: Optional[datetime.date] = None) -> FinancialSummary:
    """
    Calcula o resumo financeiro das listas (já filtradas pelo mês).

    `type` restringe as despesas a 'business' ou 'personal'. Saques, despesas
    empresariais sem saque e despesas pessoais pagas usam sempre todas as
    despesas do mês, porque o saldo pessoal depende dos saques da empresa.
    """
    if type not in (None, TYPE_BUSINESS, TYPE_PERSONAL):
        raise ValueError(f"Tipo de resumo inválido: {type}")
    today = today or datetime.date.today()

    typed_expenses = [e for e in expenses if e.type == type] if type else list(expenses)

    total_income = 0.0 if type == TYPE_PERSONAL else _total(i for i in incomes if is_received(i, today))
    total_expenses = _total(typed_expenses)
    total_investments = 0.0 if type == TYPE_PERSONAL else _total(investments)

    paid_expenses = _total(e for e in typed_expenses if e.status == STATUS_PAID)
    unpaid_expenses = _total(e for e in typed_expenses if e.status == STATUS_UNPAID)
    saved_expenses = _total(e for e in typed_expenses if e.status == STATUS_SAVED)

    expenses_by_source: Dict[str, float] = {}
    for expense in typed_expenses:
        if expense.payment_source_id:
            expenses_by_source[expense.payment_source_id] = (
                expenses_by_source.get(expense.payment_source_id, 0.0) + expense.amount
            )

    total_withdrawals = _total(
        e for e in expenses
        if e.type == TYPE_BUSINESS and e.category == WITHDRAWAL_CATEGORY and e.status == STATUS_PAID
    )
    business_expenses_ex_withdrawals = _total(
        e for e in expenses
        if e.type == TYPE_BUSINESS and e.category != WITHDRAWAL_CATEGORY and e.status == STATUS_PAID
    )
    personal_paid_expenses = _total(
        e for e in expenses if e.type == TYPE_PERSONAL and e.status == STATUS_PAID
    )

    # Caixa empresa = Receita - Despesas empresa - Saques - Investimentos
    business_balance = total_income - business_expenses_ex_withdrawals - total_withdrawals - total_investments
    # Disponível pessoal = Saques - Despesas pessoais pagas
    personal_balance = total_withdrawals - personal_paid_expenses

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_investments=total_investments,
        paid_expenses=paid_expenses,
        unpaid_expenses=unpaid_expenses,
        saved_expenses=saved_expenses,
        available_balance=total_income - paid_expenses - total_investments,
        business_balance=business_balance,
        personal_balance=personal_balance,
        total_withdrawals=total_withdrawals,
        personal_paid_expenses=personal_paid_expenses,
        expenses_by_source=expenses_by_source,
    )


def expenses_by_category(expenses: Iterable[Expense], type: Optional[str] = None) -> Dict[str, float]:
    """Total por categoria, da maior para a menor."""
    totals: Dict[str, float] = {}
    for expense in expenses:
        if type and expense.type != type:
            continue
        category = expense.category or "Outros"
        totals[category] = totals.get(category, 0.0) + expense.amount
    return dict(sorted(totals.items(), key=lambda item: (-item[1], item[0])))


def incomes_by_client(incomes: Iterable[Income], clients: Iterable[Client]) -> Dict[str, float]:
    """Total recebido por nome de cliente. Clientes removidos aparecem como 'Sem cliente'."""
    names = {client.id: client.name for client in clients}
    totals: Dict[str, float] = {}
    for income in incomes:
        name = names.get(income.client_id, "Sem cliente")
        totals[name] = totals.get(name, 0.0) + income.amount
    return dict(sorted(totals.items(), key=lambda item: (-item[1], item[0])))
