# financas/core/validation.py
from typing import Union

from financas.core.errors import ValidationError
from financas.core.models import (
    Expense,
    Income,
    Investment,
    EXPENSE_STATUSES,
    EXPENSE_TYPES,
)


def _require_text(value: Union[str, None], label: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"O campo '{label}' é obrigatório.")


def _require_amount(amount: Union[float, None]) -> None:
    if amount is None:
        raise ValidationError("O campo 'valor' é obrigatório.")
    if amount < 0:
        raise ValidationError("O valor não pode ser negativo.")


def validate_client_name(name: str) -> None:
    _require_text(name, "nome")


def validate_income(income: Income) -> None:
    _require_text(income.description, "descrição")
    _require_amount(income.amount)
    _require_text(income.client_id, "cliente")
    if income.payment_date is None:
        raise ValidationError("O campo 'data de pagamento' é obrigatório.")


def validate_expense(expense: Expense) -> None:
    _require_text(expense.description, "descrição")
    _require_amount(expense.amount)
    _require_text(expense.category, "categoria")
    if expense.due_date is None:
        raise ValidationError("O campo 'vencimento' é obrigatório.")
    if expense.status not in EXPENSE_STATUSES:
        raise ValidationError(f"Status inválido: {expense.status}")
    if expense.type not in EXPENSE_TYPES:
        raise ValidationError(f"Tipo inválido: {expense.type}")


def validate_investment(investment: Investment) -> None:
    _require_text(investment.description, "descrição")
    _require_amount(investment.amount)
    _require_text(investment.category, "categoria")
    if investment.date is None:
        raise ValidationError("O campo 'data' é obrigatório.")
