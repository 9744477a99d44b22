# financas/core/withdrawals.py
"""
Limites de saque.

O saque é limitado pelo que já foi recebido até hoje, considerando todo o
histórico (não só o mês selecionado): total geral e por cliente de origem.
"""
import datetime
from typing import Iterable, List, Optional

from financas.core.aggregator import is_received
from financas.core.errors import WithdrawalLimitError
from financas.core.models import Client, Expense, Income, WithdrawalLimits
from financas.utils.text_utils import format_brl


def _existing_withdrawals(expenses: Iterable[Expense], editing_expense_id: Optional[str]) -> List[Expense]:
    # Conta saques em qualquer status; o saque em edição não entra no cálculo.
    return [
        e for e in expenses
        if e.is_withdrawal and (editing_expense_id is None or e.id != editing_expense_id)
    ]


def calculate_withdrawal_limits(clients: Iterable[Client],
                                incomes: Iterable[Income],
                                expenses: Iterable[Expense],
                                editing_expense_id: Optional[str] = None,
                                today: Optional[datetime.date] = None) -> WithdrawalLimits:
    today = today or datetime.date.today()
    received = [i for i in incomes if is_received(i, today)]
    withdrawals = _existing_withdrawals(expenses, editing_expense_id)

    total_received = sum((i.amount for i in received), 0.0)
    total_withdrawn = sum((e.amount for e in withdrawals), 0.0)
    available_total = max(0.0, total_received - total_withdrawn)

    client_limits = {}
    for client in clients:
        client_income = sum((i.amount for i in received if i.client_id == client.id), 0.0)
        client_withdrawn = sum((e.amount for e in withdrawals if e.payment_source_id == client.id), 0.0)
        client_limits[client.id] = max(0.0, client_income - client_withdrawn)

    return WithdrawalLimits(available_total=available_total, client_limits=client_limits)


def validate_withdrawal(amount: float,
                        limits: WithdrawalLimits,
                        payment_source_id: Optional[str] = None,
                        clients: Iterable[Client] = ()) -> None:
    """Levanta WithdrawalLimitError se o saque passar do total disponível ou do limite do cliente."""
    if amount > limits.available_total:
        raise WithdrawalLimitError(
            f"Saque excede o total disponível. Máximo: {format_brl(limits.available_total)}",
            amount=amount,
            limit=limits.available_total,
        )

    if payment_source_id and payment_source_id in limits.client_limits:
        client_limit = limits.client_limits[payment_source_id]
        if amount > client_limit:
            client_name = next((c.name for c in clients if c.id == payment_source_id), "Cliente")
            raise WithdrawalLimitError(
                f"Saque excede o disponível de {client_name}. Máximo: {format_brl(client_limit)}",
                amount=amount,
                limit=client_limit,
                client_id=payment_source_id,
            )
