# financas/core/errors.py
from typing import Optional


class FinanceError(Exception):
    """Erro base da aplicação. A mensagem é exibida ao usuário."""


class ValidationError(FinanceError):
    """Dados inválidos. Levantado antes de qualquer escrita no Supabase."""


class WithdrawalLimitError(ValidationError):
    def __init__(self, message: str, amount: float, limit: float, client_id: Optional[str] = None):
        super().__init__(message)
        self.amount = amount
        self.limit = limit
        self.client_id = client_id


class DataAccessError(FinanceError):
    """Falha na comunicação com o Supabase."""
