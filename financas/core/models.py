# financas/core/models.py
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple
import datetime

# Modelos em memória. No Supabase as colunas são snake_case e as datas
# chegam como strings ISO; a conversão fica em db.py.

STATUS_UNPAID = "unpaid"
STATUS_PAID = "paid"
STATUS_SAVED = "saved"
EXPENSE_STATUSES = (STATUS_UNPAID, STATUS_PAID, STATUS_SAVED)

TYPE_BUSINESS = "business"
TYPE_PERSONAL = "personal"
EXPENSE_TYPES = (TYPE_BUSINESS, TYPE_PERSONAL)

# Despesa empresarial que representa retirada de dinheiro da empresa
WITHDRAWAL_CATEGORY = "Saque"

BUSINESS_CATEGORIES = [
    "Saque",
    "Impostos",
    "Infraestrutura",
    "Marketing",
    "Ferramentas",
    "Serviços",
    "Outros",
]

PERSONAL_CATEGORIES = [
    "Moradia",
    "Alimentação",
    "Transporte",
    "Saúde",
    "Lazer",
    "Educação",
    "Cartão de crédito",
    "Poupança",
    "Outros",
]

STATUS_LABELS = {
    STATUS_UNPAID: "A pagar",
    STATUS_PAID: "Pago",
    STATUS_SAVED: "Guardado",
}

TYPE_LABELS = {
    TYPE_BUSINESS: "Empresa",
    TYPE_PERSONAL: "Pessoal",
}


@dataclass
class Client:
    id: str
    name: str
    created_at: datetime.datetime


@dataclass
class Income:
    description: str
    amount: float
    client_id: str
    payment_date: datetime.date
    category: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime.datetime] = None


@dataclass
class Expense:
    description: str
    amount: float
    category: str
    due_date: datetime.date
    status: str = STATUS_UNPAID
    payment_source_id: Optional[str] = None
    type: str = TYPE_BUSINESS
    is_fixed: bool = False
    id: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    @property
    def is_withdrawal(self) -> bool:
        return self.type == TYPE_BUSINESS and self.category == WITHDRAWAL_CATEGORY

    def with_changes(self, **changes) -> "Expense":
        return replace(self, **changes)


@dataclass
class Investment:
    description: str
    amount: float
    category: str
    date: datetime.date
    id: Optional[str] = None
    created_at: Optional[datetime.datetime] = None


@dataclass(frozen=True)
class FinancialSummary:
    total_income: float
    total_expenses: float
    total_investments: float
    paid_expenses: float
    unpaid_expenses: float
    saved_expenses: float
    available_balance: float
    business_balance: float
    personal_balance: float
    total_withdrawals: float
    personal_paid_expenses: float
    expenses_by_source: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class WithdrawalLimits:
    available_total: float
    client_limits: Dict[str, float] = field(default_factory=dict)


@dataclass
class CopyResult:
    """Resultado da criação das cópias de uma despesa fixa.

    Os índices vão de 1 a N (1 = mês seguinte ao vencimento original).
    """
    created: List[Tuple[int, Expense]] = field(default_factory=list)
    failed: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed
