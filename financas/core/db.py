# financas/core/db.py
"""
Acesso ao Supabase.

Toda leitura é filtrada por `user_id` e toda escrita envia o `user_id`
explicitamente; as políticas de RLS do banco são só uma segunda barreira.
Sem usuário autenticado (`user_id` None) as funções não fazem nada e
retornam vazio.
"""
import datetime
import logging
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as date_parser
from supabase import create_client, Client as SupabaseClient

from financas.config import SUPABASE_URL, SUPABASE_KEY
from financas.core.errors import DataAccessError, ValidationError
from financas.core.models import (
    Client,
    Expense,
    Income,
    Investment,
    EXPENSE_STATUSES,
    EXPENSE_TYPES,
    STATUS_UNPAID,
    TYPE_BUSINESS,
)
from financas.utils.text_utils import to_snake_case

logger = logging.getLogger(__name__)

CLIENTS_TABLE = 'clients'
INCOMES_TABLE = 'incomes'
EXPENSES_TABLE = 'expenses'
INVESTMENTS_TABLE = 'investments'

# Colunas editáveis de cada tabela (id, user_id e created_at nunca mudam)
UPDATABLE_COLUMNS = {
    INCOMES_TABLE: {'description', 'amount', 'client_id', 'payment_date', 'category'},
    EXPENSES_TABLE: {'description', 'amount', 'category', 'due_date', 'status',
                     'payment_source_id', 'type', 'is_fixed'},
    INVESTMENTS_TABLE: {'description', 'amount', 'category', 'date'},
}


def get_supabase_client() -> SupabaseClient:
    """Retorna uma instância do cliente Supabase."""
    return create_client(SUPABASE_URL, SUPABASE_KEY)


# --- Conversão entre linhas do Supabase e modelos ---

def _parse_date(row: Dict[str, Any], column: str) -> datetime.date:
    value = row.get(column)
    if not value:
        logger.warning("Registro %s sem %s; usando a data de hoje.", row.get('id'), column)
        return datetime.date.today()
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    # Usa só os componentes de calendário gravados ("2025-07-10T12:00:00+00:00" -> 2025-07-10)
    return datetime.date.fromisoformat(str(value)[:10])


def _parse_datetime(value: Any) -> datetime.datetime:
    if not value:
        return datetime.datetime.now()
    if isinstance(value, datetime.datetime):
        return value
    return date_parser.isoparse(str(value))


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


def client_from_row(row: Dict[str, Any]) -> Client:
    return Client(
        id=row['id'],
        name=row.get('name') or '',
        created_at=_parse_datetime(row.get('created_at')),
    )


def income_from_row(row: Dict[str, Any]) -> Income:
    return Income(
        id=row['id'],
        description=row.get('description') or '',
        amount=float(row.get('amount') or 0),
        client_id=row.get('client_id') or '',
        payment_date=_parse_date(row, 'payment_date'),
        category=row.get('category') or '',
        created_at=_parse_datetime(row.get('created_at')),
    )


def expense_from_row(row: Dict[str, Any]) -> Expense:
    return Expense(
        id=row['id'],
        description=row.get('description') or '',
        amount=float(row.get('amount') or 0),
        category=row.get('category') or '',
        due_date=_parse_date(row, 'due_date'),
        status=row.get('status') or STATUS_UNPAID,
        payment_source_id=row.get('payment_source_id') or None,
        type=row.get('type') or TYPE_BUSINESS,
        is_fixed=bool(row.get('is_fixed') or False),
        created_at=_parse_datetime(row.get('created_at')),
    )


def investment_from_row(row: Dict[str, Any]) -> Investment:
    return Investment(
        id=row['id'],
        description=row.get('description') or '',
        amount=float(row.get('amount') or 0),
        category=row.get('category') or '',
        date=_parse_date(row, 'date'),
        created_at=_parse_datetime(row.get('created_at')),
    )


def income_to_row(income: Income, user_id: str) -> Dict[str, Any]:
    row = {
        "user_id": user_id,
        "description": income.description,
        "amount": income.amount,
        "client_id": income.client_id,
        "payment_date": _serialize(income.payment_date),
        "category": income.category,
    }
    if income.id:
        row["id"] = income.id
    return row


def expense_to_row(expense: Expense, user_id: str) -> Dict[str, Any]:
    row = {
        "user_id": user_id,
        "description": expense.description,
        "amount": expense.amount,
        "category": expense.category,
        "due_date": _serialize(expense.due_date),
        "status": expense.status,
        "payment_source_id": expense.payment_source_id,
        "type": expense.type,
        "is_fixed": expense.is_fixed,
    }
    if expense.id:
        row["id"] = expense.id
    return row


def investment_to_row(investment: Investment, user_id: str) -> Dict[str, Any]:
    row = {
        "user_id": user_id,
        "description": investment.description,
        "amount": investment.amount,
        "category": investment.category,
        "date": _serialize(investment.date),
    }
    if investment.id:
        row["id"] = investment.id
    return row


def normalize_updates(table: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Converte um update parcial (chaves camelCase ou snake_case) em colunas do Supabase."""
    allowed = UPDATABLE_COLUMNS[table]
    normalized = {}
    for key, value in updates.items():
        column = to_snake_case(key)
        if column not in allowed:
            raise ValidationError(f"Campo '{key}' não pode ser alterado em {table}.")
        normalized[column] = _serialize(value)
    return normalized


# --- Helpers de execução ---

def _select_all(supabase_client: SupabaseClient, table: str, user_id: str,
                order_by: Union[str, None] = None) -> List[Dict[str, Any]]:
    try:
        query = supabase_client.table(table).select('*').eq('user_id', user_id)
        if order_by:
            query = query.order(order_by, desc=True)
        response = query.execute()
        return response.data or []
    except Exception as e:
        logger.error("Erro ao obter %s do Supabase: %s", table, e)
        raise DataAccessError(f"Não foi possível carregar {table}.") from e


def _insert(supabase_client: SupabaseClient, table: str, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        response = supabase_client.table(table).insert(row).execute()
    except Exception as e:
        logger.error("Erro ao inserir em %s: %s", table, e)
        raise DataAccessError(f"Não foi possível salvar em {table}.") from e
    logger.info("Registro inserido em %s", table)
    return response.data[0] if response.data else None


def _update(supabase_client: SupabaseClient, table: str, user_id: str, record_id: str,
            values: Dict[str, Any]) -> None:
    try:
        supabase_client.table(table).update(values).eq('id', record_id).eq('user_id', user_id).execute()
    except Exception as e:
        logger.error("Erro ao atualizar %s %s: %s", table, record_id, e)
        raise DataAccessError(f"Não foi possível atualizar o registro em {table}.") from e
    logger.info("Registro %s atualizado em %s", record_id, table)


def _delete(supabase_client: SupabaseClient, table: str, user_id: str, record_id: str) -> None:
    try:
        supabase_client.table(table).delete().eq('id', record_id).eq('user_id', user_id).execute()
    except Exception as e:
        logger.error("Erro ao remover %s %s: %s", table, record_id, e)
        raise DataAccessError(f"Não foi possível remover o registro de {table}.") from e
    logger.info("Registro %s removido de %s", record_id, table)


# --- Clientes ---

def get_clients(supabase_client: SupabaseClient, user_id: Union[str, None]) -> List[Client]:
    """Obtém os clientes do usuário."""
    if not user_id:
        return []
    return [client_from_row(row) for row in _select_all(supabase_client, CLIENTS_TABLE, user_id)]


def add_client(supabase_client: SupabaseClient, user_id: Union[str, None], name: str) -> Optional[Client]:
    if not user_id:
        return None
    row = _insert(supabase_client, CLIENTS_TABLE, {"user_id": user_id, "name": name})
    return client_from_row(row) if row else None


def remove_client(supabase_client: SupabaseClient, user_id: Union[str, None], client_id: str) -> None:
    # Sem cascata: receitas e saques continuam apontando para o id removido.
    if not user_id:
        return
    _delete(supabase_client, CLIENTS_TABLE, user_id, client_id)


# --- Receitas ---

def get_incomes(supabase_client: SupabaseClient, user_id: Union[str, None]) -> List[Income]:
    """Obtém as receitas do usuário, da mais recente para a mais antiga."""
    if not user_id:
        return []
    rows = _select_all(supabase_client, INCOMES_TABLE, user_id, order_by='payment_date')
    return [income_from_row(row) for row in rows]


def add_income(supabase_client: SupabaseClient, user_id: Union[str, None], income: Income) -> Optional[Income]:
    if not user_id:
        return None
    row = _insert(supabase_client, INCOMES_TABLE, income_to_row(income, user_id))
    return income_from_row(row) if row else None


def update_income(supabase_client: SupabaseClient, user_id: Union[str, None], income_id: str,
                  updates: Dict[str, Any]) -> None:
    if not user_id:
        return
    _update(supabase_client, INCOMES_TABLE, user_id, income_id, normalize_updates(INCOMES_TABLE, updates))


def remove_income(supabase_client: SupabaseClient, user_id: Union[str, None], income_id: str) -> None:
    if not user_id:
        return
    _delete(supabase_client, INCOMES_TABLE, user_id, income_id)


# --- Despesas ---

def get_expenses(supabase_client: SupabaseClient, user_id: Union[str, None]) -> List[Expense]:
    """Obtém as despesas do usuário, ordenadas pelo vencimento (mais recente primeiro)."""
    if not user_id:
        return []
    rows = _select_all(supabase_client, EXPENSES_TABLE, user_id, order_by='due_date')
    return [expense_from_row(row) for row in rows]


def add_expense(supabase_client: SupabaseClient, user_id: Union[str, None], expense: Expense) -> Optional[Expense]:
    if not user_id:
        return None
    row = _insert(supabase_client, EXPENSES_TABLE, expense_to_row(expense, user_id))
    return expense_from_row(row) if row else None


def update_expense(supabase_client: SupabaseClient, user_id: Union[str, None], expense_id: str,
                   updates: Dict[str, Any]) -> None:
    if not user_id:
        return
    values = normalize_updates(EXPENSES_TABLE, updates)
    if 'status' in values and values['status'] not in EXPENSE_STATUSES:
        raise ValidationError(f"Status inválido: {values['status']}")
    if 'type' in values and values['type'] not in EXPENSE_TYPES:
        raise ValidationError(f"Tipo inválido: {values['type']}")
    _update(supabase_client, EXPENSES_TABLE, user_id, expense_id, values)


def update_expense_status(supabase_client: SupabaseClient, user_id: Union[str, None], expense_id: str,
                          status: str, payment_source_id: Union[str, None] = None) -> None:
    """Atualiza o status da despesa e o cliente de origem do pagamento."""
    if not user_id:
        return
    if status not in EXPENSE_STATUSES:
        raise ValidationError(f"Status inválido: {status}")
    _update(supabase_client, EXPENSES_TABLE, user_id, expense_id,
            {'status': status, 'payment_source_id': payment_source_id})


def remove_expense(supabase_client: SupabaseClient, user_id: Union[str, None], expense_id: str) -> None:
    if not user_id:
        return
    _delete(supabase_client, EXPENSES_TABLE, user_id, expense_id)


# --- Investimentos ---

def get_investments(supabase_client: SupabaseClient, user_id: Union[str, None]) -> List[Investment]:
    if not user_id:
        return []
    rows = _select_all(supabase_client, INVESTMENTS_TABLE, user_id, order_by='date')
    return [investment_from_row(row) for row in rows]


def add_investment(supabase_client: SupabaseClient, user_id: Union[str, None],
                   investment: Investment) -> Optional[Investment]:
    if not user_id:
        return None
    row = _insert(supabase_client, INVESTMENTS_TABLE, investment_to_row(investment, user_id))
    return investment_from_row(row) if row else None


def remove_investment(supabase_client: SupabaseClient, user_id: Union[str, None], investment_id: str) -> None:
    if not user_id:
        return
    _delete(supabase_client, INVESTMENTS_TABLE, user_id, investment_id)
