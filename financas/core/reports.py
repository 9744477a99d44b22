# financas/core/reports.py
"""Relatórios calculados no Supabase (funções RPC)."""
import logging
from typing import Any, Dict, List, Optional, Union

from supabase import Client as SupabaseClient

from financas.core.errors import DataAccessError

logger = logging.getLogger(__name__)


def _rpc(supabase_client: SupabaseClient, name: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    try:
        if params is None:
            response = supabase_client.rpc(name).execute()
        else:
            response = supabase_client.rpc(name, params).execute()
        return response.data or []
    except Exception as e:
        logger.error("Erro ao executar RPC %s: %s", name, e)
        raise DataAccessError(f"Não foi possível gerar o relatório ({name}).") from e


def get_financial_summary(supabase_client: SupabaseClient, user_id: Union[str, None],
                          target_month: int, target_year: int) -> List[Dict[str, Any]]:
    if not user_id:
        return []
    return _rpc(supabase_client, 'get_financial_summary',
                {'target_month': target_month, 'target_year': target_year})


def get_evolution_data(supabase_client: SupabaseClient, user_id: Union[str, None],
                       months_back: int = 12) -> List[Dict[str, Any]]:
    """Receitas e despesas dos últimos `months_back` meses."""
    if not user_id:
        return []
    return _rpc(supabase_client, 'get_evolution_data', {'months_back': months_back})


def get_expense_categories(supabase_client: SupabaseClient, user_id: Union[str, None],
                           target_month: int, target_year: int) -> List[Dict[str, Any]]:
    if not user_id:
        return []
    return _rpc(supabase_client, 'get_expense_categories',
                {'target_month': target_month, 'target_year': target_year})


def get_client_expense_allocation(supabase_client: SupabaseClient, user_id: Union[str, None],
                                  target_month: int, target_year: int) -> List[Dict[str, Any]]:
    if not user_id:
        return []
    return _rpc(supabase_client, 'get_client_expense_allocation',
                {'target_month': target_month, 'target_year': target_year})


def check_mei_limits(supabase_client: SupabaseClient, user_id: Union[str, None]) -> Optional[Dict[str, Any]]:
    """Situação do faturamento frente ao limite anual do MEI (primeira linha do RPC)."""
    if not user_id:
        return None
    data = _rpc(supabase_client, 'check_mei_limits')
    return data[0] if data else None
