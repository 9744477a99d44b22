# financas/core/projection.py
"""
Despesas fixas.

Uma despesa fixa é replicada como registros independentes nos meses seguintes
(um insert por mês, cada um com id próprio). Não há vínculo entre a original e
as cópias, e as cópias não são criadas em lote: se um insert falhar, os
anteriores continuam gravados e o resultado informa quais meses falharam.
"""
import logging
import uuid
from typing import List, Union

from dateutil.relativedelta import relativedelta
from supabase import Client as SupabaseClient

from financas.core import db
from financas.core.errors import FinanceError, ValidationError
from financas.core.models import CopyResult, Expense, STATUS_UNPAID

logger = logging.getLogger(__name__)


def build_fixed_expense_copies(template: Expense, months_ahead: int) -> List[Expense]:
    """Monta (sem gravar) as cópias dos próximos `months_ahead` meses."""
    if months_ahead < 1:
        raise ValidationError("Informe pelo menos 1 mês para as cópias da despesa fixa.")

    copies = []
    for i in range(1, months_ahead + 1):
        # Sempre a partir do vencimento original: 31/01 -> 28/02 -> 31/03
        copies.append(template.with_changes(
            id=str(uuid.uuid4()),
            due_date=template.due_date + relativedelta(months=i),
            status=STATUS_UNPAID,
            payment_source_id=None,
            is_fixed=True,
            created_at=None,
        ))
    return copies


def create_fixed_expense_copies(supabase_client: SupabaseClient,
                                user_id: Union[str, None],
                                template: Expense,
                                months_ahead: int) -> CopyResult:
    """Grava as cópias uma a uma e devolve quais deram certo e quais falharam."""
    result = CopyResult()
    if not user_id:
        return result

    for index, copy in enumerate(build_fixed_expense_copies(template, months_ahead), start=1):
        try:
            saved = db.add_expense(supabase_client, user_id, copy)
        except FinanceError as e:
            logger.warning("Cópia %s/%s da despesa fixa '%s' falhou: %s",
                           index, months_ahead, template.description, e)
            result.failed.append((index, str(e)))
            continue
        result.created.append((index, saved or copy))

    logger.info("Despesa fixa '%s': %s cópias criadas, %s falharam",
                template.description, result.created_count, result.failed_count)
    return result
