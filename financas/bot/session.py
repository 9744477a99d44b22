# financas/bot/session.py
"""Helpers compartilhados pelos comandos: sessão do usuário e formatação."""
from typing import Iterable, List, Optional, TypeVar, Union

from telegram import Update
from telegram.ext import ContextTypes

from financas.core.errors import FinanceError, ValidationError
from financas.core.models import (
    BUSINESS_CATEGORIES,
    Client,
    FinancialSummary,
    PERSONAL_CATEGORIES,
    STATUS_PAID,
    STATUS_SAVED,
    STATUS_UNPAID,
    TYPE_BUSINESS,
    TYPE_PERSONAL,
)
from financas.core.state import FinanceSession
from financas.utils.text_utils import format_brl


T = TypeVar("T")

NOT_AUTHENTICATED_MESSAGE = (
    "🔒 Você não está autenticado. Peça ao administrador para vincular seu usuário do Telegram."
)

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]

TYPE_ALIASES = {
    "empresa": TYPE_BUSINESS,
    "business": TYPE_BUSINESS,
    "pj": TYPE_BUSINESS,
    "pessoal": TYPE_PERSONAL,
    "personal": TYPE_PERSONAL,
    "pf": TYPE_PERSONAL,
}

STATUS_ALIASES = {
    "a pagar": STATUS_UNPAID,
    "pendente": STATUS_UNPAID,
    "unpaid": STATUS_UNPAID,
    "pago": STATUS_PAID,
    "paga": STATUS_PAID,
    "paid": STATUS_PAID,
    "guardado": STATUS_SAVED,
    "saved": STATUS_SAVED,
}


def get_or_create_session(update: Update, context: ContextTypes.DEFAULT_TYPE) -> FinanceSession:
    """Uma FinanceSession por usuário do Telegram, guardada em user_data."""
    session = context.user_data.get("session")
    if session is None:
        user_map = context.bot_data.get("user_map", {})
        user_id = user_map.get(update.effective_user.id) if update.effective_user else None
        session = FinanceSession(context.bot_data["supabase_client"], user_id=user_id)
        context.user_data["session"] = session
    return session


async def load_session(update: Update, context: ContextTypes.DEFAULT_TYPE) -> Union[FinanceSession, None]:
    """Recarrega os dados da sessão. Retorna None (e avisa o usuário) se não der para continuar."""
    session = get_or_create_session(update, context)
    if not session.is_authenticated:
        await update.message.reply_text(NOT_AUTHENTICATED_MESSAGE)
        return None
    try:
        session.refresh()
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return None
    return session


async def reply_busy_if_mutating(update: Update, session: FinanceSession) -> bool:
    if session.is_mutating:
        await update.message.reply_text("⏳ Ainda estou salvando a operação anterior, aguarde um instante.")
        return True
    return False


def month_label(session: FinanceSession) -> str:
    month = session.selected_month
    return f"{MONTH_NAMES[month.month - 1]}/{month.year}"


def parse_type(text: str) -> str:
    value = TYPE_ALIASES.get(text.strip().lower())
    if not value:
        raise ValidationError(f"Tipo '{text}' inválido. Use 'empresa' ou 'pessoal'.")
    return value


def parse_status(text: str) -> str:
    value = STATUS_ALIASES.get(text.strip().lower())
    if not value:
        raise ValidationError(f"Status '{text}' inválido. Use 'a pagar', 'pago' ou 'guardado'.")
    return value


def match_category(text: str, type: str) -> str:
    """Encontra a categoria (sem diferenciar maiúsculas) na lista do tipo de despesa."""
    options = BUSINESS_CATEGORIES if type == TYPE_BUSINESS else PERSONAL_CATEGORIES
    normalized = text.strip().lower().replace("_", " ")
    for category in options:
        if category.lower() == normalized:
            return category
    raise ValidationError(f"Categoria '{text}' inválida. Opções: {', '.join(options)}.")


def find_by_id_prefix(records: Iterable[T], prefix: str, label: str = "registro") -> T:
    """Localiza um registro pelo id completo ou pelos primeiros caracteres exibidos nas listagens."""
    prefix = prefix.strip().lower()
    matches: List[T] = [r for r in records if r.id and r.id.lower().startswith(prefix)]
    if not prefix or not matches:
        raise ValidationError(f"Nenhum(a) {label} encontrado(a) com o id '{prefix}'.")
    if len(matches) > 1:
        raise ValidationError(f"Mais de um(a) {label} começa com '{prefix}'. Informe mais caracteres.")
    return matches[0]


def find_client(clients: Iterable[Client], text: str) -> Client:
    """Aceita o nome do cliente (sem diferenciar maiúsculas) ou o início do id."""
    clients = list(clients)
    by_name = [c for c in clients if c.name.lower() == text.strip().lower()]
    if by_name:
        return by_name[0]
    return find_by_id_prefix(clients, text, label="cliente")


def short_id(record_id: Optional[str]) -> str:
    return (record_id or "")[:8]


def format_summary(summary: FinancialSummary, title: str, session: FinanceSession) -> str:
    lines = [
        f"*{title}*",
        "",
        f"💰 Receita recebida: {format_brl(summary.total_income)}",
        f"📋 Despesas: {format_brl(summary.total_expenses)}",
        f"   ✅ Pagas: {format_brl(summary.paid_expenses)}",
        f"   ⏳ A pagar: {format_brl(summary.unpaid_expenses)}",
        f"   🐷 Guardadas: {format_brl(summary.saved_expenses)}",
        f"📈 Investimentos: {format_brl(summary.total_investments)}",
        "",
        f"🏢 Caixa empresa: {format_brl(summary.business_balance)}",
        f"💸 Saques: {format_brl(summary.total_withdrawals)}",
        f"👤 Disponível pessoal: {format_brl(summary.personal_balance)}",
        f"🧾 Saldo disponível: {format_brl(summary.available_balance)}",
    ]
    if summary.expenses_by_source:
        lines.append("")
        lines.append("*Despesas por cliente de origem:*")
        for client_id, amount in summary.expenses_by_source.items():
            client = session.get_client_by_id(client_id)
            name = client.name if client else "Cliente removido"
            lines.append(f"• {name}: {format_brl(amount)}")
    return "\n".join(lines)
