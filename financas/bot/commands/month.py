from telegram import Update
from telegram.ext import ContextTypes

from financas.bot.session import (
    format_summary,
    get_or_create_session,
    load_session,
    month_label,
    short_id,
    NOT_AUTHENTICATED_MESSAGE,
)
from financas.core.models import STATUS_LABELS, TYPE_LABELS
from financas.utils.text_utils import format_brl, format_date_br


async def month_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Mostra ou altera o mês selecionado."""
    session = get_or_create_session(update, context)
    if not session.is_authenticated:
        await update.message.reply_text(NOT_AUTHENTICATED_MESSAGE)
        return

    if context.args:
        arg = context.args[0].strip().lower()
        if arg in ("proximo", "próximo", "+"):
            session.next_month()
        elif arg in ("anterior", "-"):
            session.previous_month()
        else:
            try:
                session.set_selected_month(arg)
            except ValueError as e:
                await update.message.reply_text(f"❌ {e}")
                return

    await update.message.reply_text(f"📅 Mês selecionado: {month_label(session)}")


async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Resumo financeiro do mês: total, empresa ou pessoal."""
    session = await load_session(update, context)
    if session is None:
        return

    view = context.args[0].strip().lower() if context.args else ""
    if view == "empresa":
        summary = session.get_business_summary()
        title = f"Resumo Empresa - {month_label(session)}"
    elif view == "pessoal":
        summary = session.get_personal_summary()
        title = f"Resumo Pessoal - {month_label(session)}"
    else:
        summary = session.get_total_summary()
        title = f"Resumo Geral - {month_label(session)}"

    await update.message.reply_text(format_summary(summary, title, session), parse_mode="Markdown")


async def list_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista receitas, despesas e/ou investimentos do mês selecionado com seus ids."""
    session = await load_session(update, context)
    if session is None:
        return

    what = context.args[0].strip().lower() if context.args else "tudo"
    lines = [f"Lançamentos de {month_label(session)}", ""]

    if what in ("tudo", "receitas"):
        lines.append("💰 Receitas:")
        incomes = sorted(session.filtered_incomes, key=lambda i: i.payment_date)
        for income in incomes:
            client = session.get_client_by_id(income.client_id)
            pending = "" if income.payment_date <= session.today else " (a receber)"
            lines.append(
                f"[{short_id(income.id)}] {format_date_br(income.payment_date)} "
                f"{format_brl(income.amount)} {income.description} "
                f"- {client.name if client else 'Sem cliente'}{pending}"
            )
        if not incomes:
            lines.append("Nenhuma receita.")
        lines.append("")

    if what in ("tudo", "despesas"):
        lines.append("📋 Despesas:")
        expenses = sorted(session.filtered_expenses, key=lambda e: e.due_date)
        for expense in expenses:
            source = session.get_client_by_id(expense.payment_source_id) if expense.payment_source_id else None
            fixed = " 🔁" if expense.is_fixed else ""
            lines.append(
                f"[{short_id(expense.id)}] {format_date_br(expense.due_date)} "
                f"{format_brl(expense.amount)} {expense.description} "
                f"({TYPE_LABELS.get(expense.type, expense.type)} - {expense.category}) "
                f"{STATUS_LABELS.get(expense.status, expense.status)}"
                f"{f' via {source.name}' if source else ''}{fixed}"
            )
        if not expenses:
            lines.append("Nenhuma despesa.")
        lines.append("")

    if what in ("tudo", "investimentos"):
        lines.append("📈 Investimentos:")
        investments = sorted(session.filtered_investments, key=lambda i: i.date)
        for investment in investments:
            lines.append(
                f"[{short_id(investment.id)}] {format_date_br(investment.date)} "
                f"{format_brl(investment.amount)} {investment.description} ({investment.category})"
            )
        if not investments:
            lines.append("Nenhum investimento.")

    await update.message.reply_text("\n".join(lines).strip())


async def limits_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Mostra quanto ainda pode ser sacado, no total e por cliente."""
    session = await load_session(update, context)
    if session is None:
        return

    limits = session.withdrawal_limits()
    lines = [
        "*Limites de saque*",
        f"Total disponível: {format_brl(limits.available_total)}",
    ]
    if limits.client_limits:
        lines.append("")
        for client_id, limit in limits.client_limits.items():
            client = session.get_client_by_id(client_id)
            lines.append(f"• {client.name if client else client_id}: {format_brl(limit)}")
    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")
