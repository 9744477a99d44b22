from typing import Any

from telegram import Update
from telegram.ext import ContextTypes

from financas.bot.session import load_session, month_label
from financas.core import charts, reports
from financas.core.errors import FinanceError
from financas.utils.text_utils import format_brl


async def chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Gera e envia um gráfico: resumo do mês (padrão), categorias ou evolução."""
    session = await load_session(update, context)
    if session is None:
        return

    kind = context.args[0].strip().lower() if context.args else "resumo"
    await update.message.reply_text("Gerando o gráfico, por favor aguarde...")

    if kind == "categorias":
        chart_buffer = charts.generate_category_chart(
            session.filtered_expenses, title=f"Despesas por categoria - {month_label(session)}"
        )
        caption = "Aqui estão suas despesas por categoria:"
    elif kind in ("evolucao", "evolução"):
        chart_buffer = charts.generate_evolution_chart(
            session.incomes, session.expenses, session.investments, today=session.today
        )
        caption = "Aqui está a evolução dos últimos 12 meses:"
    else:
        chart_buffer = charts.generate_month_summary_chart(
            session.get_total_summary(), title=f"Resumo - {month_label(session)}"
        )
        caption = f"Aqui está o resumo de {month_label(session)}:"

    if chart_buffer:
        chart_buffer.name = f"{kind}_chart.png"
        await update.message.reply_photo(photo=chart_buffer, caption=caption)
    else:
        await update.message.reply_text(
            "Ainda não tenho dados suficientes para gerar este gráfico. Registre alguns lançamentos primeiro!"
        )


async def mei_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Consulta a situação do faturamento frente ao limite anual do MEI."""
    session = await load_session(update, context)
    if session is None:
        return
    try:
        data = reports.check_mei_limits(session.supabase_client, session.user_id)
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return

    if not data:
        await update.message.reply_text("Não há dados de faturamento para calcular o limite do MEI.")
        return

    lines = ["*Limite do MEI*"]
    for key, value in data.items():
        lines.append(f"• {_label(key)}: {_format_value(key, value)}")
    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")


def _label(key: str) -> str:
    return key.replace("_", " ").capitalize()


def _format_value(key: str, value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if "percent" in key:
            return f"{value:.1f}%"
        if key in ("month", "year", "target_month", "target_year") or key.endswith("_count"):
            return str(value)
        return format_brl(value)
    return str(value)


REPORT_KINDS = {
    "resumo": "Resumo",
    "categorias": "Despesas por categoria",
    "clientes": "Despesas por cliente",
    "evolucao": "Evolução dos últimos 12 meses",
}


async def report_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/relatorio [resumo|categorias|clientes|evolucao]: relatórios calculados no Supabase."""
    session = await load_session(update, context)
    if session is None:
        return

    kind = context.args[0].strip().lower() if context.args else "resumo"
    kind = "evolucao" if kind == "evolução" else kind
    if kind not in REPORT_KINDS:
        await update.message.reply_text("Uso: `/relatorio [resumo|categorias|clientes|evolucao]`")
        return

    month, year = session.selected_month.month, session.selected_month.year
    try:
        if kind == "categorias":
            rows = reports.get_expense_categories(session.supabase_client, session.user_id, month, year)
        elif kind == "clientes":
            rows = reports.get_client_expense_allocation(session.supabase_client, session.user_id, month, year)
        elif kind == "evolucao":
            rows = reports.get_evolution_data(session.supabase_client, session.user_id)
        else:
            rows = reports.get_financial_summary(session.supabase_client, session.user_id, month, year)
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return

    title = REPORT_KINDS[kind]
    if kind != "evolucao":
        title = f"{title} - {month_label(session)}"
    if not rows:
        await update.message.reply_text(f"{title}: sem dados.")
        return

    lines = [f"*{title}*"]
    for row in rows:
        lines.append("• " + ", ".join(f"{_label(k)}: {_format_value(k, v)}" for k, v in row.items()))
    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")
