import logging

from telegram import Update
from telegram.ext import ContextTypes

from financas.bot.session import (
    find_by_id_prefix,
    find_client,
    load_session,
    match_category,
    parse_status,
    parse_type,
    reply_busy_if_mutating,
    short_id,
)
from financas.config import FIXED_COPIES_MAX_MONTHS
from financas.core.errors import FinanceError
from financas.core.models import Expense, Income, Investment, STATUS_PAID, STATUS_UNPAID
from financas.utils.text_utils import (
    format_brl,
    format_date_br,
    parse_amount,
    parse_date,
    split_pipe_args,
)

logger = logging.getLogger(__name__)


async def clients_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista os clientes cadastrados."""
    session = await load_session(update, context)
    if session is None:
        return
    if not session.clients:
        await update.message.reply_text("Nenhum cliente cadastrado. Use `/cliente_novo Nome` para começar.")
        return
    lines = ["👥 Clientes:"]
    for client in sorted(session.clients, key=lambda c: c.name.lower()):
        lines.append(f"[{short_id(client.id)}] {client.name}")
    await update.message.reply_text("\n".join(lines))


async def add_client_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Cadastra um cliente: /cliente_novo Nome."""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    name = " ".join(context.args or []).strip()
    if not name:
        await update.message.reply_text("Uso: `/cliente_novo Nome do Cliente`")
        return
    try:
        session.add_client(name)
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return
    await update.message.reply_text(f"✅ Cliente '{name}' cadastrado!")


async def remove_client_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Remove um cliente: /cliente_remover id."""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    if not context.args:
        await update.message.reply_text("Uso: `/cliente_remover id`")
        return
    try:
        client = find_client(session.clients, " ".join(context.args))
        session.remove_client(client.id)
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return
    await update.message.reply_text(f"🗑️ Cliente '{client.name}' removido.")


async def add_income_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/receita valor | cliente | AAAA-MM-DD | descrição [| categoria]"""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    parts = split_pipe_args(context.args)
    if len(parts) < 4:
        await update.message.reply_text("Uso: `/receita valor | cliente | AAAA-MM-DD | descrição [| categoria]`")
        return
    try:
        client = find_client(session.clients, parts[1])
        income = Income(
            description=parts[3],
            amount=parse_amount(parts[0]),
            client_id=client.id,
            payment_date=parse_date(parts[2]),
            category=parts[4] if len(parts) > 4 else "",
        )
        session.add_income(income)
    except (ValueError, FinanceError) as e:
        await update.message.reply_text(f"❌ {e}")
        return

    pending = " (ainda a receber)" if income.payment_date > session.today else ""
    await update.message.reply_text(
        f"✅ Receita de {format_brl(income.amount)} de {client.name} em "
        f"{format_date_br(income.payment_date)} registrada{pending}! 🎉"
    )


async def add_expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/despesa tipo | valor | categoria | AAAA-MM-DD | descrição [| status] [| cliente]"""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    parts = split_pipe_args(context.args)
    if len(parts) < 5:
        await update.message.reply_text(
            "Uso: `/despesa tipo | valor | categoria | AAAA-MM-DD | descrição [| status] [| cliente]`"
        )
        return
    try:
        expense_type = parse_type(parts[0])
        status = parse_status(parts[5]) if len(parts) > 5 and parts[5] else STATUS_UNPAID
        source = find_client(session.clients, parts[6]) if len(parts) > 6 and parts[6] else None
        expense = Expense(
            description=parts[4],
            amount=parse_amount(parts[1]),
            category=match_category(parts[2], expense_type),
            due_date=parse_date(parts[3]),
            status=status,
            payment_source_id=source.id if source else None,
            type=expense_type,
        )
        session.add_expense(expense)
    except (ValueError, FinanceError) as e:
        await update.message.reply_text(f"❌ {e}")
        return

    await update.message.reply_text(
        f"✅ Despesa '{expense.description}' de {format_brl(expense.amount)} "
        f"({expense.category}) com vencimento em {format_date_br(expense.due_date)} registrada!"
    )


async def add_investment_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/investimento valor | categoria | AAAA-MM-DD | descrição"""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    parts = split_pipe_args(context.args)
    if len(parts) < 4:
        await update.message.reply_text("Uso: `/investimento valor | categoria | AAAA-MM-DD | descrição`")
        return
    try:
        investment = Investment(
            description=parts[3],
            amount=parse_amount(parts[0]),
            category=parts[1],
            date=parse_date(parts[2]),
        )
        session.add_investment(investment)
    except (ValueError, FinanceError) as e:
        await update.message.reply_text(f"❌ {e}")
        return
    await update.message.reply_text(
        f"✅ Investimento de {format_brl(investment.amount)} ({investment.category}) registrado! 📈"
    )


async def pay_expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/pagar id [cliente]: marca a despesa como paga, opcionalmente com o cliente de origem."""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    if not context.args:
        await update.message.reply_text("Uso: `/pagar id [cliente]`")
        return
    try:
        expense = find_by_id_prefix(session.expenses, context.args[0], label="despesa")
        source_id = expense.payment_source_id
        if len(context.args) > 1:
            source_id = find_client(session.clients, " ".join(context.args[1:])).id
        session.update_expense_status(expense.id, STATUS_PAID, source_id)
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return
    await update.message.reply_text(f"✅ Despesa '{expense.description}' marcada como paga.")


async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/status id a pagar|pago|guardado"""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    if not context.args or len(context.args) < 2:
        await update.message.reply_text("Uso: `/status id a pagar|pago|guardado`")
        return
    try:
        expense = find_by_id_prefix(session.expenses, context.args[0], label="despesa")
        status = parse_status(" ".join(context.args[1:]))
        session.update_expense_status(expense.id, status, expense.payment_source_id)
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return
    await update.message.reply_text(f"✅ Status de '{expense.description}' atualizado.")


async def fixed_expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/fixa id meses: marca a despesa como fixa e cria cópias para os próximos meses."""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    if not context.args or len(context.args) < 2 or not context.args[1].isdigit():
        await update.message.reply_text("Uso: `/fixa id meses` (ex: `/fixa 1a2b3c4d 6`)")
        return

    months = int(context.args[1])
    if not 1 <= months <= FIXED_COPIES_MAX_MONTHS:
        await update.message.reply_text(f"❌ Informe entre 1 e {FIXED_COPIES_MAX_MONTHS} meses.")
        return

    try:
        expense = find_by_id_prefix(session.expenses, context.args[0], label="despesa")
        result = session.make_expense_fixed(expense.id, months)
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return

    if result.ok:
        await update.message.reply_text(f"🔁 Despesa fixa criada para {months} meses à frente!")
    else:
        failed = ", ".join(str(index) for index, _ in result.failed)
        logger.warning("Cópias com falha para a despesa %s: %s", expense.description, failed)
        await update.message.reply_text(
            f"⚠️ {result.created_count} de {months} cópias criadas. "
            f"Falharam os meses +{failed}; as demais foram salvas."
        )


async def remove_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/remover receita|despesa|investimento id"""
    session = await load_session(update, context)
    if session is None or await reply_busy_if_mutating(update, session):
        return
    if not context.args or len(context.args) < 2:
        await update.message.reply_text("Uso: `/remover receita|despesa|investimento id`")
        return

    kind = context.args[0].strip().lower()
    try:
        if kind == "receita":
            record = find_by_id_prefix(session.incomes, context.args[1], label="receita")
            session.remove_income(record.id)
        elif kind == "despesa":
            record = find_by_id_prefix(session.expenses, context.args[1], label="despesa")
            session.remove_expense(record.id)
        elif kind == "investimento":
            record = find_by_id_prefix(session.investments, context.args[1], label="investimento")
            session.remove_investment(record.id)
        else:
            await update.message.reply_text("Tipo inválido. Use receita, despesa ou investimento.")
            return
    except FinanceError as e:
        await update.message.reply_text(f"❌ {e}")
        return
    await update.message.reply_text(f"🗑️ {kind.capitalize()} '{record.description}' removida(o).")
