# financas/bot/commands/__init__.py

from .utils import start_command, help_command
from .month import (
    limits_command,
    list_command,
    month_command,
    summary_command,
)
from .entries import (
    add_client_command,
    add_expense_command,
    add_income_command,
    add_investment_command,
    clients_command,
    fixed_expense_command,
    pay_expense_command,
    remove_client_command,
    remove_command,
    status_command,
)
from .reports import chart_command, mei_command, report_command

# Nome do comando no Telegram -> função
ALL_COMMANDS = {
    "start": start_command,
    "help": help_command,
    "mes": month_command,
    "resumo": summary_command,
    "listar": list_command,
    "limites": limits_command,
    "clientes": clients_command,
    "cliente_novo": add_client_command,
    "cliente_remover": remove_client_command,
    "receita": add_income_command,
    "despesa": add_expense_command,
    "investimento": add_investment_command,
    "pagar": pay_expense_command,
    "status": status_command,
    "fixa": fixed_expense_command,
    "remover": remove_command,
    "grafico": chart_command,
    "mei": mei_command,
    "relatorio": report_command,
}
