from telegram import Update
from telegram.ext import ContextTypes


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /start é emitido."""
    await update.message.reply_text(
        "Olá! 👋 Sou seu assistente de finanças da empresa e pessoais.\n\n"
        "Registre receitas dos seus clientes, despesas (empresa e pessoais), saques e investimentos, "
        "e eu calculo o caixa da empresa e quanto você tem disponível no mês.\n\n"
        "Comece com `/mes` para escolher o mês e `/resumo` para ver os números.\n"
        "Use `/help` para ver todos os comandos."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /help é emitido."""
    await update.message.reply_text(
        "Como usar:\n\n"
        "Mês e relatórios:\n"
        "- /mes [AAAA-MM | proximo | anterior]: escolhe o mês exibido.\n"
        "- /resumo [empresa | pessoal]: resumo do mês selecionado.\n"
        "- /listar [receitas | despesas | investimentos]: lançamentos do mês.\n"
        "- /limites: quanto ainda pode ser sacado (total e por cliente).\n"
        "- /grafico [resumo | categorias | evolucao]: gráficos.\n"
        "- /relatorio [resumo | categorias | clientes | evolucao]: relatórios do Supabase.\n"
        "- /mei: situação do faturamento frente ao limite do MEI.\n\n"
        "Clientes:\n"
        "- /clientes\n"
        "- /cliente_novo Nome do Cliente\n"
        "- /cliente_remover id\n\n"
        "Lançamentos (campos separados por |):\n"
        "- /receita valor | cliente | AAAA-MM-DD | descrição [| categoria]\n"
        "- /despesa tipo | valor | categoria | AAAA-MM-DD | descrição [| status] [| cliente]\n"
        "  ex: /despesa empresa | 200 | Saque | 2025-07-10 | Retirada | pago | Acme\n"
        "- /investimento valor | categoria | AAAA-MM-DD | descrição\n"
        "- /pagar id [cliente]: marca a despesa como paga.\n"
        "- /status id a pagar|pago|guardado\n"
        "- /fixa id meses: torna a despesa fixa e cria cópias para os próximos meses.\n"
        "- /remover receita|despesa|investimento id\n\n"
        "Os ids aparecem no /listar (os 8 primeiros caracteres bastam)."
    )
