# financas/bot/bot_setup.py
import logging

from telegram.ext import Application, CommandHandler

from financas.bot.commands import ALL_COMMANDS

logger = logging.getLogger(__name__)


def setup_bot(config: dict) -> Application:
    """
    Configura a aplicação do bot do Telegram (comandos e dados compartilhados).
    Retorna o objeto Application configurado, pronto para ser usado pelo servidor web.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).build()

    # Cliente Supabase e mapa de usuários ficam no bot_data para os comandos
    application.bot_data['supabase_client'] = config["SUPABASE_CLIENT"]
    application.bot_data['user_map'] = config.get("USER_MAP", {})

    for name, callback in ALL_COMMANDS.items():
        application.add_handler(CommandHandler(name, callback))

    logger.info("Bot Telegram configurado com %s comandos.", len(ALL_COMMANDS))
    return application
