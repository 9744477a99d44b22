# financas/main.py
"""
Servidor web do bot (webhook do Telegram).

Gunicorn: `gunicorn "financas.main:create_app()"`
"""
import asyncio
import logging
import os

from flask import Flask, request, jsonify
from telegram import Update

from financas.bot.bot_setup import setup_bot
from financas.config import TELEGRAM_BOT_TOKEN, parse_user_map
from financas.core.db import get_supabase_client
from financas.utils.logger import setup_logger

WEBHOOK_PATH = "/webhook"

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    setup_logger("financas")

    supabase_client = get_supabase_client()
    logger.info("Cliente Supabase inicializado.")

    config = {
        "TELEGRAM_BOT_TOKEN": TELEGRAM_BOT_TOKEN,
        "SUPABASE_CLIENT": supabase_client,
        "USER_MAP": parse_user_map(),
    }
    ptb_application = setup_bot(config)

    # A Application precisa ser inicializada uma única vez no startup
    asyncio.run(ptb_application.initialize())
    logger.info("python-telegram-bot Application inicializada.")

    flask_app = Flask(__name__)

    @flask_app.route(WEBHOOK_PATH, methods=['POST'])
    async def telegram_webhook():
        if not request.is_json:
            logger.error("Webhook recebeu requisição sem JSON.")
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        try:
            update = Update.de_json(update_json, ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception:
            logger.exception("Falha ao processar update do Telegram")
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    @flask_app.route("/health", methods=['GET'])
    def health():
        return jsonify({"status": "ok"}), 200

    return flask_app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
