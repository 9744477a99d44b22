# financas/config.py
import os
from typing import Dict, Union
from dotenv import load_dotenv

load_dotenv()

# Configurações do Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Configurações do Telegram
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
# Formato: "<telegram_id>:<supabase_user_id>,<telegram_id>:<supabase_user_id>"
TELEGRAM_USER_MAP = os.getenv("TELEGRAM_USER_MAP", "")

# Logs
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Limite de meses aceitos pelo comando /fixa
FIXED_COPIES_MAX_MONTHS = int(os.getenv("FIXED_COPIES_MAX_MONTHS", "24"))


def parse_user_map(raw: Union[str, None] = None) -> Dict[int, str]:
    """Converte TELEGRAM_USER_MAP em {telegram_id: supabase_user_id}."""
    raw = TELEGRAM_USER_MAP if raw is None else raw
    mapping = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry or ":" not in entry:
            continue
        telegram_id, user_id = entry.split(":", 1)
        if telegram_id.strip().isdigit() and user_id.strip():
            mapping[int(telegram_id.strip())] = user_id.strip()
    return mapping
