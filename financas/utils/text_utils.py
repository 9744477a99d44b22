# financas/utils/text_utils.py
import re
import datetime
from typing import List, Union


def to_snake_case(s: str) -> str:
    """Converte um nome de campo para snake_case (nome de coluna no Supabase).
    Ex: "paymentSourceId" -> "payment_source_id"
    Ex: "due_date" -> "due_date" (já está no formato)
    Ex: "isFixed" -> "is_fixed"
    """
    if not s:
        return ""
    s = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', s.strip())
    s = re.sub(r'[^a-zA-Z0-9]+', '_', s)
    return s.strip('_').lower()


def format_brl(value: float) -> str:
    """Formata um valor como moeda brasileira.
    Ex: 1234.5 -> "R$ 1.234,50"
    Ex: -20 -> "-R$ 20,00"
    """
    sign = "-" if value < 0 else ""
    formatted = f"{abs(value):,.2f}"  # 1,234.50
    formatted = formatted.replace(",", "X").replace(".", ",").replace("X", ".")
    return f"{sign}R$ {formatted}"


def format_date_br(value: Union[datetime.date, datetime.datetime]) -> str:
    """Ex: date(2025, 7, 1) -> "01/07/2025"."""
    return value.strftime("%d/%m/%Y")


def parse_date(text: str) -> datetime.date:
    """Aceita AAAA-MM-DD ou DD/MM/AAAA. Levanta ValueError se inválida."""
    text = text.strip()
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Data inválida: '{text}'. Use AAAA-MM-DD.")


def parse_month(text: str) -> datetime.date:
    """Converte 'AAAA-MM' no primeiro dia do mês."""
    try:
        return datetime.datetime.strptime(text.strip(), "%Y-%m").date()
    except ValueError:
        raise ValueError(f"Mês inválido: '{text}'. Use AAAA-MM.")


def parse_amount(text: str) -> float:
    """Aceita '1234.56', '1234,56' e '1.234,56'."""
    cleaned = text.strip().replace("R$", "").replace(" ", "")
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        raise ValueError(f"Valor inválido: '{text}'.")


def split_pipe_args(args: List[str]) -> List[str]:
    """Junta os argumentos de um comando e separa pelos '|'.
    Ex: ["200", "|", "Saque", "|", "2025-07-10"] -> ["200", "Saque", "2025-07-10"]
    """
    joined = " ".join(args or [])
    if not joined.strip():
        return []
    return [part.strip() for part in joined.split("|")]
