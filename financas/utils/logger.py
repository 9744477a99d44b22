# financas/utils/logger.py
import logging
import sys

from financas.config import LOG_LEVEL


def setup_logger(name: str = "financas", level: str = LOG_LEVEL) -> logging.Logger:
    """Configura o logger raiz do pacote com saída no console."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.hasHandlers():
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
