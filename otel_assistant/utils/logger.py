"""
Module de logging structuré.

Fournit un système de logging uniforme pour toute l'application,
avec formatage cohérent et niveaux configurables.
"""

import logging
import sys
from typing import Optional
from functools import lru_cache

from otel_assistant.config import get_settings


ROOT_LOGGER_NAME = "otel_assistant"


class ColoredFormatter(logging.Formatter):
    """
    Formatter avec coloration pour une meilleure lisibilité en console.

    Utilise les codes ANSI pour colorer les messages selon leur niveau.
    """

    COLORS = {
        logging.DEBUG: "\033[36m",     # Cyan
        logging.INFO: "\033[32m",      # Vert
        logging.WARNING: "\033[33m",   # Jaune
        logging.ERROR: "\033[31m",     # Rouge
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Formate le message avec la couleur appropriée."""
        color = self.COLORS.get(record.levelno, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure le système de logging de l'application.

    Initialise un handler console avec formatage coloré et le niveau
    défini dans la configuration. Les appels répétés (rechargements
    Streamlit, création de plusieurs apps FastAPI) ne dupliquent pas
    le handler.

    Args:
        level: Niveau à appliquer (défaut: config)
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()

    # Format du message
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not any(getattr(h, "_otel_assistant", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            ColoredFormatter(fmt=log_format, datefmt=date_format)
        )
        console_handler._otel_assistant = True
        root_logger.addHandler(console_handler)

    # Réduction du bruit des bibliothèques tierces
    for noisy in ("httpx", "chromadb", "openai", "anthropic", "botocore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@lru_cache(maxsize=32)
def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Récupère un logger configuré pour le module spécifié.

    Args:
        name: Nom du module (utilisé comme suffixe du logger)

    Returns:
        logging.Logger: Logger configuré

    Example:
        >>> logger = get_logger("rag")
        >>> logger.info("Recherche du contexte en cours")
    """
    logger_name = f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME
    return logging.getLogger(logger_name)
