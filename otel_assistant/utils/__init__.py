"""
Module utilitaires.

Contient les fonctions transverses utilisées dans l'application.
"""

from .logger import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
