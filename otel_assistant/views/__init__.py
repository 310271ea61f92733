"""
Module views - Interfaces utilisateur Streamlit.

Contient les composants de l'interface :
- Page Chat : Interface conversationnelle
- Page Administration : Gestion de la base de connaissances
"""

from .chat import render_chat_page, render_sidebar
from .admin import render_admin_page
from .state import get_services

__all__ = ["render_chat_page", "render_admin_page", "render_sidebar", "get_services"]
