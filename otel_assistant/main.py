"""
Point d'entrée de l'interface Streamlit.

Usage:
    streamlit run otel_assistant/main.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from otel_assistant.config import APP_TITLE, PAGE_ADMIN, PAGE_CHAT
from otel_assistant.exceptions import AssistantError
from otel_assistant.views import get_services, render_admin_page, render_chat_page, render_sidebar
from otel_assistant.utils.logger import setup_logging


def inject_custom_css() -> None:
    """Injecte le CSS de l'application."""
    st.markdown("""
        <style>
        @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap');

        :root {
            --primary: #4f46e5;
            --gray-50: #f9fafb;
            --gray-200: #e5e7eb;
            --gray-500: #6b7280;
            --gray-800: #1f2937;
            --sidebar-bg: linear-gradient(180deg, #312e81 0%, #4338ca 100%);
        }

        .stApp {
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
            background: var(--gray-50);
        }

        header[data-testid="stHeader"] { display: none; }

        .main .block-container {
            padding: 1.25rem 2rem 3rem 2rem;
            max-width: 1000px;
        }

        section[data-testid="stSidebar"] { background: var(--sidebar-bg); }

        section[data-testid="stSidebar"] .stMarkdown,
        section[data-testid="stSidebar"] .stMarkdown p,
        section[data-testid="stSidebar"] label {
            color: white !important;
        }

        .nav-label {
            font-size: 0.7rem;
            font-weight: 600;
            text-transform: uppercase;
            letter-spacing: 0.05em;
            color: rgba(255, 255, 255, 0.7);
            margin-bottom: 0.5rem;
        }

        .chat-header {
            display: flex;
            align-items: center;
            gap: 0.75rem;
            padding: 0.75rem 1rem;
            background: white;
            border-radius: 14px;
            border: 1px solid var(--gray-200);
            margin-bottom: 1rem;
        }

        .chat-avatar {
            width: 40px;
            height: 40px;
            border-radius: 10px;
            background: var(--primary);
            display: flex;
            align-items: center;
            justify-content: center;
            font-size: 1.25rem;
        }

        .chat-info h3 { font-size: 0.95rem; font-weight: 600; color: var(--gray-800); margin: 0; }
        .chat-info p { font-size: 0.8rem; color: var(--gray-500); margin: 0; }

        #MainMenu, footer, .stDeployButton { display: none !important; }
        </style>
    """, unsafe_allow_html=True)


def main() -> None:
    """Fonction principale de l'application."""
    st.set_page_config(
        page_title=APP_TITLE,
        page_icon="🔭",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    setup_logging()
    inject_custom_css()

    try:
        services = get_services()
    except AssistantError as e:
        st.error(f"Configuration invalide : {str(e)}")
        st.code(
            "OPENAI_API_KEY=sk-...\n# ou ANTHROPIC_API_KEY / AWS_ACCESS_KEY_ID + AWS_SECRET_ACCESS_KEY",
            language="bash",
        )
        return

    with st.sidebar:
        st.markdown(f"### 🔭 {APP_TITLE}")
        current_page = st.radio("Navigation", [PAGE_CHAT, PAGE_ADMIN], label_visibility="collapsed")
        st.markdown("---")
        if current_page == PAGE_CHAT:
            render_sidebar(services)

    if current_page == PAGE_CHAT:
        render_chat_page(services)
    elif current_page == PAGE_ADMIN:
        render_admin_page(services)


if __name__ == "__main__":
    main()
