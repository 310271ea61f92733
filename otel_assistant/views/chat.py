"""
Interface de chat de l'assistant OpenTelemetry.

Permet de choisir le fournisseur LLM, le nombre de chunks de contexte,
et d'afficher les sources et scores de pertinence de chaque réponse.
"""

import streamlit as st

from otel_assistant.container import Services
from otel_assistant.exceptions import AssistantError
from otel_assistant.utils.logger import get_logger


logger = get_logger("chat_page")


def initialize_session_state() -> None:
    """Initialise les variables de session Streamlit."""
    if "messages" not in st.session_state:
        st.session_state.messages = []

    if "provider" not in st.session_state:
        st.session_state.provider = None


def render_sidebar(services: Services) -> None:
    """Affiche les réglages de la conversation."""
    initialize_session_state()

    providers = services.providers.get_available_providers()
    default = services.providers.default_provider.value

    st.markdown('<div class="nav-label">Fournisseur LLM</div>', unsafe_allow_html=True)
    st.session_state.provider = st.selectbox(
        "Fournisseur",
        options=providers,
        index=providers.index(default),
        label_visibility="collapsed",
    )

    if st.button("Tester le fournisseur", use_container_width=True):
        result = services.providers.test_provider(st.session_state.provider)
        if result.success:
            st.success(f"{st.session_state.provider} répond : {result.response[:120]}")
        else:
            st.error(f"{st.session_state.provider} indisponible : {result.error}")

    st.markdown("---")

    st.session_state.max_context_docs = st.slider(
        "Chunks de contexte", min_value=1, max_value=10,
        value=services.settings.max_context_docs,
    )
    st.session_state.include_context = st.toggle("Afficher le contexte", value=False)

    if st.button("+ Nouvelle conversation", use_container_width=True, type="primary"):
        st.session_state.messages = []
        st.rerun()


def render_chat_header() -> None:
    """Affiche l'en-tête du chat."""
    st.markdown("""
        <div class="chat-header">
            <div class="chat-avatar">🔭</div>
            <div class="chat-info">
                <h3>Assistant OpenTelemetry</h3>
                <p>Questions sur l'instrumentation, les traces et les métriques</p>
            </div>
        </div>
    """, unsafe_allow_html=True)


def render_message_details(message: dict) -> None:
    """Affiche les sources et, si demandé, le contexte d'une réponse."""
    if message.get("sources"):
        with st.expander("📚 Sources", expanded=False):
            for source in message["sources"]:
                st.markdown(f"• `{source}`")

    if message.get("relevanceScores"):
        with st.expander(f"🔍 Contexte ({message['documentsUsed']} chunks)", expanded=False):
            for item in message["relevanceScores"]:
                st.markdown(f"• `{item['source']}` : {item['score']:.3f}")
            st.code(message["context"], language="markdown")

    if message.get("provider"):
        st.caption(f"{message['provider']} · {message['timestamp']}")


def render_chat_messages() -> None:
    """Affiche les messages de la conversation."""
    for message in st.session_state.messages:
        with st.chat_message(message["role"], avatar="👤" if message["role"] == "user" else "🔭"):
            st.markdown(message["content"])
            if message["role"] == "assistant":
                render_message_details(message)


def process_user_input(services: Services, user_input: str) -> None:
    """Traite la question de l'utilisateur et génère une réponse."""
    st.session_state.messages.append({"role": "user", "content": user_input})

    with st.chat_message("user", avatar="👤"):
        st.markdown(user_input)

    with st.chat_message("assistant", avatar="🔭"):
        try:
            with st.spinner("🔍 Recherche dans la documentation..."):
                result = services.rag.ask_question(
                    user_input,
                    provider=st.session_state.provider,
                    max_context_docs=st.session_state.max_context_docs,
                    include_context=st.session_state.include_context,
                )

            message = {
                "role": "assistant",
                "content": result["response"],
                "sources": result["sources"],
                "provider": result["metadata"]["provider"],
                "timestamp": result["metadata"]["timestamp"],
                "context": result.get("context"),
                "relevanceScores": result.get("relevanceScores"),
                "documentsUsed": result.get("documentsUsed"),
            }
            st.markdown(message["content"])
            render_message_details(message)

        except AssistantError as e:
            logger.error(f"Erreur lors de la génération: {str(e)}")
            message = {
                "role": "assistant",
                "content": f"**Une erreur s'est produite** ⚠️\n\n`{str(e)}`",
            }
            st.error(message["content"])

    st.session_state.messages.append(message)


def render_chat_page(services: Services) -> None:
    """Point d'entrée principal de la page chat."""
    initialize_session_state()
    render_chat_header()

    if not st.session_state.messages:
        st.info(
            "Posez une question sur OpenTelemetry, par exemple : "
            "« How do I start tracing in a Node.js Express app? »"
        )
    else:
        render_chat_messages()

    if user_input := st.chat_input("💬 Posez votre question..."):
        process_user_input(services, user_input)
