"""
Interface d'administration de la base de connaissances.

Affiche l'état de la collection, permet d'ajouter un document,
de tester la recherche et de vider la collection.
"""

import streamlit as st

from otel_assistant.container import Services
from otel_assistant.exceptions import AssistantError
from otel_assistant.utils.logger import get_logger


logger = get_logger("admin_page")


def render_page_header() -> None:
    """Affiche l'en-tête de la page."""
    st.markdown("""
        <div class="chat-header">
            <div class="chat-avatar" style="background: #059669;">🗄️</div>
            <div class="chat-info">
                <h3>Base de connaissances</h3>
                <p>Collection vectorielle de la documentation</p>
            </div>
        </div>
    """, unsafe_allow_html=True)


def render_collection_info(services: Services) -> None:
    """Affiche les informations de la collection."""
    info = services.vectorstore.get_collection_info()

    col1, col2, col3 = st.columns(3)
    col1.metric("Collection", info["name"])
    col2.metric("Chunks indexés", info["count"] if info["count"] is not None else "N/A")
    col3.metric("Statut", "Ouverte" if info["initialized"] else "Fermée")
    st.caption(f"Emplacement : {info['location']}")


def render_ingest_form(services: Services) -> None:
    """Formulaire d'ajout d'un document."""
    with st.form("ingest_form", clear_on_submit=True):
        st.markdown("**Ajouter un document**")
        title = st.text_input("Titre", max_chars=200)
        source = st.text_input("Source", value="otel-docs", max_chars=100)
        content = st.text_area("Contenu (Markdown)", height=200)
        submitted = st.form_submit_button("Indexer", type="primary")

    if not submitted:
        return

    if not title.strip() or not source.strip() or len(content.strip()) < 10:
        st.warning("Titre, source et un contenu d'au moins 10 caractères sont requis.")
        return

    try:
        with st.spinner("Indexation en cours..."):
            chunks = services.ingestion.ingest_text(
                content=content.strip(), title=title.strip(), source=source.strip()
            )
        st.success(f"Document indexé ({chunks} chunks)")

    except AssistantError as e:
        logger.error(f"Erreur d'indexation: {str(e)}")
        st.error(f"Erreur lors de l'indexation: {str(e)}")


def render_search(services: Services) -> None:
    """Recherche brute dans la collection, sans génération."""
    st.markdown("**Tester la recherche**")
    query = st.text_input("Requête", key="admin_query")
    max_results = st.slider("Résultats", 1, 20, 5, key="admin_max_results")

    if not query.strip():
        return

    try:
        results = services.vectorstore.similarity_search_with_score(query, k=max_results)
    except AssistantError as e:
        st.error(f"Erreur lors de la recherche: {str(e)}")
        return

    if not results:
        st.info("Aucun résultat : la collection est vide.")

    for doc, score in results:
        with st.expander(f"{doc.metadata.get('title', 'Sans titre')} · {score:.3f}"):
            st.caption(f"Source : {doc.metadata.get('source', 'unknown')}")
            st.markdown(doc.page_content)


def render_danger_zone(services: Services) -> None:
    """Suppression de la collection."""
    st.markdown("**Zone dangereuse**")
    confirm = st.checkbox("Je confirme vouloir supprimer tous les chunks indexés")

    if st.button("Supprimer la collection", disabled=not confirm):
        try:
            services.vectorstore.delete_collection()
            services.vectorstore.initialize()
            st.success("Collection supprimée")
            st.rerun()
        except AssistantError as e:
            st.error(f"Erreur lors de la suppression: {str(e)}")


def render_admin_page(services: Services) -> None:
    """Point d'entrée principal de la page d'administration."""
    render_page_header()
    render_collection_info(services)
    st.markdown("---")
    render_ingest_form(services)
    st.markdown("---")
    render_search(services)
    st.markdown("---")
    render_danger_zone(services)
