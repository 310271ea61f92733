"""
Accès aux services depuis l'interface Streamlit.
"""

import streamlit as st

from otel_assistant.container import Services, build_services
from otel_assistant.utils.logger import get_logger


logger = get_logger("views")


@st.cache_resource
def get_services() -> Services:
    """
    Construit les services une seule fois par processus Streamlit.

    Le cache est partagé entre les sessions : le registre et la base
    vectorielle sont en lecture seule après leur construction.
    """
    logger.info("Construction des services pour l'interface")
    return build_services()
