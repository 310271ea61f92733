"""
Commande d'ingestion de la documentation OpenTelemetry.

Usage:
    otel-assistant-ingest                    # Recharge le jeu de référence
    otel-assistant-ingest --file docs.json   # Ingère un autre fichier
    otel-assistant-ingest --keep             # Ajoute sans vider la collection
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from otel_assistant.config import get_settings
from otel_assistant.core.vectorstore import VectorStoreManager
from otel_assistant.services.ingestion import IngestionService
from otel_assistant.utils.logger import get_logger, setup_logging


logger = get_logger("cli")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="otel-assistant-ingest",
        description="Ingère la documentation OpenTelemetry dans la base vectorielle.",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Fichier JSON de documents {title, content, source, metadata} "
             "(défaut: data/sample_otel_docs.json)",
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        default=False,
        help="Conserve la collection existante au lieu de la recréer.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Exécute l'ingestion.

    Returns:
        int: Code de sortie (0 en cas de succès, 1 sinon)
    """
    args = parse_args(argv)
    setup_logging()

    try:
        # Pas de registre de fournisseurs : l'ingestion n'appelle aucun LLM
        vectorstore = VectorStoreManager(settings=get_settings())
        result = IngestionService(vectorstore).run(path=args.file, reset=not args.keep)

    except Exception as e:
        logger.error(f"Échec de l'ingestion: {str(e)}")
        return 1

    logger.info(
        f"Résumé: {result.documents_ingested} documents, "
        f"{result.chunks_created} chunks"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
