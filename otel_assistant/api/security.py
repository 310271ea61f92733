"""
Dépendances de sécurité de l'API : limitation de débit et clé d'API.
"""

import time
import threading
from typing import Callable, Optional

from fastapi import HTTPException, Request, status

from otel_assistant.utils.logger import get_logger


logger = get_logger("api.security")


class RateLimitExceeded(Exception):
    """Levée quand un client dépasse son quota sur la fenêtre courante."""

    def __init__(self, retry_after: int):
        self.retry_after = retry_after
        super().__init__("Too many requests from this IP, please try again later.")


class RateLimiter:
    """
    Limiteur à fenêtre fixe, par adresse IP.

    Chaque client dispose de `max_requests` requêtes par fenêtre de
    `window_seconds` ; le compteur repart à zéro à la fin de la fenêtre.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> None:
        """
        Comptabilise une requête.

        Raises:
            RateLimitExceeded: Si le quota de la fenêtre est atteint
        """
        now = self._clock()

        with self._lock:
            started, count = self._windows.get(key, (now, 0))

            if now - started >= self.window_seconds:
                started, count = now, 0

            if count >= self.max_requests:
                retry_after = int(started + self.window_seconds - now) + 1
                raise RateLimitExceeded(retry_after)

            self._windows[key] = (started, count + 1)

    def __call__(self, request: Request) -> None:
        client_ip = request.client.host if request.client else "unknown"
        try:
            self.hit(client_ip)
        except RateLimitExceeded:
            logger.warning(f"Limite de requêtes atteinte pour l'IP: {client_ip}")
            raise


class APIKeyChecker:
    """Vérifie l'en-tête X-API-Key quand une clé est configurée."""

    def __init__(self, expected: Optional[str]):
        self.expected = expected

    def __call__(self, request: Request) -> None:
        if not self.expected:
            return

        if request.headers.get("X-API-Key") != self.expected:
            client_ip = request.client.host if request.client else "unknown"
            logger.warning(f"Clé API invalide ou absente (IP: {client_ip})")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing API key",
            )
