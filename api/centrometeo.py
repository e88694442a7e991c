"""
Cliente del feed en vivo de Centro Meteo Lombardo (refx.php)
"""
import logging
import time
from typing import Optional

import requests

from config import FEED_BASE_URL, FEED_PATH, FEED_TIMEOUT_SECONDS, FEED_USER_AGENT

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class FeedError(Exception):
    def __init__(self, kind: str, status_code: Optional[int] = None):
        self.kind = kind
        self.status_code = status_code
        super().__init__(kind if status_code is None else f"{kind} ({status_code})")


def feed_url(base_url: Optional[str] = None) -> str:
    return f"{(base_url or FEED_BASE_URL).rstrip('/')}{FEED_PATH}"


def fetch_feed_text(
    base_url: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = FEED_TIMEOUT_SECONDS,
) -> str:
    """
    Descarga la página con los arrays embebidos.

    Lanza FeedError("timeout" | "network" | "http" | "empty") si no hay texto utilizable.
    """
    url = feed_url(base_url)
    params = {
        "t": "all",
        "r": str(int(time.time() * 1000)),  # evita cachés intermedias
    }
    headers = {"User-Agent": FEED_USER_AGENT}
    http = session or requests

    logger.info(f"Consultando feed {url}")
    try:
        r = http.get(url, params=params, headers=headers, timeout=timeout)
    except requests.Timeout as e:
        logger.warning(f"Timeout consultando el feed: {e}")
        raise FeedError("timeout") from e
    except requests.RequestException as e:
        logger.warning(f"Error de red consultando el feed: {e}")
        raise FeedError("network") from e

    if r.status_code != 200:
        logger.warning(f"HTTP {r.status_code} en {url}")
        raise FeedError("http", r.status_code)

    if not r.encoding:
        r.encoding = "ISO-8859-1"
    text = r.text
    if not text or not text.strip():
        logger.warning("Respuesta vacía del feed")
        raise FeedError("empty", r.status_code)
    return text
