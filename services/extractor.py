"""
Localiza los arrays ``var datostazione = [...]`` y ``var coords = [...]``
dentro de la respuesta HTML/JS de refx.php.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from config import FRAGMENT_MEASUREMENTS, FRAGMENT_METADATA

logger = logging.getLogger(__name__)

# Cadena JS con comillas simples o dobles, con escapes
_STRING = r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\""


@dataclass(frozen=True)
class FeedFragments:
    measurements: str
    metadata: str


def _assignment_pattern(name: str) -> "re.Pattern":
    # Las cadenas se consumen enteras para que un "];" dentro de un valor no
    # cierre el literal antes de tiempo; el resto es no codicioso.
    return re.compile(
        r"\bvar\s+" + re.escape(name) + r"\s*=\s*(\[(?:" + _STRING + r"|[^'\"])*?\])\s*;",
        re.DOTALL,
    )


def extract_fragment(text: str, name: str) -> Optional[str]:
    """
    Devuelve el literal ``[...]`` asignado a `name`, o None si no aparece.
    """
    if not text:
        return None
    match = _assignment_pattern(name).search(text)
    if not match:
        return None
    return match.group(1)


def extract_fragments(text: str) -> Optional[FeedFragments]:
    """
    Extrae los dos fragmentos del feed. Si falta alguno devuelve None:
    el llamador conserva lo último publicado.
    """
    measurements = extract_fragment(text, FRAGMENT_MEASUREMENTS)
    metadata = extract_fragment(text, FRAGMENT_METADATA)
    missing = [
        name for name, frag in ((FRAGMENT_MEASUREMENTS, measurements), (FRAGMENT_METADATA, metadata))
        if frag is None
    ]
    if missing:
        logger.warning(f"Fragmentos no encontrados en la respuesta: {', '.join(missing)}")
        return None
    return FeedFragments(measurements=measurements, metadata=metadata)
