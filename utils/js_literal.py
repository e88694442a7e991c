"""
Parser seguro de arrays literales JS con comillas simples.

El feed embebe algo como ``[['101','Bergamo','BG','100','200'], ...]``.
Nunca se evalúa como código: se reescriben las cadenas entre comillas simples
a cadenas JSON y el resultado se pasa a ``json.loads``.
"""
import json
import logging
import re
from typing import Any, List

logger = logging.getLogger(__name__)

# Escapes que JSON acepta tal cual dentro de una cadena
_JSON_ESCAPES = {'"', "\\", "/", "b", "f", "n", "r", "t", "u"}

# Coma colgante antes de cierre: [1, 2, ] -> [1, 2]
_TRAILING_COMMA = re.compile(r",\s*([\]}])")


class LiteralSyntaxError(ValueError):
    pass


def _read_string(text: str, start: int, quote: str):
    """
    Lee una cadena JS que empieza en `start` (la comilla de apertura).

    Returns:
        Tupla (cadena JSON con comillas dobles, índice tras la comilla de cierre)
    """
    out = ['"']
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            if i + 1 >= n:
                break
            nxt = text[i + 1]
            if nxt == "'":
                out.append("'")
            elif nxt in _JSON_ESCAPES:
                out.append("\\" + nxt)
            elif nxt == "\n":
                # Continuación de línea JS
                pass
            else:
                # \x, \v, \0... se toman literalmente
                out.append(json.dumps(nxt)[1:-1])
            i += 2
            continue
        if ch == quote:
            out.append('"')
            return "".join(out), i + 1
        if ch == '"':
            out.append('\\"')
        elif ch in "\n\r\t":
            out.append(json.dumps(ch)[1:-1])
        else:
            out.append(ch)
        i += 1
    raise LiteralSyntaxError(f"Cadena sin cerrar en la posición {start}")


def to_json(fragment: str) -> str:
    """Reescribe un literal JS (comillas simples) como documento JSON"""
    parts = []
    i = 0
    n = len(fragment)
    while i < n:
        ch = fragment[i]
        if ch in ("'", '"'):
            converted, i = _read_string(fragment, i, ch)
            parts.append(converted)
            continue
        parts.append(ch)
        i += 1
    return _remove_trailing_commas("".join(parts))


def _remove_trailing_commas(doc: str) -> str:
    # Solo fuera de cadenas: se trocea por cadenas JSON ya normalizadas
    pieces = re.split(r'("(?:[^"\\]|\\.)*")', doc)
    for idx in range(0, len(pieces), 2):
        pieces[idx] = _TRAILING_COMMA.sub(r"\1", pieces[idx])
    return "".join(pieces)


def dump_literal(value: Any) -> str:
    """Serializa al mismo dialecto del feed (cadenas con comillas simples)"""
    if isinstance(value, list):
        return "[" + ",".join(dump_literal(v) for v in value) + "]"
    if isinstance(value, str):
        body = value.replace("\\", "\\\\").replace("'", "\\'")
        body = body.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
        return f"'{body}'"
    return json.dumps(value)


def parse_literal_array(fragment: str) -> List[Any]:
    """
    Convierte un fragmento ``[[...], ...]`` en una lista anidada.

    Ante cualquier entrada mal formada devuelve ``[]`` y deja constancia en el
    log; nunca propaga la excepción.
    """
    if not isinstance(fragment, str) or not fragment.strip():
        logger.warning("Fragmento literal vacío")
        return []
    try:
        data = json.loads(to_json(fragment.strip()))
    except (LiteralSyntaxError, ValueError, RecursionError) as e:
        logger.warning(f"Fragmento literal mal formado: {e}")
        return []
    if not isinstance(data, list):
        logger.warning(f"El fragmento no es un array (tipo {type(data).__name__})")
        return []
    return data
