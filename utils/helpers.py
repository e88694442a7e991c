"""
Funciones auxiliares generales
"""
import math
import textwrap
import time


def html_clean(s: str) -> str:
    """Limpia y dedenta HTML"""
    return textwrap.dedent(s).strip()


def is_nan(x):
    """Verifica si un valor es NaN"""
    if x is None:
        return True
    return x != x


def safe_float(val, default=float("nan")):
    """Convierte a float; texto vacío o basura devuelve `default`"""
    if val is None or isinstance(val, bool):
        return default
    if isinstance(val, str):
        val = val.strip().replace(",", ".")
        if not val:
            return default
    try:
        out = float(val)
    except (ValueError, TypeError):
        return default
    if math.isinf(out):
        return default
    return out


def safe_text(val) -> str:
    if val is None:
        return ""
    return str(val).strip()


def round_half_up(x: float) -> int:
    """Redondeo clásico (2.5 -> 3, -2.5 -> -2), no el bancario de round()"""
    return int(math.floor(x + 0.5))


def age_string(epoch: float) -> str:
    """Calcula la edad de un dato desde epoch"""
    diff_s = int(time.time() - epoch)
    if diff_s < 60:
        return f"{diff_s}s"
    if diff_s < 3600:
        return f"{diff_s // 60}m"
    return f"{diff_s // 3600}h {(diff_s % 3600) // 60}m"


def fmt_value(x, decimals=1, unit=""):
    """Formatea un valor numérico; NaN se muestra como no disponible"""
    if is_nan(x):
        return "—"
    suffix = f" {unit}" if unit else ""
    return f"{x:.{decimals}f}{suffix}"
