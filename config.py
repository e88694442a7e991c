"""
Configuración global de MeteoLombardia
"""
import os

# ============================================================
# CONFIGURACIÓN DE REFRESCO
# ============================================================
REFRESH_SECONDS = 60  # Intervalo fijo entre ciclos de descarga
MIN_REFRESH_SECONDS = 15  # Mínimo para no saturar el servidor de origen

# ============================================================
# FEED CENTRO METEO LOMBARDO
# ============================================================
# Se puede apuntar a un proxy (p.ej. "/api" detrás del mismo host) para evitar CORS.
FEED_BASE_URL = os.getenv("METEOLOMBARDIA_FEED_BASE_URL", "http://www.centrometeolombardo.com").rstrip("/")
FEED_PATH = "/Moduli/refx.php"
FEED_TIMEOUT_SECONDS = 15
FEED_USER_AGENT = "MeteoLombardia/1.0"

# Nombres de las variables JS embebidas en la respuesta
FRAGMENT_MEASUREMENTS = "datostazione"
FRAGMENT_METADATA = "coords"

# ============================================================
# VALIDEZ DE LOS DATOS
# ============================================================
STATUS_VALID = "0"
STATUS_WITHDRAWN = "X"
PIXEL_DISABLED = -1
MAX_DATA_AGE_HOURS = 12
FEED_TZ = "Europe/Rome"

# ============================================================
# CALIBRACIÓN PÍXEL -> LAT/LON
# ============================================================
# lat = a * pixelY + c ; lon = b * pixelX + d
# Ajuste contra el lienzo del mapa antiguo; hay que recalibrar de vez en cuando.
PROJ_A = float(os.getenv("METEOLOMBARDIA_PROJ_A", "-0.00262"))
PROJ_B = float(os.getenv("METEOLOMBARDIA_PROJ_B", "0.00383"))
PROJ_C = float(os.getenv("METEOLOMBARDIA_PROJ_C", "46.66"))
PROJ_D = float(os.getenv("METEOLOMBARDIA_PROJ_D", "8.49"))

# ============================================================
# COLORES DE TEMPERATURA
# ============================================================
PALETTE_SIZE = 25
MEAN_OUTLIER_DEG = 10.0  # Lecturas a más de 10° de la media no cuentan en la media recortada
MEAN_BASELINE_OFFSET = 12  # Paso 0 = round(media recortada) - 12
NO_DATA_COLOR = "#9e9e9e"

# ============================================================
# OPCIONES POR DEFECTO DEL PIPELINE
# ============================================================
DEFAULT_COLOR_STRATEGY = "fixed_range"
DEFAULT_JOIN = "positional"
DEFAULT_STRICT_TEMPERATURE = False
DEFAULT_REQUIRE_WEATHER = False
DEFAULT_RECENCY_FILTER = True

# ============================================================
# MAPA
# ============================================================
MAP_CENTER_LAT = 45.6960  # Bergamo
MAP_CENTER_LON = 9.6672
MAP_ZOOM = 10
FALLBACK_DATA_PATH = os.getenv("METEOLOMBARDIA_FALLBACK_PATH", "data_stazioni_lombardia.json")
