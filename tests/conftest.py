from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

ROME = ZoneInfo("Europe/Rome")

# Ancho de una fila real de datostazione (hasta maxRainRate en el 42)
ROW_WIDTH = 43


def _measurement(status="0", date="01/01/2024", time="12:00", temp="5.5", **offsets):
    row = [""] * ROW_WIDTH
    row[0] = status
    row[1] = "y"
    row[2] = date
    row[3] = time
    row[4] = temp
    for key, value in offsets.items():
        row[int(key.lstrip("o"))] = value
    return row


def _metadata(sid="101", name="Test", province="BG", x="100", y="200", altitude="500"):
    return [sid, name, province, x, y, "x", altitude]


@pytest.fixture
def make_measurement():
    """Fila de medidas; campos extra como o9="60" (desplazamiento 9)"""
    return _measurement


@pytest.fixture
def make_metadata():
    return _metadata


@pytest.fixture
def noon_2024():
    return datetime(2024, 1, 1, 13, 0, tzinfo=ROME)


@pytest.fixture
def feed_text():
    return (
        "<html><head><script type=\"text/javascript\">\n"
        "var datostazione = [['0','y','01/01/2024','12:00','5.5','10','13:00','1','06:00','60']];\n"
        "var coords = [['101','Test','BG','100','200','x','500']];\n"
        "</script></head><body>mappa</body></html>"
    )
