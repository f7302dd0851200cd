"""Helper tampilan untuk tingkat keyakinan (CF) yang dihitung backend.

Riwayat konsultasi menyimpan CF di dalam string status, mis.
"Certainty: 92.50%". Modul ini hanya membaca angka itu untuk label dan
warna badge; tidak ada perhitungan CF di front-end.
"""

import re
from typing import Optional

_NUMBER_RE = re.compile(r"(\d+\.?\d*)")

LIKELIHOOD_LABELS = (
    (80.0, "Sangat Mungkin"),
    (60.0, "Kemungkinan Besar"),
    (40.0, "Kemungkinan Sedang"),
    (20.0, "Kemungkinan Kecil"),
)
LOWEST_LABEL = "Sangat Kecil"


def certainty_value(status: Optional[str]) -> Optional[float]:
    """Angka persentase pertama di string status, atau None."""
    match = _NUMBER_RE.search(status or "")
    return float(match.group(1)) if match else None


def certainty_percentage(status: Optional[str]) -> str:
    """Persentase siap tampil ("92.50%"), atau "N/A"."""
    match = _NUMBER_RE.search(status or "")
    return f"{match.group(1)}%" if match else "N/A"


def likelihood_label(percentage: Optional[float]) -> str:
    value = percentage or 0.0
    for threshold, label in LIKELIHOOD_LABELS:
        if value >= threshold:
            return label
    return LOWEST_LABEL


def badge_color(percentage: Optional[float]) -> str:
    """Warna badge Streamlit (`:color[...]`) untuk persentase keyakinan."""
    if percentage is None:
        return "gray"
    if percentage >= 80:
        return "green"
    if percentage >= 60:
        return "blue"
    if percentage >= 40:
        return "orange"
    return "red"


def truncate(text: Optional[str], limit: int = 50) -> str:
    if not text:
        return "-"
    return text if len(text) <= limit else text[:limit] + "..."
