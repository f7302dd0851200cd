# services/history.py

"""
Service untuk riwayat konsultasi per modul.

Riwayat dimiliki backend; service ini hanya:
- Mengambil riwayat (gagal -> list kosong + warning di log)
- Menyusun tabel tampilan (pandas DataFrame)
- Menghitung statistik sederhana
- Export ke CSV
"""

import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from core.certainty import certainty_percentage, certainty_value, likelihood_label, truncate
from core.models import ApiError, ConsultationHistory
from services.logging_service import LoggingService

HISTORY_COLUMNS = ["No", "Tanggal Konsultasi", "Masalah Terdeteksi", "Tingkat Keyakinan", "Solusi"]


class HistoryService:
    """Akses riwayat konsultasi satu modul (engine / suspension)."""

    def __init__(self, client, api_base: str, logger: Optional[LoggingService] = None,
                 export_dir: str = "data/exports"):
        """Initialize HistoryService.

        Args:
            client: ApiClient yang sudah membawa token
            api_base: Base path konsultasi, mis. '/engine/consultations'
            logger: LoggingService (optional)
            export_dir: Direktori output CSV
        """
        self.client = client
        self.api_base = api_base
        self.logger = logger
        self.export_dir = export_dir

    def load(self) -> List[ConsultationHistory]:
        """Ambil riwayat dari backend; kegagalan menghasilkan list kosong."""
        try:
            return self.client.consultation_histories(self.api_base)
        except ApiError as e:
            if self.logger:
                self.logger.log_warning(f"History fetch failed for {self.api_base}: {e}")
            return []

    def load_or_raise(self) -> List[ConsultationHistory]:
        """Seperti `load`, tapi error diteruskan ke pemanggil (untuk banner error)."""
        return self.client.consultation_histories(self.api_base)

    @staticmethod
    def to_dataframe(histories: List[ConsultationHistory]) -> pd.DataFrame:
        """Susun tabel riwayat untuk ditampilkan / diexport."""
        rows = []
        for i, history in enumerate(histories, 1):
            problem = history.problem
            rows.append({
                "No": i,
                "Tanggal Konsultasi": format_date(history.timestamp),
                "Masalah Terdeteksi": problem.name if problem else "-",
                "Tingkat Keyakinan": certainty_percentage(history.status),
                "Solusi": truncate(problem.solution if problem else None),
            })
        return pd.DataFrame(rows, columns=HISTORY_COLUMNS)

    @staticmethod
    def get_statistics(histories: List[ConsultationHistory]) -> Dict[str, Any]:
        """Statistik dari list riwayat.

        Returns:
            Dictionary: total, jumlah per problem (top 5), rata-rata keyakinan,
            timestamp pertama dan terakhir.
        """
        if not histories:
            return {
                "total_consultations": 0,
                "unique_problems": 0,
                "top_problems": [],
                "average_certainty": None,
                "first_consultation_timestamp": None,
                "last_consultation_timestamp": None,
            }

        problem_count: Dict[str, Dict[str, Any]] = {}
        for history in histories:
            if history.problem:
                entry = problem_count.setdefault(
                    history.problem.id, {"problem_id": history.problem.id,
                                         "problem_name": history.problem.name, "count": 0})
                entry["count"] += 1

        top_problems = sorted(problem_count.values(), key=lambda x: x["count"], reverse=True)[:5]
        values = [v for v in (certainty_value(h.status) for h in histories) if v is not None]
        timestamps = sorted(h.timestamp for h in histories if h.timestamp)

        return {
            "total_consultations": len(histories),
            "unique_problems": len(problem_count),
            "top_problems": top_problems,
            "average_certainty": round(sum(values) / len(values), 2) if values else None,
            "first_consultation_timestamp": timestamps[0] if timestamps else None,
            "last_consultation_timestamp": timestamps[-1] if timestamps else None,
        }

    def export_to_csv(self, histories: List[ConsultationHistory], output_path: Optional[str] = None) -> str:
        """Export riwayat ke CSV.

        Args:
            histories: Riwayat yang akan diexport
            output_path: Path output file (auto-generate jika None)

        Returns:
            Path ke file CSV yang dibuat
        """
        if output_path is None:
            module = self.api_base.strip("/").split("/")[0] or "consultations"
            output_path = os.path.join(
                self.export_dir,
                f"{module}_history_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
            )
        out_dir = os.path.dirname(output_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)

        df = self.to_dataframe(histories)
        df["Likelihood"] = [likelihood_label(certainty_value(h.status)) for h in histories]
        df.to_csv(output_path, index=False, encoding="utf-8")
        return output_path


def format_date(timestamp: str) -> str:
    """ISO timestamp -> 'YYYY-MM-DD HH:MM'; string lain dikembalikan apa adanya."""
    if not timestamp:
        return "-"
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    return parsed.strftime("%Y-%m-%d %H:%M")
