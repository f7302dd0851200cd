# services/dashboard.py

"""
Data untuk dashboard user dan dashboard admin.

Kegagalan request tidak menggagalkan halaman: dashboard admin jatuh ke
statistik nol, dashboard user menghitung riwayat yang berhasil dimuat saja.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.models import ApiError
from services.history import HistoryService
from services.logging_service import LoggingService


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass
class AdminStats:
    """Ringkasan `/admin/stats/dashboard`."""
    users_total: int = 0
    consultations_total: int = 0
    consultations_today: int = 0
    consultations_this_week: int = 0
    by_module: Dict[str, int] = field(default_factory=dict)
    top_problems: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AdminStats":
        data = data or {}
        users = data.get("users") or {}
        consultations = data.get("consultations") or {}
        by_module = consultations.get("byModule") or {}
        return cls(
            users_total=_int(users.get("total")),
            consultations_total=_int(consultations.get("total")),
            consultations_today=_int(consultations.get("today")),
            consultations_this_week=_int(consultations.get("thisWeek")),
            by_module={name: _int(count) for name, count in by_module.items()},
            top_problems=[
                {"problem_id": p.get("problemId", ""), "count": _int(p.get("count"))}
                for p in data.get("topProblems") or []
            ],
        )

    def module_share(self, module: str) -> float:
        """Porsi konsultasi modul terhadap total (0.0 - 1.0)."""
        return min(1.0, self.by_module.get(module, 0) / (self.consultations_total or 1))


def load_admin_stats(client, logger: Optional[LoggingService] = None) -> Tuple[AdminStats, Optional[str]]:
    """Ambil statistik admin.

    Returns:
        (AdminStats, pesan error atau None). Saat gagal, statistik bernilai nol.
    """
    try:
        return AdminStats.from_api(client.admin_stats()), None
    except ApiError as e:
        if logger:
            logger.log_warning(f"Admin stats fetch failed: {e}")
        return AdminStats(), e.message


def count_consultations(client, api_bases: List[str], logger: Optional[LoggingService] = None) -> Dict[str, int]:
    """Jumlah riwayat per base path; modul yang gagal dimuat dihitung 0."""
    return {base: len(HistoryService(client, base, logger).load()) for base in api_bases}
