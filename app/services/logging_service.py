# services/logging_service.py

"""
Menyediakan layanan logging terpusat untuk front-end Si Pak-E.

Modul ini mengkonfigurasi logger standar menggunakan library logging
bawaan Python dan menyediakan LoggingService untuk:
- Log sesi konsultasi (start, jawaban, status akhir)
- Log aksi admin (create/update/delete entitas)
- Log kegagalan request ke backend
- Statistik aksi selama proses berjalan

Penggunaan RotatingFileHandler memastikan file log tidak membengkak
tanpa batas.
"""

import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional

LOG_DIR = os.getenv("SIPAKE_LOG_DIR", "logs")
LOG_FILE = os.path.join(LOG_DIR, "sipake.log")


def setup_logger(
    name: str = 'SiPakELogger',
    log_file: str = LOG_FILE,
    level: int = logging.INFO
) -> logging.Logger:
    """
    Mengkonfigurasi dan mengembalikan instance logger.

    Mencegah penambahan handler duplikat jika fungsi ini dipanggil
    beberapa kali.

    Args:
        name (str): Nama logger.
        log_file (str): Path ke file log.
        level (int): Level logging (misalnya, logging.INFO, logging.DEBUG).

    Returns:
        logging.Logger: Instance logger yang sudah dikonfigurasi.
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # 5MB per file, 5 file backup
    handler = RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class LoggingService:
    """Service untuk logging aktivitas front-end.

    Menyediakan fungsi untuk:
    - Log konsultasi
    - Log aksi admin (knowledge acquisition & user management)
    - Log error API
    - Hitung aksi per jenis (in-memory)
    """

    def __init__(self, logger_name: str = 'SiPakELogger', log_file: str = LOG_FILE):
        """Initialize LoggingService.

        Args:
            logger_name: Nama logger yang akan digunakan
            log_file: Path file log
        """
        self.logger = setup_logger(logger_name, log_file=log_file)
        self.log_file = log_file
        self._action_counts: Dict[str, int] = {}

    def _count(self, key: str) -> None:
        self._action_counts[key] = self._action_counts.get(key, 0) + 1

    def log_consultation_started(self, module: str, api_base: str) -> None:
        """Log awal sesi konsultasi."""
        self._count(f"consultation_start:{module}")
        self.logger.info(f"Consultation started: module={module} base={api_base}")

    def log_answer(self, module: str, symptom_id: str, user_cf: float) -> None:
        """Log satu jawaban ya/tidak."""
        self.logger.info(f"Consultation answer: module={module} symptom={symptom_id} cf={user_cf:.1f}")

    def log_consultation_finished(
        self,
        module: str,
        status: str,
        top_problem: Optional[str] = None,
        answers_count: int = 0
    ) -> None:
        """Log status akhir konsultasi (Result / ProblemNotFound / NeverHadAProblem)."""
        self._count(f"consultation_end:{status}")
        self.logger.info(
            f"Consultation finished: module={module} status={status} "
            f"top={top_problem or '-'} answers={answers_count}"
        )

    def log_admin_action(
        self,
        action: str,
        entity: str,
        key: Any,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log aksi admin terhadap entitas.

        Args:
            action: Tipe aksi ('create', 'update', 'delete')
            entity: Nama entitas (mis. 'engine/problems', 'users')
            key: ID / username entitas
            details: Detail tambahan (optional, tanpa password)
        """
        self._count(f"{action}:{entity}")
        self.logger.info(f"Admin action: {action.upper()} {entity} {key}")

        if details:
            safe = {k: v for k, v in details.items() if k != 'password'}
            self.logger.info(f"Details: {safe}")

    def log_auth_event(self, event: str, username: Optional[str] = None) -> None:
        """Log event autentikasi (login, logout, verify, register)."""
        self._count(f"auth:{event}")
        self.logger.info(f"Auth: {event} user={username or '-'}")

    def log_error(self, error_msg: str, exception: Optional[Exception] = None) -> None:
        """Log error message.

        Args:
            error_msg: Error message
            exception: Exception object (optional)
        """
        if exception:
            self.logger.error(f"{error_msg}: {str(exception)}", exc_info=True)
        else:
            self.logger.error(error_msg)

    def log_warning(self, message: str) -> None:
        """Log warning message."""
        self.logger.warning(message)

    def get_statistics(self) -> Dict[str, Any]:
        """Statistik aksi yang tercatat sejak service dibuat."""
        top_actions: List[Dict[str, Any]] = sorted(
            [{"action": k, "count": v} for k, v in self._action_counts.items()],
            key=lambda x: x['count'],
            reverse=True
        )[:10]

        return {
            "total_actions": sum(self._action_counts.values()),
            "top_actions": top_actions,
            "log_file": self.log_file,
            "log_file_exists": os.path.exists(self.log_file),
            "log_file_size": os.path.getsize(self.log_file) if os.path.exists(self.log_file) else 0,
            "timestamp": datetime.now().isoformat()
        }

    def clear_statistics(self) -> None:
        """Reset hitungan aksi."""
        self._action_counts = {}
        self.logger.warning("Action statistics cleared!")
