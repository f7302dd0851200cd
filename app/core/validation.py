"""Validasi form di sisi klien, dijalankan sebelum request dikirim.

Semua fungsi melempar `ValidationError` dan mengembalikan payload yang sudah
dibersihkan (strip) bila valid. Invariant data tetap dijaga backend.
"""

import re
from typing import Any, Dict, Optional

from .models import Role, User, ValidationError

CF_MIN = 0.0
CF_MAX = 1.0
DEFAULT_CF = 0.7
MIN_PASSWORD_LENGTH = 8
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_cf(raw: Any) -> float:
    """Parse dan validasi nilai CF pakar; harus angka dalam [0, 1]."""
    try:
        value = float(str(raw).strip().replace(",", "."))
    except (TypeError, ValueError):
        raise ValidationError("CF must be a number between 0.0 and 1.0", field="cf")
    if value != value or value < CF_MIN or value > CF_MAX:
        raise ValidationError("CF must be between 0.0 and 1.0", field="cf")
    return value


def cf_band(cf: float) -> str:
    """Kelompok warna untuk nilai CF di editor rules."""
    if cf >= 0.8:
        return "high"
    if cf >= 0.6:
        return "medium"
    if cf >= 0.4:
        return "low"
    return "very-low"


def _require(payload: Dict[str, Any], *fields: str) -> Dict[str, Any]:
    cleaned = {k: v.strip() if isinstance(v, str) else v for k, v in payload.items()}
    for name in fields:
        if not cleaned.get(name):
            raise ValidationError(f"Field '{name}' harus diisi", field=name)
    return cleaned


def validate_problem(payload: Dict[str, Any]) -> Dict[str, Any]:
    return _require(payload, "id", "name", "description", "pict")


def validate_symptom(payload: Dict[str, Any]) -> Dict[str, Any]:
    return _require(payload, "id", "name", "question")


def validate_rule(problem_id: Optional[str], symptom_id: Optional[str], cf: Any) -> Dict[str, Any]:
    """Payload create rule: problem & gejala wajib dipilih, CF dalam [0, 1]."""
    if not problem_id:
        raise ValidationError("Pilih Problem terlebih dahulu!", field="problemId")
    if not symptom_id:
        raise ValidationError("Pilih Symptom terlebih dahulu!", field="symptomId")
    return {"problemId": problem_id, "symptomId": symptom_id, "expertCf": parse_cf(cf)}


def validate_user(payload: Dict[str, Any], creating: bool) -> Dict[str, Any]:
    """Validasi form user admin. Password hanya wajib saat membuat user baru."""
    required = ["username", "email", "name", "role"] + (["password"] if creating else [])
    cleaned = _require(payload, *required)
    if not _EMAIL_RE.match(cleaned["email"]):
        raise ValidationError("Format email tidak valid", field="email")
    if Role.parse(cleaned["role"]) is None:
        raise ValidationError(f"Role tidak dikenal: {cleaned['role']}", field="role")
    if creating and len(cleaned["password"]) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter", field="password")
    if not creating:
        cleaned.pop("password", None)
    return cleaned


def validate_login(username: str, password: str) -> Dict[str, str]:
    if not username or not username.strip():
        raise ValidationError("Username harus diisi", field="username")
    if not password:
        raise ValidationError("Password harus diisi", field="password")
    return {"username": username.strip(), "password": password}


def validate_verification(username: str, code: str) -> Dict[str, str]:
    if not username or not username.strip():
        raise ValidationError("Username harus diisi", field="username")
    code = (code or "").strip()
    if len(code) != 6 or not code.isdigit():
        raise ValidationError("Kode verifikasi harus 6 digit", field="code")
    return {"username": username.strip(), "code": code}


def validate_registration(payload: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = _require(payload, "username", "name", "email", "password")
    if not _EMAIL_RE.match(cleaned["email"]):
        raise ValidationError("Format email tidak valid", field="email")
    if len(cleaned["password"]) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter", field="password")
    return {k: v for k, v in cleaned.items() if v not in (None, "")}


def can_delete_user(user: User) -> bool:
    """Super admin tidak pernah bisa dihapus dari UI."""
    return user.role != Role.SUPER_ADMIN
