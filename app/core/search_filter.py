"""Modul Search & Filter untuk data yang diterima dari backend.

Pencarian utama (problem, gejala) dilakukan di server lewat parameter
`search`. Modul ini menangani sisi klien:
- Ekstraksi list dari berbagai bentuk envelope respons
- Pencarian teks dan filter role untuk daftar user
- Filter rules berdasarkan problem, penggabungan problem/gejala dari rules
- Pencarian riwayat konsultasi

Fungsi-fungsi ini murni (tanpa Streamlit) agar mudah diuji.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, TypeVar
import re

from .models import ConsultationHistory, Problem, Role, Rule, Symptom, User

T = TypeVar("T")


def _normalize_text(text: str) -> str:
    """Normalisasi teks untuk pencarian: lowercase, hapus karakter khusus."""
    if not text:
        return ""
    text = text.lower().replace("_", " ").replace("-", " ")
    text = re.sub(r"[^a-z0-9@.\s]", "", text)
    text = " ".join(text.split())
    return text


def _matches_text_obj(item: Any, query: str, fields: List[str]) -> bool:
    """Cek apakah object cocok dengan query pada field-field tertentu."""
    if not query:
        return True

    normalized_query = _normalize_text(query)
    for field in fields:
        value = getattr(item, field, "")
        normalized_value = _normalize_text(str(value or ""))
        if normalized_query in normalized_value:
            return True
    return False


def extract_items(data: Any) -> List[Dict[str, Any]]:
    """Ambil list record dari data respons yang bentuknya bervariasi.

    Interceptor backend membungkus `{statusCode, message, data}`; endpoint
    list bisa mengembalikan list langsung, `{data: [...]}`, atau
    `{data: {data: [...], meta}}`.
    """
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        inner = data.get("data")
        if isinstance(inner, list):
            return inner
        if isinstance(inner, dict) and isinstance(inner.get("data"), list):
            return inner["data"]
    return []


def extract_total_pages(data: Any) -> int:
    """Ambil `meta.totalPages` dari respons list; default 1."""
    if isinstance(data, dict):
        meta = data.get("meta")
        if meta is None and isinstance(data.get("data"), dict):
            meta = data["data"].get("meta")
        if isinstance(meta, dict):
            try:
                return max(1, int(meta.get("totalPages") or 1))
            except (TypeError, ValueError):
                return 1
    return 1


def search_users(
    users: List[User],
    query: Optional[str] = None,
    role_filter: Optional[Role] = None,
) -> List[User]:
    """Filter user berdasarkan teks (username/email/nama) dan role."""
    results = []
    for user in users:
        if query and not _matches_text_obj(user, query, ["username", "email", "name"]):
            continue
        if role_filter and user.role != role_filter:
            continue
        results.append(user)
    return results


def filter_rules(rules: List[Rule], problem_id: Optional[str] = None) -> List[Rule]:
    """Rules untuk satu problem; tanpa filter, hanya rules yang relasinya lengkap."""
    if problem_id:
        return [r for r in rules if r.problem_id == problem_id]
    return [r for r in rules if r.problem_id and r.symptom_id]


def find_rule(rules: List[Rule], problem_id: str, symptom_id: str) -> Optional[Rule]:
    """Cari rule untuk pasangan problem-gejala."""
    for rule in rules:
        if rule.problem_id == problem_id and rule.symptom_id == symptom_id:
            return rule
    return None


def _natural_key(value: str) -> List[Any]:
    """Kunci urut 'P2' sebelum 'P10'."""
    return [(0, int(part), "") if part.isdigit() else (1, 0, part.lower())
            for part in re.split(r"(\d+)", str(value)) if part]


def merge_by_id(*groups: Iterable[T]) -> List[T]:
    """Gabungkan beberapa list, buang duplikat berdasarkan `id`, urutkan natural per id."""
    merged: Dict[str, T] = {}
    for group in groups:
        for item in group:
            item_id = getattr(item, "id", None)
            if item_id and item_id not in merged:
                merged[item_id] = item
    return [merged[k] for k in sorted(merged, key=_natural_key)]


def problems_from_rules(rules: List[Rule]) -> List[Problem]:
    """Problem yang ikut ter-load di dalam rules (eager loaded)."""
    return [Problem(id=r.problem_id, name=r.problem_name) for r in rules if r.problem_id]


def symptoms_from_rules(rules: List[Rule]) -> List[Symptom]:
    """Gejala yang ikut ter-load di dalam rules (eager loaded)."""
    return [Symptom(id=r.symptom_id, name=r.symptom_name) for r in rules if r.symptom_id]


def search_histories(
    histories: List[ConsultationHistory],
    query: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> List[ConsultationHistory]:
    """Cari riwayat berdasarkan nama/ID problem dan rentang tanggal (YYYY-MM-DD)."""
    results = []
    for history in histories:
        if query:
            problem = history.problem
            haystack = f"{problem.id} {problem.name}" if problem else ""
            if _normalize_text(query) not in _normalize_text(haystack):
                continue
        day = history.timestamp[:10]
        if date_from and day < date_from:
            continue
        if date_to and day > date_to:
            continue
        results.append(history)
    return results
