# File: core/models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ApiError(Exception):
    """Request ke backend gagal (HTTP non-2xx, koneksi, atau body rusak)."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ValidationError(ValueError):
    """Input form tidak valid; request tidak dikirim."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ConsultationError(RuntimeError):
    """Wizard konsultasi dipakai di luar urutan yang sah."""


class Role(str, Enum):
    USER = "USER"
    EXPERT = "EXPERT"
    SUPER_ADMIN = "SUPER_ADMIN"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return {"USER": "User", "EXPERT": "Expert", "SUPER_ADMIN": "Super Admin"}[self.value]


def _solution_text(raw: Any) -> Optional[str]:
    """Solusi bisa berupa string, {'solution': ...} atau {'name': ...}."""
    if not raw:
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict):
        return raw.get("solution") or raw.get("name")
    return None


@dataclass
class Problem:
    """Masalah (kerusakan) pada modul Engine atau Suspension."""
    id: str
    name: str
    description: str = ""
    image: str = ""
    solution: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Problem":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            description=data.get("description") or "",
            image=data.get("pict") or data.get("media") or data.get("picture") or "",
            solution=_solution_text(data.get("solution")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description, "pict": self.image}


@dataclass
class Symptom:
    """Gejala yang ditanyakan ke pengguna."""
    id: str
    name: str
    question: str = ""
    image: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Symptom":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            question=data.get("question") or "",
            image=data.get("image") or data.get("pict") or None,
            code=data.get("code"),
        )

    @property
    def prompt(self) -> str:
        """Teks pertanyaan; jatuh ke nama gejala jika pertanyaan kosong."""
        return self.question or self.name

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "question": self.question}


@dataclass
class Rule:
    """Relasi problem-gejala dengan bobot CF pakar."""
    id: Any
    problem_id: str
    symptom_id: str
    cf: float
    problem_name: str = ""
    symptom_name: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Rule":
        problem = data.get("problem") or {}
        symptom = data.get("symptom") or {}
        cf_raw = data.get("cfPakar", data.get("expertCf", data.get("cf", 0.0)))
        try:
            cf = float(cf_raw)
        except (TypeError, ValueError):
            cf = 0.0
        return cls(
            id=data.get("id"),
            problem_id=str(problem.get("id") or data.get("problemId") or ""),
            symptom_id=str(symptom.get("id") or data.get("symptomId") or ""),
            cf=cf,
            problem_name=problem.get("name") or "",
            symptom_name=symptom.get("name") or "",
        )


@dataclass
class User:
    """Akun pengguna; `username` adalah kunci."""
    username: str
    name: str = ""
    email: str = ""
    role: Role = Role.USER
    verified: bool = False
    phone_number: Optional[str] = None
    address: Optional[str] = None
    plate_number: Optional[str] = None
    car_series: Optional[str] = None
    engine_code: Optional[str] = None
    profile_picture: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        car_series = data.get("carSeries") or {}
        engine_code = data.get("engineCode") or {}
        return cls(
            username=data.get("username") or "",
            name=data.get("name") or "",
            email=data.get("email") or "",
            role=Role.parse(data.get("role")) or Role.USER,
            verified=bool(data.get("verified", False)),
            phone_number=data.get("phoneNumber"),
            address=data.get("address"),
            plate_number=data.get("plateNumber"),
            car_series=car_series.get("series_id") if isinstance(car_series, dict) else car_series,
            engine_code=engine_code.get("code") if isinstance(engine_code, dict) else engine_code,
            profile_picture=data.get("profilePicture"),
        )

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.name.split() if part).upper() or "U"


@dataclass
class ConsultationHistory:
    """Satu riwayat konsultasi dari backend."""
    id: Any
    timestamp: str
    status: str
    problem: Optional[Problem] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ConsultationHistory":
        problem = data.get("problem")
        return cls(
            id=data.get("id"),
            timestamp=data.get("consultation_date") or data.get("createdAt") or "",
            status=data.get("status") or "",
            problem=Problem.from_api(problem) if problem else None,
        )


class ConsultStatus(str, Enum):
    CONTINUE = "Continue"
    RESULT = "Result"
    PROBLEM_NOT_FOUND = "ProblemNotFound"
    NEVER_HAD_A_PROBLEM = "NeverHadAProblem"

    @classmethod
    def parse(cls, value: Any) -> Optional["ConsultStatus"]:
        """Terima 'Continue', 'continue', 'PROBLEM_NOT_FOUND', 'problem_not_found', dst."""
        if value is None:
            return None
        key = str(value).replace("_", "").replace("-", "").replace(" ", "").lower()
        for status in cls:
            if status.value.lower() == key:
                return status
        return None


@dataclass
class ProblemMatch:
    """Satu kandidat diagnosa, sudah diurutkan & dilabeli oleh server."""
    problem: Problem
    certainty: float = 0.0
    percentage: str = ""
    likelihood: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ProblemMatch":
        problem_data = data.get("problem") or {
            "id": data.get("problemId", ""),
            "name": data.get("problemName", ""),
            "description": data.get("description", ""),
            "solution": data.get("solution"),
        }
        try:
            certainty = float(data.get("certainty", 0.0))
        except (TypeError, ValueError):
            certainty = 0.0
        percentage = data.get("percentage") or data.get("formattedCertainty") or ""
        return cls(
            problem=Problem.from_api(problem_data),
            certainty=certainty,
            percentage=str(percentage),
            likelihood=data.get("likelihood") or "",
        )


@dataclass
class ConsultResult:
    """Respons `/start` atau `/process`, dibedakan oleh `status`."""
    status: ConsultStatus
    symptom: Optional[Symptom] = None
    matches: List[ProblemMatch] = field(default_factory=list)
    message: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ConsultResult":
        data = data or {}
        symptom_data = data.get("symptom") or data.get("next_symptom") or data.get("nextSymptom")
        status = ConsultStatus.parse(data.get("status"))
        if status is None:
            if symptom_data:
                # `/start` bisa langsung mengirim gejala pertama tanpa status
                status = ConsultStatus.CONTINUE
            else:
                raise ConsultationError(f"Status konsultasi tidak dikenal: {data.get('status')!r}")
        raw_matches = data.get("results") or data.get("matches") or data.get("problems") or []
        return cls(
            status=status,
            symptom=Symptom.from_api(symptom_data) if symptom_data else None,
            matches=[ProblemMatch.from_api(m) for m in raw_matches],
            message=data.get("message") or "",
        )


@dataclass
class Page(Generic[T]):
    """Satu halaman hasil list dari backend."""
    items: List[T]
    page: int = 1
    total_pages: int = 1

    def __post_init__(self):
        self.total_pages = max(1, int(self.total_pages or 1))
        self.page = min(max(1, int(self.page or 1)), self.total_pages)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
