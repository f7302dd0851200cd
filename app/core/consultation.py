"""Wizard konsultasi: tanya satu gejala, jawab ya/tidak, ulangi.

State machine sederhana yang seluruh transisinya ditentukan oleh `status`
dari backend:

    ASKING --start()--> CONTINUE --answer()--> CONTINUE | RESULT
                                               | PROBLEM_NOT_FOUND
                                               | NEVER_HAD_A_PROBLEM

Wizard tidak pernah menghitung CF atau menyimpulkan hasil sendiri; daftar
kandidat di state RESULT adalah daftar dari server apa adanya.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Protocol

from .models import ConsultationError, ConsultResult, ConsultStatus, ProblemMatch, Symptom

YES_CF = 1.0
NO_CF = 0.0


class WizardState(str, Enum):
    ASKING = "Asking"
    CONTINUE = "Continue"
    RESULT = "Result"
    PROBLEM_NOT_FOUND = "ProblemNotFound"
    NEVER_HAD_A_PROBLEM = "NeverHadAProblem"


TERMINAL_STATES = (WizardState.RESULT, WizardState.PROBLEM_NOT_FOUND, WizardState.NEVER_HAD_A_PROBLEM)

TERMINAL_MESSAGES = {
    WizardState.PROBLEM_NOT_FOUND: "Tidak ditemukan masalah yang cocok dengan jawaban Anda.",
    WizardState.NEVER_HAD_A_PROBLEM: "Kendaraan Anda tidak menunjukkan gejala masalah. Kondisi aman.",
}


class ConsultationBackend(Protocol):
    def consultation_start(self, api_base: str) -> ConsultResult: ...

    def consultation_process(self, api_base: str, symptom_id: str, yes: bool) -> ConsultResult: ...


@dataclass
class Answer:
    symptom_id: str
    user_cf: float


@dataclass
class ConsultationWizard:
    """Satu sesi konsultasi untuk satu modul (base path API)."""
    api_base: str
    state: WizardState = WizardState.ASKING
    current_symptom: Optional[Symptom] = None
    matches: List[ProblemMatch] = field(default_factory=list)
    answers: List[Answer] = field(default_factory=list)
    message: str = ""

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def question_number(self) -> int:
        return len(self.answers) + 1

    @staticmethod
    def _check(result: ConsultResult) -> None:
        if result.status == ConsultStatus.CONTINUE and result.symptom is None:
            raise ConsultationError("Status Continue tanpa gejala berikutnya")

    def _apply(self, result: ConsultResult) -> None:
        self._check(result)
        self.message = result.message
        if result.status == ConsultStatus.CONTINUE:
            self.state = WizardState.CONTINUE
            self.current_symptom = result.symptom
            self.matches = []
            return

        self.current_symptom = None
        if result.status == ConsultStatus.RESULT:
            self.state = WizardState.RESULT
            self.matches = list(result.matches)
        elif result.status == ConsultStatus.PROBLEM_NOT_FOUND:
            self.state = WizardState.PROBLEM_NOT_FOUND
            self.matches = []
        else:
            self.state = WizardState.NEVER_HAD_A_PROBLEM
            self.matches = []

    def start(self, backend: ConsultationBackend) -> WizardState:
        """Minta gejala pertama dari `/start`."""
        self._apply(backend.consultation_start(self.api_base))
        return self.state

    def answer(self, backend: ConsultationBackend, yes: bool) -> WizardState:
        """Kirim jawaban untuk gejala yang sedang ditanyakan ke `/process`."""
        if self.state != WizardState.CONTINUE or self.current_symptom is None:
            raise ConsultationError(f"Tidak ada gejala yang menunggu jawaban (state={self.state.value})")
        symptom = self.current_symptom
        result = backend.consultation_process(self.api_base, symptom.id, yes)
        self._check(result)
        self.answers.append(Answer(symptom_id=symptom.id, user_cf=YES_CF if yes else NO_CF))
        self._apply(result)
        return self.state

    def restart(self, backend: ConsultationBackend) -> WizardState:
        """Buang semua jawaban dan mulai lagi dari `/start`.

        Jika `/start` gagal, sesi lama dikembalikan apa adanya.
        """
        previous = replace(self, answers=list(self.answers), matches=list(self.matches))
        self.state = WizardState.ASKING
        self.current_symptom = None
        self.matches = []
        self.answers = []
        self.message = ""
        try:
            return self.start(backend)
        except Exception:
            self.__dict__.update(previous.__dict__)
            raise

    @property
    def terminal_message(self) -> str:
        return self.message or TERMINAL_MESSAGES.get(self.state, "")
