# services/admin.py

"""
Service untuk layar admin (knowledge acquisition & user management).

Setiap layar CRUD memakai pola yang sama: list (search + page), simpan
(create bila baru, update bila edit), hapus, lalu list ulang. Tidak ada
optimistic update: UI selalu menampilkan data hasil fetch terbaru.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from core.models import Page, Problem, Rule, Symptom, User
from core.search_filter import (
    extract_items, find_rule, merge_by_id, problems_from_rules, symptoms_from_rules
)
from core.validation import parse_cf, validate_rule
from services.logging_service import LoggingService

LOOKUP_LIMIT = 100


class ResourceService:
    """CRUD satu jenis entitas pada satu path REST."""

    def __init__(
        self,
        client,
        path: str,
        parse: Callable[[Dict[str, Any]], Any],
        entity: str,
        logger: Optional[LoggingService] = None,
        page_size: int = 10,
    ):
        self.client = client
        self.path = path
        self.parse = parse
        self.entity = entity
        self.logger = logger
        self.page_size = page_size

    def list_page(self, search: str = "", page: int = 1) -> Page:
        return self.client.list_page(self.path, self.parse, search=search, page=page, limit=self.page_size)

    def list_all(self, limit: Optional[int] = None) -> List[Any]:
        return self.client.list_all(self.path, self.parse, limit=limit)

    def save(self, payload: Dict[str, Any], key: Any = None) -> Any:
        """Create jika `key` None, selain itu update record `key`."""
        if key is None:
            result = self.client.create(self.path, payload)
            action, logged_key = "create", payload.get("id") or payload.get("username")
        else:
            result = self.client.update(self.path, key, payload)
            action, logged_key = "update", key
        if self.logger:
            self.logger.log_admin_action(action, self.entity, logged_key, payload)
        return result

    def remove(self, key: Any) -> Any:
        result = self.client.delete(self.path, key)
        if self.logger:
            self.logger.log_admin_action("delete", self.entity, key)
        return result


@dataclass
class RulesScreen:
    """Data layar editor rules: rules + daftar problem & gejala untuk pilihan."""
    rules: List[Rule] = field(default_factory=list)
    problems: List[Problem] = field(default_factory=list)
    symptoms: List[Symptom] = field(default_factory=list)


class RulesService(ResourceService):
    """Rules satu modul, plus lookup problem/gejala untuk editor CF."""

    def __init__(self, client, admin_base: str, entity: str, logger: Optional[LoggingService] = None):
        super().__init__(client, f"{admin_base}/rules", Rule.from_api, entity, logger)
        self.problems_path = f"{admin_base}/problems"
        self.symptoms_path = f"{admin_base}/symptoms"

    def load_screen(self) -> RulesScreen:
        """Fetch rules, problems, dan symptoms secara paralel lalu gabungkan.

        Problem/gejala yang hanya muncul di dalam rules (eager loaded) ikut
        digabung agar pilihan tetap lengkap walau endpoint list terbatas.
        """
        rules_data, problems_data, symptoms_data = self.client.fetch_many([
            (self.path, None),
            (self.problems_path, {"limit": LOOKUP_LIMIT}),
            (self.symptoms_path, {"limit": LOOKUP_LIMIT}),
        ])
        rules = [Rule.from_api(r) for r in extract_items(rules_data)]
        problems = [Problem.from_api(p) for p in extract_items(problems_data)]
        symptoms = [Symptom.from_api(s) for s in extract_items(symptoms_data)]
        return RulesScreen(
            rules=rules,
            problems=merge_by_id(problems, problems_from_rules(rules)),
            symptoms=merge_by_id(symptoms, symptoms_from_rules(rules)),
        )

    def save_cf(self, rules: List[Rule], problem_id: str, symptom_id: str, cf: Any) -> Any:
        """Simpan CF untuk pasangan problem-gejala: update bila rule ada, create bila belum.

        CF divalidasi sebelum request dikirim (ValidationError jika di luar [0, 1]).
        """
        value = parse_cf(cf)
        existing = find_rule(rules, problem_id, symptom_id)
        if existing is not None and existing.id is not None:
            return self.save({"expertCf": value}, key=existing.id)
        return self.save({"problemId": problem_id, "symptomId": symptom_id, "expertCf": value})

    def create_rule(self, problem_id: Optional[str], symptom_id: Optional[str], cf: Any) -> Any:
        return self.save(validate_rule(problem_id, symptom_id, cf))


def module_services(client, admin_base: str, module: str,
                    logger: Optional[LoggingService] = None, page_size: int = 10) -> Dict[str, Any]:
    """Service problems/symptoms/rules untuk satu modul."""
    return {
        "problems": ResourceService(client, f"{admin_base}/problems", Problem.from_api,
                                    f"{module}/problems", logger, page_size),
        "symptoms": ResourceService(client, f"{admin_base}/symptoms", Symptom.from_api,
                                    f"{module}/symptoms", logger, page_size),
        "rules": RulesService(client, admin_base, f"{module}/rules", logger),
    }


def users_service(client, logger: Optional[LoggingService] = None) -> ResourceService:
    return ResourceService(client, "/admin/users", User.from_api, "users", logger)
