"""Test untuk modul-modul di core/.

File ini menguji:
- models.py: parsing respons backend
- auth.py: route guard /auth, /app, /admin
- validation.py: validasi form (CF, user, verifikasi)
- certainty.py: label & persentase keyakinan
- search_filter.py: ekstraksi list, filter, pencarian
- consultation.py: transisi wizard konsultasi

Jalankan dengan: python tests/test_core.py
"""

import sys
from pathlib import Path

import pytest
from jose import jwt

# Tambahkan app/ ke Python path
app_dir = Path(__file__).parent.parent
sys.path.insert(0, str(app_dir))

from core.auth import LOGIN_ROUTE, USER_HOME, ADMIN_HOME, decode_claims, home_for, needs_verification, resolve_route
from core.certainty import certainty_percentage, certainty_value, likelihood_label, truncate
from core.consultation import ConsultationWizard, WizardState
from core.models import (
    ApiError, ConsultationError, ConsultationHistory, ConsultResult, ConsultStatus,
    Page, Problem, Role, Rule, Symptom, User, ValidationError
)
from core.search_filter import (
    extract_items, extract_total_pages, filter_rules, find_rule, merge_by_id,
    problems_from_rules, search_histories, search_users
)
from core.validation import (
    can_delete_user, cf_band, parse_cf, validate_rule, validate_user, validate_verification
)
from ui.navigation import ROUTES, USER_MENU, menu_for, page_for


def make_token(**claims):
    return jwt.encode(claims, "test-secret", algorithm="HS256")


class FakeBackend:
    """Backend konsultasi palsu: mengembalikan respons sesuai urutan."""

    def __init__(self, start, *process):
        self.start_response = start
        self.process_responses = list(process)
        self.calls = []

    def consultation_start(self, api_base):
        self.calls.append(("start", api_base))
        return ConsultResult.from_api(self.start_response)

    def consultation_process(self, api_base, symptom_id, yes):
        self.calls.append(("process", symptom_id, yes))
        return ConsultResult.from_api(self.process_responses.pop(0))


class TestModels:
    """Test suite untuk parsing model."""

    def test_problem_from_api(self):
        problem = Problem.from_api({
            "id": "E01", "name": "Overheat", "description": "Suhu tinggi",
            "pict": "uploads/e01.png", "solution": {"id": 1, "solution": "Ganti thermostat"},
        })
        assert problem.image == "uploads/e01.png"
        assert problem.solution == "Ganti thermostat"
        assert problem.to_payload()["pict"] == "uploads/e01.png"
        print(f"✓ Problem parsed: {problem.id}")

    def test_rule_from_nested_relations(self):
        rule = Rule.from_api({
            "id": 7, "cfPakar": "0.8",
            "problem": {"id": "E01", "name": "Overheat"},
            "symptom": {"id": "G03", "name": "Asap putih"},
        })
        assert rule.problem_id == "E01"
        assert rule.symptom_id == "G03"
        assert rule.cf == 0.8
        assert rule.symptom_name == "Asap putih"
        print("✓ Rule parsed from nested problem/symptom")

    def test_user_unknown_role_defaults_to_user(self):
        user = User.from_api({"username": "budi", "name": "Budi Santoso", "role": "MECHANIC",
                              "carSeries": {"series_id": "318i"}})
        assert user.role == Role.USER
        assert user.car_series == "318i"
        assert user.initials == "BS"
        print("✓ Unknown role falls back to USER")

    def test_null_fields_parse_as_empty_strings(self):
        user = User.from_api({"username": "bob", "name": None, "email": None})
        assert user.name == "" and user.email == ""
        assert user.initials == "U"
        problem = Problem.from_api({"id": "E01", "name": None})
        symptom = Symptom.from_api({"id": "G01", "name": None, "question": None})
        assert problem.name == ""
        assert symptom.prompt == ""
        print("✓ Null names parsed as empty strings")

    def test_consult_result_continue(self):
        result = ConsultResult.from_api({"status": "Continue", "symptom": {"id": "G01", "name": "Mesin pincang"}})
        assert result.status == ConsultStatus.CONTINUE
        assert result.symptom.id == "G01"
        assert result.symptom.prompt == "Mesin pincang"
        print("✓ Continue result parsed")

    def test_consult_result_start_without_status(self):
        result = ConsultResult.from_api({"symptom": {"id": "G01", "name": "x", "question": "Apakah mesin pincang?"}})
        assert result.status == ConsultStatus.CONTINUE
        assert result.symptom.prompt == "Apakah mesin pincang?"
        print("✓ Start response without status treated as Continue")

    def test_consult_result_unknown_status_raises(self):
        with pytest.raises(ConsultationError):
            ConsultResult.from_api({"status": "Maybe"})
        print("✓ Unknown status rejected")

    def test_consult_status_parse_variants(self):
        assert ConsultStatus.parse("problem_not_found") == ConsultStatus.PROBLEM_NOT_FOUND
        assert ConsultStatus.parse("NeverHadAProblem") == ConsultStatus.NEVER_HAD_A_PROBLEM
        assert ConsultStatus.parse("RESULT") == ConsultStatus.RESULT
        assert ConsultStatus.parse(None) is None
        print("✓ Status variants parsed")

    def test_result_matches_keep_server_order(self):
        result = ConsultResult.from_api({
            "status": "Result",
            "results": [
                {"problem": {"id": "E02", "name": "B"}, "certainty": 0.4, "percentage": "40.00%"},
                {"problem": {"id": "E01", "name": "A"}, "certainty": 0.9, "percentage": "90.00%"},
            ],
        })
        assert [m.problem.id for m in result.matches] == ["E02", "E01"]
        assert result.matches[1].certainty == 0.9
        print("✓ Matches kept in server order")

    def test_history_from_api(self):
        history = ConsultationHistory.from_api({
            "id": 3, "consultation_date": "2024-05-01T10:00:00Z", "status": "Certainty: 85.00%",
            "problem": {"id": "S01", "name": "Shock bocor"},
        })
        assert history.timestamp.startswith("2024-05-01")
        assert history.problem.name == "Shock bocor"
        print("✓ History parsed")

    def test_page_clamps_and_flags(self):
        first = Page(items=[], page=1, total_pages=3)
        assert not first.has_previous
        assert first.has_next

        last = Page(items=[], page=5, total_pages=3)
        assert last.page == 3
        assert last.has_previous
        assert not last.has_next

        single = Page(items=[], page=1, total_pages=0)
        assert single.total_pages == 1
        assert not single.has_previous and not single.has_next
        print("✓ Pager flags correct")

    def test_api_error_str(self):
        assert str(ApiError("Unauthorized", status_code=401)) == "[401] Unauthorized"
        assert str(ApiError("offline")) == "offline"
        print("✓ ApiError formatting")


class TestAuthRouting:
    """Test suite untuk route guard."""

    def setup_method(self):
        self.user_token = make_token(username="budi", role="USER")
        self.expert_token = make_token(username="pakar", role="EXPERT")
        self.admin_token = make_token(username="root", role="SUPER_ADMIN")
        self.no_role_token = make_token(username="anon")

    def test_decode_claims(self):
        assert decode_claims(self.expert_token)["role"] == "EXPERT"
        assert decode_claims(None) is None
        assert decode_claims("a.b") is None
        assert decode_claims("x.y.z") is None
        print("✓ Claims decoded without signature check")

    def test_logout_clears_token(self):
        decision = resolve_route("/auth/logout", self.user_token)
        assert decision.redirect == LOGIN_ROUTE
        assert decision.clear_token
        print("✓ Logout redirects to login")

    def test_auth_pages_redirect_logged_in_users(self):
        assert resolve_route("/auth/login", self.expert_token).redirect == ADMIN_HOME
        assert resolve_route("/auth/signup", self.admin_token).redirect == ADMIN_HOME
        assert resolve_route("/auth/verify", self.user_token).redirect == USER_HOME
        assert resolve_route("/auth/login", None).allowed
        assert resolve_route("/auth/login", "broken-token").allowed
        print("✓ Auth pages redirect by role")

    def test_admin_requires_admin_role(self):
        assert resolve_route("/admin", None).redirect == LOGIN_ROUTE
        assert resolve_route("/admin/engine/rules", "x.y.z").redirect == LOGIN_ROUTE
        assert resolve_route("/admin/users", self.user_token).redirect == USER_HOME
        assert resolve_route("/admin", self.expert_token).allowed
        assert resolve_route("/admin/users", self.admin_token).allowed
        print("✓ Admin zone guarded")

    def test_missing_role_routes_to_user_area(self):
        assert resolve_route("/admin", self.no_role_token).redirect == USER_HOME
        assert resolve_route("/auth/login", self.no_role_token).redirect == USER_HOME
        assert home_for(None) == USER_HOME
        print("✓ Token without role goes to user area")

    def test_server_role_overrides_claim(self):
        decision = resolve_route("/admin", self.expert_token, verify=lambda token: Role.USER)
        assert decision.redirect == USER_HOME
        decision = resolve_route("/admin", self.user_token, verify=lambda token: Role.EXPERT)
        assert decision.allowed
        print("✓ Server-reported role wins for /admin")

    def test_failed_verification_goes_to_login(self):
        def reject(token):
            raise ApiError("Unauthorized", status_code=401)

        for path in ("/admin", "/app/dashboard"):
            decision = resolve_route(path, self.expert_token, verify=reject)
            assert decision.redirect == LOGIN_ROUTE
            assert decision.clear_token
        print("✓ Invalid session redirected to login")

    def test_app_zone(self):
        assert resolve_route("/app/dashboard", None).redirect == LOGIN_ROUTE
        assert resolve_route("/app/engine/consultation", self.user_token).allowed
        assert resolve_route("/app/engine/history", self.expert_token, verify=lambda t: Role.EXPERT).allowed
        print("✓ App zone guarded")

    def test_public_routes(self):
        assert resolve_route("/", None).allowed
        assert resolve_route("/application", None).allowed
        print("✓ Public routes allowed")

    def test_needs_verification(self):
        assert needs_verification(ApiError("Email belum diverifikasi", status_code=403))
        assert not needs_verification(ApiError("Password salah", status_code=401))
        print("✓ Unverified email detected")


class TestValidation:
    """Test suite untuk validasi form."""

    def test_parse_cf_accepts_range(self):
        assert parse_cf("0.75") == 0.75
        assert parse_cf("0,5") == 0.5
        assert parse_cf(0) == 0.0
        assert parse_cf(1) == 1.0
        print("✓ CF in range accepted")

    def test_parse_cf_rejects_out_of_range(self):
        for raw in (1.5, -0.1, "abc", "", None, "nan"):
            with pytest.raises(ValidationError):
                parse_cf(raw)
        print("✓ CF outside [0, 1] rejected")

    def test_cf_band(self):
        assert cf_band(0.8) == "high"
        assert cf_band(0.6) == "medium"
        assert cf_band(0.4) == "low"
        assert cf_band(0.39) == "very-low"
        print("✓ CF bands")

    def test_validate_rule(self):
        assert validate_rule("E01", "G01", "0.9") == {"problemId": "E01", "symptomId": "G01", "expertCf": 0.9}
        with pytest.raises(ValidationError) as exc:
            validate_rule(None, "G01", 0.5)
        assert exc.value.field == "problemId"
        with pytest.raises(ValidationError):
            validate_rule("E01", "G01", 2)
        print("✓ Rule payload validated")

    def test_validate_user_create_requires_password(self):
        payload = {"username": "budi", "email": "budi@mail.com", "name": "Budi", "role": "USER"}
        with pytest.raises(ValidationError):
            validate_user(payload, creating=True)
        with pytest.raises(ValidationError):
            validate_user({**payload, "password": "short"}, creating=True)
        cleaned = validate_user({**payload, "password": "rahasia123"}, creating=True)
        assert cleaned["password"] == "rahasia123"
        print("✓ Password required on create")

    def test_validate_user_edit_drops_password(self):
        payload = {"username": "budi", "email": "budi@mail.com", "name": " Budi ", "role": "EXPERT",
                   "password": "ignored"}
        cleaned = validate_user(payload, creating=False)
        assert "password" not in cleaned
        assert cleaned["name"] == "Budi"
        with pytest.raises(ValidationError):
            validate_user({**payload, "email": "bukan-email"}, creating=False)
        print("✓ Password ignored on edit")

    def test_validate_verification(self):
        assert validate_verification(" budi ", "123456") == {"username": "budi", "code": "123456"}
        with pytest.raises(ValidationError):
            validate_verification("budi", "12345")
        print("✓ Verification code must be 6 digits")

    def test_verification_code_digits_only(self):
        with pytest.raises(ValidationError):
            validate_verification("budi", "12a456")
        print("✓ Verification code rejects letters")

    def test_super_admin_cannot_be_deleted(self):
        assert not can_delete_user(User(username="root", role=Role.SUPER_ADMIN))
        assert can_delete_user(User(username="pakar", role=Role.EXPERT))
        print("✓ SUPER_ADMIN delete disabled")


class TestCertainty:
    """Test suite untuk helper keyakinan."""

    def test_certainty_from_status(self):
        assert certainty_value("Certainty: 92.50%") == 92.5
        assert certainty_percentage("Certainty: 92.50%") == "92.50%"
        assert certainty_value("") is None
        assert certainty_percentage(None) == "N/A"
        print("✓ Certainty parsed from status")

    def test_likelihood_labels(self):
        assert likelihood_label(80) == "Sangat Mungkin"
        assert likelihood_label(79.9) == "Kemungkinan Besar"
        assert likelihood_label(40) == "Kemungkinan Sedang"
        assert likelihood_label(20) == "Kemungkinan Kecil"
        assert likelihood_label(5) == "Sangat Kecil"
        assert likelihood_label(None) == "Sangat Kecil"
        print("✓ Likelihood labels")

    def test_truncate(self):
        assert truncate(None) == "-"
        assert truncate("pendek") == "pendek"
        assert truncate("x" * 60) == "x" * 50 + "..."
        print("✓ Truncate")


class TestSearchFilter:
    """Test suite untuk search_filter."""

    def setup_method(self):
        self.rules = [
            Rule(id=1, problem_id="E01", symptom_id="G01", cf=0.8, problem_name="Overheat", symptom_name="Asap"),
            Rule(id=2, problem_id="E01", symptom_id="G02", cf=0.6, problem_name="Overheat", symptom_name="Bau"),
            Rule(id=3, problem_id="E02", symptom_id="G01", cf=0.4, problem_name="Misfire", symptom_name="Asap"),
        ]

    def test_extract_items_variants(self):
        assert extract_items([{"id": 1}]) == [{"id": 1}]
        assert extract_items({"data": [{"id": 1}]}) == [{"id": 1}]
        assert extract_items({"data": {"data": [{"id": 2}], "meta": {}}}) == [{"id": 2}]
        assert extract_items(None) == []
        assert extract_items({"message": "ok"}) == []
        print("✓ Items extracted from envelopes")

    def test_extract_total_pages(self):
        assert extract_total_pages({"data": [], "meta": {"totalPages": 4}}) == 4
        assert extract_total_pages({"data": {"data": [], "meta": {"totalPages": 2}}}) == 2
        assert extract_total_pages([]) == 1
        assert extract_total_pages({"meta": {"totalPages": "bad"}}) == 1
        print("✓ Total pages extracted")

    def test_filter_and_find_rules(self):
        assert [r.id for r in filter_rules(self.rules, "E01")] == [1, 2]
        assert len(filter_rules(self.rules)) == 3
        assert find_rule(self.rules, "E02", "G01").id == 3
        assert find_rule(self.rules, "E02", "G02") is None
        print("✓ Rules filtered by problem")

    def test_merge_by_id(self):
        listed = [Problem(id="E03", name="Knocking"), Problem(id="E01", name="Overheat (list)")]
        merged = merge_by_id(listed, problems_from_rules(self.rules))
        assert [p.id for p in merged] == ["E01", "E02", "E03"]
        assert merged[0].name == "Overheat (list)"
        print("✓ Problems merged, deduped and sorted")

    def test_merge_by_id_natural_order(self):
        problems = [Problem(id=pid, name=pid) for pid in ("P10", "P2", "P1")]
        assert [p.id for p in merge_by_id(problems)] == ["P1", "P2", "P10"]
        print("✓ Ids sorted naturally")

    def test_search_users(self):
        users = [
            User(username="budi", name="Budi", email="budi@mail.com", role=Role.USER),
            User(username="pakar", name="Pak Ahli", email="ahli@bengkel.id", role=Role.EXPERT),
        ]
        assert [u.username for u in search_users(users, "bengkel")] == ["pakar"]
        assert [u.username for u in search_users(users, role_filter=Role.USER)] == ["budi"]
        assert len(search_users(users)) == 2
        print("✓ Users searched client-side")

    def test_search_histories(self):
        histories = [
            ConsultationHistory(id=1, timestamp="2024-05-01T10:00:00Z", status="",
                                problem=Problem(id="S01", name="Shock bocor")),
            ConsultationHistory(id=2, timestamp="2024-06-10T10:00:00Z", status="",
                                problem=Problem(id="S02", name="Bushing aus")),
        ]
        assert [h.id for h in search_histories(histories, query="shock")] == [1]
        assert [h.id for h in search_histories(histories, date_from="2024-06-01")] == [2]
        assert [h.id for h in search_histories(histories, date_to="2024-05-31")] == [1]
        print("✓ Histories searched")


class TestConsultationWizard:
    """Test suite untuk wizard konsultasi."""

    def setup_method(self):
        self.wizard = ConsultationWizard(api_base="/engine/consultations")

    def test_start_asks_first_symptom(self):
        backend = FakeBackend({"status": "Continue", "symptom": {"id": "G01", "name": "Mesin pincang"}})
        assert self.wizard.state == WizardState.ASKING
        assert self.wizard.start(backend) == WizardState.CONTINUE
        assert self.wizard.current_symptom.id == "G01"
        assert self.wizard.question_number == 1
        assert backend.calls == [("start", "/engine/consultations")]
        print("✓ Wizard starts with first symptom")

    def test_result_only_when_server_says_so(self):
        backend = FakeBackend(
            {"status": "Continue", "symptom": {"id": "G01", "name": "a"}},
            {"status": "Continue", "symptom": {"id": "G02", "name": "b"}},
            {"status": "Result", "results": [{"problem": {"id": "E01", "name": "Overheat"}, "certainty": 0.9}]},
        )
        self.wizard.start(backend)
        assert self.wizard.answer(backend, True) == WizardState.CONTINUE
        assert not self.wizard.finished
        assert self.wizard.answer(backend, False) == WizardState.RESULT
        assert self.wizard.finished
        assert self.wizard.matches[0].problem.id == "E01"
        assert [(a.symptom_id, a.user_cf) for a in self.wizard.answers] == [("G01", 1.0), ("G02", 0.0)]
        assert backend.calls[1:] == [("process", "G01", True), ("process", "G02", False)]
        print("✓ Result reached only on server status")

    def test_terminal_messages(self):
        backend = FakeBackend(
            {"status": "Continue", "symptom": {"id": "G01", "name": "a"}},
            {"status": "ProblemNotFound"},
        )
        self.wizard.start(backend)
        assert self.wizard.answer(backend, True) == WizardState.PROBLEM_NOT_FOUND
        assert self.wizard.current_symptom is None
        assert "Tidak ditemukan" in self.wizard.terminal_message

        wizard = ConsultationWizard(api_base="/suspension/consultations")
        backend = FakeBackend({"status": "NeverHadAProblem", "message": "Aman"})
        assert wizard.start(backend) == WizardState.NEVER_HAD_A_PROBLEM
        assert wizard.terminal_message == "Aman"
        print("✓ Terminal states carry messages")

    def test_answer_without_pending_symptom_raises(self):
        backend = FakeBackend({"status": "Continue", "symptom": {"id": "G01", "name": "a"}})
        with pytest.raises(ConsultationError):
            self.wizard.answer(backend, True)
        assert backend.calls == []
        print("✓ Answer before start rejected")

    def test_failed_answer_keeps_state(self):
        class FailingBackend(FakeBackend):
            def consultation_process(self, api_base, symptom_id, yes):
                raise ApiError("Server error", status_code=500)

        backend = FailingBackend({"status": "Continue", "symptom": {"id": "G01", "name": "a"}})
        self.wizard.start(backend)
        with pytest.raises(ApiError):
            self.wizard.answer(backend, True)
        assert self.wizard.state == WizardState.CONTINUE
        assert self.wizard.answers == []
        print("✓ Failed answer not recorded")

    def test_continue_without_symptom_not_recorded(self):
        backend = FakeBackend(
            {"status": "Continue", "symptom": {"id": "G01", "name": "a"}, "message": "mulai"},
            {"status": "Continue", "message": "half"},
        )
        self.wizard.start(backend)
        with pytest.raises(ConsultationError):
            self.wizard.answer(backend, True)
        assert self.wizard.state == WizardState.CONTINUE
        assert self.wizard.current_symptom.id == "G01"
        assert self.wizard.answers == []
        assert self.wizard.message == "mulai"
        print("✓ Continue without next symptom leaves session untouched")

    def test_failed_restart_restores_session(self):
        class FailingStart(FakeBackend):
            def consultation_start(self, api_base):
                if self.calls:
                    raise ApiError("Server error", status_code=500)
                return super().consultation_start(api_base)

        backend = FailingStart(
            {"status": "Continue", "symptom": {"id": "G01", "name": "a"}},
            {"status": "Continue", "symptom": {"id": "G02", "name": "b"}},
        )
        self.wizard.start(backend)
        self.wizard.answer(backend, False)
        with pytest.raises(ApiError):
            self.wizard.restart(backend)
        assert self.wizard.state == WizardState.CONTINUE
        assert self.wizard.current_symptom.id == "G02"
        assert [a.symptom_id for a in self.wizard.answers] == ["G01"]
        print("✓ Failed restart keeps previous session")

    def test_restart_discards_answers(self):
        backend = FakeBackend(
            {"status": "Continue", "symptom": {"id": "G01", "name": "a"}},
            {"status": "Result", "results": []},
        )
        self.wizard.start(backend)
        self.wizard.answer(backend, True)
        assert self.wizard.restart(backend) == WizardState.CONTINUE
        assert self.wizard.answers == []
        assert self.wizard.matches == []
        print("✓ Restart starts over")


class TestNavigation:
    """Test suite untuk peta route -> halaman dan menu sidebar."""

    def test_every_route_has_a_page(self):
        for route, page in ROUTES.items():
            assert (app_dir / page).exists(), f"{route} -> {page} missing"
        print(f"✓ {len(ROUTES)} routes mapped to pages")

    def test_guard_redirects_resolve_to_pages(self):
        for target in (LOGIN_ROUTE, USER_HOME, ADMIN_HOME):
            assert target in ROUTES
        assert page_for("/tidak/ada") == ROUTES[LOGIN_ROUTE]
        print("✓ Redirect targets have pages")

    def test_menu_by_role(self):
        assert menu_for(None) == USER_MENU
        assert menu_for(Role.USER) == USER_MENU
        expert_routes = [route for route, _, _ in menu_for(Role.EXPERT)]
        admin_routes = [route for route, _, _ in menu_for(Role.SUPER_ADMIN)]
        assert "/admin/users" not in expert_routes
        assert "/admin/users" in admin_routes
        print("✓ Sidebar menu follows role")


def run_all_tests():
    """Jalankan semua test dan report hasilnya."""
    print("=" * 60)
    print("Testing Core Modules")
    print("=" * 60)

    test_classes = [TestModels, TestAuthRouting, TestValidation, TestCertainty,
                    TestSearchFilter, TestConsultationWizard, TestNavigation]
    total_tests = 0
    passed_tests = 0
    failed_tests = []

    for test_class in test_classes:
        print(f"\n--- {test_class.__name__} ---")
        instance = test_class()

        # Dapatkan semua method yang dimulai dengan 'test_'
        test_methods = [m for m in dir(instance) if m.startswith('test_')]

        for method_name in test_methods:
            total_tests += 1
            try:
                if hasattr(instance, 'setup_method'):
                    instance.setup_method()
                getattr(instance, method_name)()
                passed_tests += 1
            except AssertionError as e:
                failed_tests.append((test_class.__name__, method_name, str(e)))
                print(f"✗ {method_name} FAILED: {e}")
            except Exception as e:
                failed_tests.append((test_class.__name__, method_name, str(e)))
                print(f"✗ {method_name} ERROR: {e}")

    print("\n" + "=" * 60)
    print("Test Summary")
    print("=" * 60)
    print(f"Total tests: {total_tests}")
    print(f"Passed: {passed_tests}")
    print(f"Failed: {len(failed_tests)}")

    if failed_tests:
        print("\nFailed tests:")
        for class_name, method_name, error in failed_tests:
            print(f"  - {class_name}.{method_name}: {error}")
        return False
    print("\n✅ All tests passed!")
    return True


if __name__ == '__main__':
    success = run_all_tests()
    sys.exit(0 if success else 1)
