import streamlit as st
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.models import ApiError, Problem, Role, Rule, Symptom, User, ValidationError
from core.search_filter import filter_rules, search_users
from core.validation import DEFAULT_CF, can_delete_user, validate_problem, validate_symptom, validate_user
from services.admin import ResourceService, RulesService, module_services, users_service
from services.config import module_config
from ui.components import (
    confirm_delete, current_page, flash_message, pagination_controls, search_box, show_image
)
from ui.session import get_client, get_config, get_logger
from ui.theming import cf_chip, page_header

# (field, label, multiline)
Field = Tuple[str, str, bool]

PROBLEM_FIELDS: List[Field] = [
    ("id", "ID Problem", False),
    ("name", "Nama", False),
    ("description", "Deskripsi", True),
    ("pict", "Path Gambar", False),
]

SYMPTOM_FIELDS: List[Field] = [
    ("id", "ID Gejala", False),
    ("name", "Nama", False),
    ("question", "Pertanyaan", True),
]

SCREENS = {
    "problems": ("Problems", PROBLEM_FIELDS, validate_problem),
    "symptoms": ("Symptoms", SYMPTOM_FIELDS, validate_symptom),
}


def _services(module: str) -> Dict[str, Any]:
    config = get_config()
    admin_base = module_config(config, module)["admin_base"]
    return module_services(get_client(), admin_base, module, get_logger(), config["api"]["page_size"])


def _submit(action: Callable[[], Any], success: str):
    """Jalankan aksi simpan; error validasi/API ditampilkan di dialog."""
    try:
        action()
    except ValidationError as e:
        st.error(f"❌ {e}")
        return
    except ApiError as e:
        get_logger().log_error(f"Admin save failed: {e}")
        st.error(f"❌ {e.message}")
        return
    st.session_state["flash"] = success
    st.rerun()


# ===== Problems & Symptoms =====
@st.dialog("Form Data", width="large")
def resource_form(service: ResourceService, fields: List[Field], validate: Callable, record: Any = None):
    editing = record is not None
    values = record.to_payload() if editing else {}
    with st.form("resource_form"):
        payload = {}
        for name, label, multiline in fields:
            widget = st.text_area if multiline else st.text_input
            payload[name] = widget(label, value=values.get(name) or "", disabled=editing and name == "id")
        submitted = st.form_submit_button("Simpan", type="primary")
    if submitted:
        if editing:
            payload["id"] = record.id
        _submit(
            lambda: service.save(validate(payload), key=record.id if editing else None),
            f"✅ '{payload.get('name') or payload.get('id')}' berhasil disimpan.",
        )


def render_resource_screen(module: str, kind: str):
    """Layar CRUD problems / symptoms untuk satu modul."""
    title, fields, validate = SCREENS[kind]
    label = module_config(get_config(), module)["label"]
    page_header(f"{label} · {title}", f"Kelola data {title.lower()} modul {label}.")
    flash_message()

    service = _services(module)[kind]
    key = f"{module}_{kind}"

    cols = st.columns([3, 1])
    with cols[0]:
        query = search_box(key, placeholder=f"Cari {title.lower()}...")
    with cols[1]:
        if st.button("➕ Tambah", key=f"{key}_add", type="primary", width="stretch"):
            resource_form(service, fields, validate)

    try:
        page = service.list_page(search=query, page=current_page(key))
    except ApiError as e:
        st.error(f"❌ Gagal memuat data: {e.message}")
        return

    if not page.items:
        st.info("Belum ada data.")
    base_url = get_config()["api"]["base_url"]
    for item in page.items:
        with st.container(border=True):
            row = st.columns([1, 4, 1, 1])
            row[0].markdown(f"**{item.id}**")
            with row[1]:
                st.markdown(item.name)
                detail = getattr(item, "description", None) or getattr(item, "question", "")
                if detail:
                    st.caption(detail)
                if isinstance(item, Problem):
                    show_image(base_url, item.image, width=120)
            if row[2].button("Edit", key=f"{key}_edit_{item.id}", width="stretch"):
                resource_form(service, fields, validate, record=item)
            if row[3].button("Hapus", key=f"{key}_del_{item.id}", width="stretch"):
                confirm_delete(item.name or item.id, lambda item_id=item.id: service.remove(item_id))

    pagination_controls(key, page)


# ===== Rules =====
@st.dialog("Tambah Rule")
def rule_form(service: RulesService, problems: List[Problem], symptoms: List[Symptom]):
    with st.form("rule_form"):
        problem = st.selectbox("Problem", problems, index=None, format_func=lambda p: f"{p.id} - {p.name}")
        symptom = st.selectbox("Symptom", symptoms, index=None, format_func=lambda s: f"{s.id} - {s.name}")
        cf = st.text_input("CF Pakar (0.0 - 1.0)", value=str(DEFAULT_CF))
        submitted = st.form_submit_button("Simpan", type="primary")
    if submitted:
        _submit(
            lambda: service.create_rule(problem.id if problem else None, symptom.id if symptom else None, cf),
            "✅ Rule berhasil ditambahkan.",
        )


def render_rules_screen(module: str):
    """Editor rules: filter per problem dan edit CF langsung di baris."""
    label = module_config(get_config(), module)["label"]
    page_header(f"{label} · Rules", "Relasi problem-gejala beserta CF pakar.")
    flash_message()

    service: RulesService = _services(module)["rules"]
    key = f"{module}_rules"
    try:
        screen = service.load_screen()
    except ApiError as e:
        st.error(f"❌ Gagal memuat rules: {e.message}")
        return

    cols = st.columns([3, 1])
    with cols[0]:
        selected: Optional[Problem] = st.selectbox(
            "Filter Problem", screen.problems, index=None, placeholder="Semua problem",
            format_func=lambda p: f"{p.id} - {p.name}", key=f"{key}_filter",
        )
    with cols[1]:
        st.write("")
        if st.button("➕ Tambah Rule", key=f"{key}_add", type="primary", width="stretch"):
            rule_form(service, screen.problems, screen.symptoms)

    rules = filter_rules(screen.rules, selected.id if selected else None)
    if not rules:
        st.info("Belum ada rule untuk filter ini.")
    for rule in rules:
        _rule_row(service, screen.rules, rule, key)


def _rule_row(service: RulesService, all_rules: List[Rule], rule: Rule, key: str):
    row_key = f"{key}_{rule.problem_id}_{rule.symptom_id}"
    with st.container(border=True):
        row = st.columns([3, 3, 2, 1, 1])
        row[0].markdown(f"**{rule.problem_id}** {rule.problem_name}")
        row[1].markdown(f"**{rule.symptom_id}** {rule.symptom_name}")
        with row[2]:
            cf = st.text_input("CF", value=f"{rule.cf:.2f}", key=f"{row_key}_cf", label_visibility="collapsed")
            st.markdown(cf_chip(rule.cf))
        if row[3].button("Simpan", key=f"{row_key}_save", width="stretch"):
            try:
                service.save_cf(all_rules, rule.problem_id, rule.symptom_id, cf)
            except ValidationError as e:
                st.error(f"❌ {e}")
            except ApiError as e:
                st.error(f"❌ {e.message}")
            else:
                st.session_state["flash"] = f"✅ CF {rule.problem_id}-{rule.symptom_id} disimpan."
                st.rerun()
        if row[4].button("Hapus", key=f"{row_key}_del", width="stretch", disabled=rule.id is None):
            confirm_delete(f"{rule.problem_id} - {rule.symptom_id}", lambda rule_id=rule.id: service.remove(rule_id))


# ===== Users =====
ROLE_OPTIONS = [Role.USER, Role.EXPERT, Role.SUPER_ADMIN]


@st.dialog("Form User", width="large")
def user_form(service: ResourceService, record: Optional[User] = None):
    editing = record is not None
    with st.form("user_form"):
        payload = {
            "username": st.text_input("Username", value=record.username if editing else "", disabled=editing),
            "name": st.text_input("Nama", value=record.name if editing else ""),
            "email": st.text_input("Email", value=record.email if editing else ""),
            "role": st.selectbox(
                "Role", ROLE_OPTIONS, format_func=lambda r: r.label,
                index=ROLE_OPTIONS.index(record.role) if editing else 0,
            ).value,
            "phoneNumber": st.text_input("No. Telepon", value=(record.phone_number or "") if editing else ""),
            "address": st.text_area("Alamat", value=(record.address or "") if editing else ""),
        }
        if not editing:
            payload["password"] = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Simpan", type="primary")
    if submitted:
        if editing:
            payload["username"] = record.username
        _submit(
            lambda: service.save(validate_user(payload, creating=not editing),
                                 key=record.username if editing else None),
            f"✅ User '{payload['username']}' berhasil disimpan.",
        )


def render_users_screen():
    page_header("Users", "Kelola akun pengguna, expert, dan super admin.")
    flash_message()

    service = users_service(get_client(), get_logger())
    cols = st.columns([3, 2, 1])
    with cols[0]:
        query = st.text_input("Cari", placeholder="Cari username / email / nama...", label_visibility="collapsed")
    with cols[1]:
        role = st.selectbox("Role", ROLE_OPTIONS, index=None, placeholder="Semua role",
                            format_func=lambda r: r.label, label_visibility="collapsed")
    with cols[2]:
        if st.button("➕ Tambah", type="primary", width="stretch"):
            user_form(service)

    try:
        users = service.list_all()
    except ApiError as e:
        st.error(f"❌ Gagal memuat users: {e.message}")
        return

    results = search_users(users, query, role)
    st.caption(f"{len(results)} dari {len(users)} user")
    for user in results:
        with st.container(border=True):
            row = st.columns([2, 3, 1, 1, 1])
            row[0].markdown(f"**{user.username}**")
            row[1].markdown(f"{user.name}  \n{user.email}")
            row[2].markdown(f":blue-badge[{user.role.label}]")
            if row[3].button("Edit", key=f"user_edit_{user.username}", width="stretch"):
                user_form(service, record=user)
            if row[4].button("Hapus", key=f"user_del_{user.username}", width="stretch",
                             disabled=not can_delete_user(user)):
                confirm_delete(user.username, lambda username=user.username: service.remove(username))
