import streamlit as st

from core.consultation import ConsultationWizard, WizardState
from core.models import ApiError, ConsultationError
from services.config import module_config
from ui.components import match_list, symptom_card
from ui.session import get_client, get_config, get_logger
from ui.theming import page_header, pill


def _wizard(module: str, api_base: str) -> ConsultationWizard:
    key = f"wizard_{module}"
    if key not in st.session_state:
        st.session_state[key] = ConsultationWizard(api_base=api_base)
    return st.session_state[key]


def _run(module: str, wizard: ConsultationWizard, step):
    """Jalankan satu langkah wizard; error ditampilkan tanpa mengubah state."""
    logger = get_logger()
    try:
        step(get_client())
    except (ApiError, ConsultationError) as e:
        logger.log_error(f"Consultation step failed ({module})", e)
        st.error(f"❌ Konsultasi gagal: {e}")
        return
    if wizard.finished:
        top = wizard.matches[0].problem.name if wizard.matches else None
        logger.log_consultation_finished(module, wizard.state.value, top, len(wizard.answers))
    st.rerun()


def _answer_step(module: str, wizard: ConsultationWizard, yes: bool):
    def step(client):
        wizard.answer(client, yes)
        answer = wizard.answers[-1]
        get_logger().log_answer(module, answer.symptom_id, answer.user_cf)
    return step


def render_consultation(module: str):
    """Halaman wizard konsultasi ya/tidak untuk satu modul."""
    config = get_config()
    settings = module_config(config, module)
    base_url = config["api"]["base_url"]
    page_header(f"Konsultasi {settings['label']}",
                "Jawab pertanyaan gejala satu per satu. Sistem akan menyimpulkan masalah yang paling mungkin.")

    wizard = _wizard(module, settings["consultation_base"])
    logger = get_logger()

    if wizard.state == WizardState.ASKING:
        st.info("Tekan tombol di bawah untuk memulai. Jawab **Ya** bila gejala dialami, **Tidak** bila tidak.")
        if st.button("🚀 Mulai Konsultasi", type="primary"):
            logger.log_consultation_started(module, wizard.api_base)
            _run(module, wizard, wizard.start)
        return

    if wizard.state == WizardState.CONTINUE:
        pill(f"{len(wizard.answers)} jawaban tercatat")
        with st.container(border=True):
            symptom_card(wizard.current_symptom, wizard.question_number, base_url)
            cols = st.columns(2)
            with cols[0]:
                if st.button("✅ Ya", type="primary", width="stretch"):
                    _run(module, wizard, _answer_step(module, wizard, True))
            with cols[1]:
                if st.button("❌ Tidak", width="stretch"):
                    _run(module, wizard, _answer_step(module, wizard, False))
    elif wizard.state == WizardState.RESULT:
        st.success(wizard.message or "Diagnosa selesai. Berikut kemungkinan masalah kendaraan Anda:")
        if wizard.matches:
            match_list(wizard.matches, base_url)
        else:
            st.warning("Server tidak mengirim daftar masalah.")
    elif wizard.state == WizardState.PROBLEM_NOT_FOUND:
        st.warning(wizard.terminal_message)
    else:
        st.success(wizard.terminal_message)

    if wizard.answers:
        with st.expander(f"Jawaban Anda ({len(wizard.answers)})"):
            for i, answer in enumerate(wizard.answers, 1):
                st.write(f"{i}. {answer.symptom_id}: {'Ya' if answer.user_cf else 'Tidak'}")

    if st.button("🔄 Konsultasi Ulang"):
        logger.log_consultation_started(module, wizard.api_base)
        _run(module, wizard, wizard.restart)
