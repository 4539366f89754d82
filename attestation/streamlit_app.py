import logging

import streamlit as st

from attestation.domain.machine import (
    OptionStatus,
    current_question,
    current_topic,
    is_last_question,
    option_status,
    progress,
)
from attestation.domain.models import Screen
from attestation.services.catalog import CatalogError, TopicCatalog, default_catalog
from attestation.services.config import get_settings
from attestation.services.logging_config import configure_logging, dev_notice, transition_trace
from attestation.services.session import QuizSession

logger = logging.getLogger("attestation.app")

SETTINGS = get_settings()
configure_logging(SETTINGS.log_level)

# --- page setup ---
st.set_page_config(page_title="Dorren — Аттестация", page_icon="🚪", layout="centered")

st.markdown("""
<style>
.stApp { background-color: #000; color: #fff; }
.stMarkdown p, .stMarkdown li, .stMarkdown span { color: #eee !important; }
h1, h2, h3 { font-weight: 200 !important; letter-spacing: 0.15em; }
.dorren-sub { color: #85cee4; letter-spacing: 0.3em; text-transform: uppercase; font-size: 0.85rem; }
.dorren-footer { color: rgba(255,255,255,0.2); text-align: center; font-size: 0.7rem;
                 letter-spacing: 0.2em; text-transform: uppercase; margin-top: 3rem; }
</style>
""", unsafe_allow_html=True)

_STATUS_MARK = {
    OptionStatus.CORRECT: "✅",
    OptionStatus.INCORRECT: "❌",
    OptionStatus.SELECTED: "🔹",
    OptionStatus.IDLE: "",
    OptionStatus.DIMMED: "",
}


@st.cache_resource
def _load_catalog() -> TopicCatalog:
    return default_catalog(SETTINGS)


def get_session() -> QuizSession:
    if "quiz_session" not in st.session_state:
        try:
            catalog = _load_catalog()
        except (CatalogError, FileNotFoundError) as e:
            logger.error("catalog load failed: %s", e)
            st.error("Не удалось загрузить вопросы. Обратитесь к администратору.")
            dev_notice(str(e), SETTINGS.debug)
            st.stop()
        session = QuizSession.from_settings(catalog, SETTINGS)
        if SETTINGS.debug:
            session.subscribe(transition_trace(st.session_state))
        st.session_state.quiz_session = session
    return st.session_state.quiz_session


# -------------------------------
# Views
# -------------------------------
def render_header(session: QuizSession):
    left, right = st.columns([3, 1])
    with left:
        st.button("DORREN", key="header_home", on_click=session.request_home, type="tertiary")
    with right:
        if session.screen != Screen.WELCOME:
            st.caption("Аттестация")
    st.divider()


def render_welcome(session: QuizSession):
    st.markdown("# DORREN")
    st.markdown('<p class="dorren-sub">Управление проёмами</p>', unsafe_allow_html=True)
    st.markdown("## Система Аттестации")
    st.markdown(
        "Добро пожаловать в официальную систему проверки знаний продукции и стандартов Dorren. "
        "Пожалуйста, выберите модуль для начала тестирования."
    )
    st.button("Начать ›", key="welcome_start", on_click=session.open_topics, type="primary")


def render_topics(session: QuizSession):
    st.markdown("## Выберите модуль")
    cols = st.columns(2)
    for index, topic in enumerate(session.catalog):
        with cols[index % 2]:
            with st.container(border=True):
                st.markdown(f"### {topic.title}")
                st.caption(topic.description)
                st.button(
                    f"{len(topic.questions)} Вопросов ›",
                    key=f"topic_{topic.id}",
                    on_click=session.start,
                    args=(index,),
                    use_container_width=True,
                )


def render_question(session: QuizSession):
    snapshot = session.snapshot
    topic = current_topic(snapshot, session.catalog)
    question = current_question(snapshot, session.catalog)
    position, total, percent = progress(snapshot, session.catalog)
    interaction = snapshot.interaction

    head, counter, abort = st.columns([6, 2, 1])
    head.caption(topic.title)
    counter.markdown(f"**{position}** / {total}")
    abort.button("✕", key="quiz_abort", help="Прервать тест", on_click=session.request_abort)
    st.progress(int(percent))

    st.markdown(f"### {question.text}")

    for option in question.options:
        status = option_status(snapshot, session.catalog, option.id)
        label = f"{option.id}   {option.text}"
        mark = _STATUS_MARK[status]
        if mark:
            label = f"{label}   {mark}"
        st.button(
            label,
            key=f"opt_{snapshot.quiz.active_topic_index}_{question.id}_{option.id}",
            on_click=session.select_option,
            args=(option.id,),
            disabled=interaction.show_feedback,
            type="primary" if status in (OptionStatus.SELECTED, OptionStatus.CORRECT) else "secondary",
            use_container_width=True,
        )

    if interaction.show_feedback:
        if question.is_correct(interaction.selected_option):
            st.success("Верно")
        else:
            st.error(f"Неверно. Правильный ответ: {question.correct_option_id}")
        if question.explanation:
            st.info(question.explanation)

    _, action = st.columns([3, 1])
    with action:
        if not interaction.show_feedback:
            st.button(
                "Ответить",
                key="quiz_submit",
                on_click=session.submit,
                disabled=interaction.selected_option is None,
                use_container_width=True,
            )
        else:
            st.button(
                "Завершить ›" if is_last_question(snapshot, session.catalog) else "Далее ›",
                key="quiz_next",
                on_click=session.next,
                type="primary",
                use_container_width=True,
            )


def render_results(session: QuizSession):
    summary = session.results()

    st.markdown("## 🏆 Аттестация пройдена" if summary.passed else "## Попробуйте снова")
    st.caption(summary.topic_title)

    score_col, pct_col = st.columns(2)
    score_col.metric("Верно", summary.score)
    pct_col.metric("Результат", f"{summary.percentage}%")

    to_modules, retry = st.columns(2)
    to_modules.button("К модулям", key="results_modules",
                      on_click=session.request_to_modules, use_container_width=True)
    retry.button("↻ Повторить", key="results_retry", on_click=session.request_retry,
                 type="primary", use_container_width=True)


def render_confirmation(session: QuizSession):
    request = session.confirmation
    with st.container(border=True):
        st.markdown(f"### ⚠️ {request.title}")
        st.markdown(request.message)
        cancel, confirm = st.columns(2)
        cancel.button("Отмена", key="confirm_cancel", on_click=session.cancel, use_container_width=True)
        confirm.button("Подтвердить", key="confirm_ok", on_click=session.confirm,
                       type="primary", use_container_width=True)


_VIEWS = {
    Screen.WELCOME: render_welcome,
    Screen.TOPICS: render_topics,
    Screen.QUIZ: render_question,
    Screen.RESULTS: render_results,
}


# -------------------------------
# Page
# -------------------------------
session = get_session()
render_header(session)

if session.confirmation.is_open:
    # overlay: nothing else is clickable until the user answers
    render_confirmation(session)
else:
    _VIEWS[session.screen](session)

st.markdown('<p class="dorren-footer">© 2024 Dorren. Internal Use Only.</p>', unsafe_allow_html=True)

if SETTINGS.debug:
    with st.sidebar.expander("state", expanded=False):
        st.write(session.snapshot)
        st.write(list(st.session_state.get("_trace", ())))
