"""
Family Tree Viewer - Web Application
Візуалізація: Custom SVG Renderer.
Whole-tree generation layout by default; clicking a person centres the view on
them (ego layout), clicking them again returns to the whole tree.
"""

import os

import streamlit as st
from st_click_detector import click_detector

# Імпорт локальних модулів
from data_manager import DEFAULT_SNAPSHOT, DataManager
from layout_engine import LayoutEngine
from svg_renderer import SVGRenderer, SvgViewport
from transition_controller import TransitionController
from utils.logger_service import LoggerService

WHOLE_TREE_LABEL = "-- Усе дерево --"

# --- КОНФІГУРАЦІЯ СТОРІНКИ ---
st.set_page_config(
    page_title="Сімейне Дерево",
    page_icon="🌳",
    layout="wide",
    initial_sidebar_state="expanded"
)


# --- 1. ДАНІ ---
def get_snapshot_path() -> str:
    try:
        if 'snapshot_path' in st.secrets:
            return st.secrets['snapshot_path']
    except Exception:
        pass  # no secrets.toml
    return os.environ.get("FAMILY_TREE_SNAPSHOT", DEFAULT_SNAPSHOT)


@st.cache_resource
def get_logger():
    return LoggerService()


@st.cache_resource
def get_data_manager(snapshot_path: str):
    dm = DataManager(snapshot_path, logger=get_logger())
    dm.load_snapshot()
    return dm


def init_session():
    if 'viewport' not in st.session_state:
        viewport = SvgViewport()
        st.session_state.viewport = viewport
        st.session_state.controller = TransitionController(viewport, logger=get_logger())
        st.session_state.click_nonce = 0


# --- CALLBACKS ---
def on_person_selected():
    controller = st.session_state.controller
    selected_label = st.session_state.person_selector
    if selected_label == WHOLE_TREE_LABEL:
        controller.clear()
        return
    new_id = st.session_state.get('options_map', {}).get(selected_label)
    if new_id:
        controller.change_ego(new_id)


def on_reload():
    st.cache_resource.clear()


# --- 2. UI ---
def render_sidebar(dm: DataManager):
    controller = st.session_state.controller
    viewport = st.session_state.viewport

    st.sidebar.title("🌳 Сімейне дерево")

    people = dm.get_all_people()
    if people:
        options_map = {f"{label} (ID: {pid})": pid for pid, label in people}
        st.session_state.options_map = options_map
        labels = [WHOLE_TREE_LABEL] + sorted(options_map.keys())

        current_index = 0
        for idx, label in enumerate(labels):
            if options_map.get(label) == controller.ego_id:
                current_index = idx
                break

        st.sidebar.selectbox("🔍 Центр перегляду", labels, index=current_index,
                             key="person_selector", on_change=on_person_selected)

    col_in, col_out = st.sidebar.columns(2)
    if col_in.button("➕ Zoom"):
        viewport.zoom_by(1.25)
    if col_out.button("➖ Zoom"):
        viewport.zoom_by(0.8)

    st.sidebar.button("🔄 Перечитати дані", on_click=on_reload)
    if not people and st.sidebar.button("🛠 Тестові дані"):
        dm.create_test_data()
        st.rerun()

    with st.sidebar.expander("📜 Історія", expanded=False):
        logs = get_logger().get_recent_logs(10)
        if not logs:
            st.write("Історія порожня.")
        for timestamp, user, action, details in logs:
            st.caption(f"**{action}** {details} | {timestamp}")


def render_graph(dm: DataManager):
    controller = st.session_state.controller
    viewport = st.session_state.viewport

    if not dm.members:
        st.info("Дерево порожнє. Завантажте знімок даних або тестові дані.")
        return

    layout = LayoutEngine().calculate_layout(dm.members, controller.ego_id)
    layout = controller.present(layout)
    viewport.show(layout)

    svg_content = SVGRenderer(layout, viewport, controller.ego_id).generate_svg()
    clicked_id = click_detector(svg_content, key=f"graph_{st.session_state.click_nonce}")

    if clicked_id:
        controller.select(clicked_id)
        st.session_state.click_nonce += 1
        # the select box follows the controller on the next run
        st.session_state.pop('person_selector', None)
        st.rerun()

    ego = dm.get_member(controller.ego_id) if controller.ego_id else None
    if ego:
        st.caption(f"👑 {ego.full_name}. Клікніть ще раз, щоб повернутися до всього дерева.")


def main():
    init_session()
    dm = get_data_manager(get_snapshot_path())
    render_sidebar(dm)
    st.subheader("📊 Генеалогічне Дерево")
    render_graph(dm)


main()
