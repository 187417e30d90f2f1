import streamlit as st
import streamlit.components.v1 as components

from backend_client import (
    call_backend, check_backend_health, fetch_map_html, is_session_missing, notice_for
)

# Page configuration
st.set_page_config(
    page_title="Mapa de Zonas",
    page_icon="🗺️",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.2rem;
        color: #1E88E5;
        text-align: center;
        padding: 1rem 0;
        font-weight: bold;
    }
    .success-box {
        padding: 1rem;
        background-color: #207a27;
        border-radius: 0.5rem;
        border-left: 4px solid #43A047;
        margin: 1rem 0;
    }
</style>
""", unsafe_allow_html=True)

ZONE_OPTIONS = {
    "all": "Todas",
    "norte": "Zona Norte",
    "sul": "Zona Sul",
    "leste": "Zona Leste",
    "oeste": "Zona Oeste",
}
EVENT_OPTIONS = {
    "all": "Todos",
    "theatre": "Teatros",
    "arts_centre": "Centros Culturais",
    "sports": "Esportes",
    "battle_rap": "Batalhas de Rima",
}

def start_session():
    with st.spinner("📍 Carregando o mapa..."):
        result = call_backend("POST", "/sessions")
    if "error" in result:
        st.session_state.notice = result["error"]
        return
    st.session_state.session_id = result["session_id"]
    st.session_state.snapshot = result
    st.session_state.zone_select = "all"
    st.session_state.event_select = "all"
    st.session_state.search_input = ""

def apply_result(result: dict, failure_message: str = None):
    """Store a snapshot returned by the backend, or remember the error for display."""
    if "error" in result:
        if is_session_missing(result):
            st.session_state.session_id = None
        st.session_state.notice = notice_for(result, failure_message)
        return False
    st.session_state.snapshot = result
    return True

# --- Widget callbacks ---
def on_zone_change():
    result = call_backend(
        "PUT",
        f"/sessions/{st.session_state.session_id}/filters/location",
        {"value": st.session_state.zone_select},
    )
    apply_result(result)

def on_event_change():
    result = call_backend(
        "PUT",
        f"/sessions/{st.session_state.session_id}/filters/event",
        {"value": st.session_state.event_select},
    )
    apply_result(result)

def on_search():
    address = st.session_state.search_input.strip()
    if not address:
        return
    result = call_backend(
        "POST",
        f"/sessions/{st.session_state.session_id}/search",
        {"address": address},
    )
    # On a miss the input keeps its text so the user can correct it
    if apply_result(result, failure_message="Endereço não encontrado"):
        st.session_state.search_input = ""

def on_grow_zone(zone_key: str):
    result = call_backend("POST", f"/sessions/{st.session_state.session_id}/zones/{zone_key}/grow")
    apply_result(result)

# Initialize session state
if "session_id" not in st.session_state:
    st.session_state.session_id = None
if "notice" not in st.session_state:
    st.session_state.notice = None

# Header
st.markdown('<div class="main-header">🗺️ Mapa de Zonas de São Paulo</div>', unsafe_allow_html=True)

backend_status = check_backend_health()

with st.sidebar:
    st.header("⚙️ Configurações")

    if backend_status:
        st.markdown('<div class="success-box">✅ Backend Connected</div>', unsafe_allow_html=True)
    else:
        st.warning("⚠️ Backend Disconnected")
        st.code("cd backend && uvicorn mapa.main:app --reload", language="bash")

    if st.session_state.session_id:
        st.divider()
        st.subheader("📊 Sessão")
        st.write(f"**Session ID:** `{st.session_state.session_id[:8]}...`")
        st.write(f"**Marcadores:** {len(st.session_state.snapshot.get('markers', []))}")

        if st.button("🔄 Nova Sessão"):
            call_backend("DELETE", f"/sessions/{st.session_state.session_id}")
            st.session_state.session_id = None
            st.rerun()

        st.divider()
        st.subheader("⭕ Raio das Zonas")
        for zone in st.session_state.snapshot.get("zones", []):
            key = zone["key"]
            st.button(
                f"Ampliar {ZONE_OPTIONS[key]} ({zone['radius'] / 1000:.0f} km)",
                key=f"grow_{key}",
                on_click=on_grow_zone,
                args=(key,),
                use_container_width=True,
            )

if not backend_status:
    st.warning("⚠️ Backend is not running. Please start the backend server first.")
else:
    if st.session_state.session_id is not None:
        # Seed markers keep arriving after the session is created
        apply_result(call_backend("GET", f"/sessions/{st.session_state.session_id}"))
    if st.session_state.session_id is None:
        start_session()

    if st.session_state.notice:
        st.error(st.session_state.notice)
        st.session_state.notice = None

    if st.session_state.session_id:
        col1, col2 = st.columns(2)
        with col1:
            st.selectbox(
                "Filtrar por Zona:",
                options=list(ZONE_OPTIONS),
                format_func=ZONE_OPTIONS.get,
                key="zone_select",
                on_change=on_zone_change,
            )
        with col2:
            st.selectbox(
                "Filtrar por Evento:",
                options=list(EVENT_OPTIONS),
                format_func=EVENT_OPTIONS.get,
                key="event_select",
                on_change=on_event_change,
            )

        with st.form("search_form"):
            st.text_input("Buscar endereço", key="search_input", placeholder="Avenida Paulista, 1000")
            st.form_submit_button("Buscar", on_click=on_search)

        map_html = fetch_map_html(st.session_state.session_id)
        if map_html:
            components.html(map_html, height=600)
        else:
            st.error("Não foi possível carregar o mapa.")

        markers = st.session_state.snapshot.get("markers", [])
        with st.expander(f"📍 Marcadores ({len(markers)})"):
            for marker in markers:
                coords = marker["coordinates"]
                st.write(f"**{marker['label']}** ({coords['lat']:.5f}, {coords['lon']:.5f})")

# Footer
st.divider()
st.markdown("""
<div style='text-align: center; color: #999; padding: 1rem;'>
    <small>Powered by FastAPI, Nominatim & Overpass API | Map data © OpenStreetMap contributors</small>
</div>
""", unsafe_allow_html=True)
