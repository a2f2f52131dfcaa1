import logging
import os

import streamlit as st

from geomaster.diagram import build_triangle_figure, drawn_sides, ratio_summary, side_summary
from geomaster.formatting import parse_number, steps_to_text, to_fixed
from geomaster.logging_config import setup_logging
from geomaster.reference import REFERENCE_SECTIONS, REFERENCE_TITLE
from geomaster.report import generate_html_report, generate_pdf_report, report_filename
from geomaster.solver import Side, evaluate, solve_right_triangle, solve_trig_ratios

# --- CONFIGURAZIONE ---
st.set_page_config(layout="wide", page_title="GeoMaster - Triangolo Rettangolo")

LOG_LEVEL = getattr(logging, os.environ.get("GEOMASTER_LOG_LEVEL", "INFO").upper(), logging.INFO)
setup_logging(LOG_LEVEL)
logger = logging.getLogger("geomaster.app")

TAB_PYTH = "Pitagora"
TAB_TRIG = "Trigonometria"

SIDE_LABELS = {
    Side.HYPOTENUSE: "Ipotenusa (c)",
    Side.OPPOSITE: "Cateto opposto (a)",
    Side.ADJACENT: "Cateto adiacente (b)",
}

# --- CSS ---
st.markdown(
    """
    <style>
    .block-container { padding-top: 1rem; padding-left: 1rem; padding-right: 1rem; }
    .prof-title { color: #2980b9; font-family: 'Helvetica', sans-serif; font-size: 1.5rem; border-bottom: 2px solid #2980b9; margin-bottom: 0px; }
    .subtitle { color: #7f8c8d; font-size: 0.9rem; margin-bottom: 10px; }
    .result-box { background-color: #2980b9; color: white; padding: 16px; border-radius: 12px; margin-bottom: 10px; }
    .result-box .value { font-family: monospace; font-size: 2rem; font-weight: bold; }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- INIZIALIZZAZIONE SESSION STATE ---
if 'active_tab' not in st.session_state: st.session_state.active_tab = TAB_PYTH
if 'dark_diagram' not in st.session_state: st.session_state.dark_diagram = False
if 'pyth_result' not in st.session_state: st.session_state.pyth_result = None
if 'pyth_error' not in st.session_state: st.session_state.pyth_error = None
if 'trig_result' not in st.session_state: st.session_state.trig_result = None
if 'trig_error' not in st.session_state: st.session_state.trig_error = None
if 'pdf_bytes' not in st.session_state: st.session_state.pdf_bytes = None

# --- HEADER ---
st.markdown("<div class='prof-title'>📐 GeoMaster</div>", unsafe_allow_html=True)
st.markdown("<div class='subtitle'>Triangolo rettangolo: Teorema di Pitagora e rapporti trigonometrici</div>", unsafe_allow_html=True)


# --- CALCOLO ---
def store_outcome(prefix, outcome):
    st.session_state.pdf_bytes = None
    if outcome.status == "ok":
        st.session_state[f"{prefix}_result"] = outcome.result
        st.session_state[f"{prefix}_error"] = None
    elif outcome.status == "error":
        logger.info("Calcolo %s rifiutato: %s", prefix, outcome.message)
        st.session_state[f"{prefix}_error"] = outcome.message
    else:
        # Dati insufficienti: si lascia tutto com'è
        st.session_state[f"{prefix}_error"] = None


def calculate_pythagoras():
    a = parse_number(st.session_state.get('pyth_a'))
    b = parse_number(st.session_state.get('pyth_b'))
    c = parse_number(st.session_state.get('pyth_c'))
    store_outcome("pyth", evaluate(solve_right_triangle, a, b, c))


def calculate_trig():
    angle = parse_number(st.session_state.get('trig_angle'))
    value = parse_number(st.session_state.get('trig_value'))
    side = st.session_state.get('trig_side', Side.HYPOTENUSE)
    store_outcome("trig", evaluate(solve_trig_ratios, angle, side, value))


def reset_all(): st.session_state.clear()


def clear_pdf(): st.session_state.pdf_bytes = None


# --- SIDEBAR ---
with st.sidebar:
    st.header("⚙️ Opzioni")
    st.toggle("🌙 Grafico scuro", key="dark_diagram",
              help="Cambia solo il tema del grafico: quello della pagina si sceglie dal menu di Streamlit.")
    st.button("Reset", on_click=reset_all)
    st.divider()

    with st.expander(f"📖 {REFERENCE_TITLE}", expanded=False):
        for section in REFERENCE_SECTIONS:
            st.markdown(f"**{section.title}**")
            st.write(section.body)
            for label, text in section.notes:
                st.markdown(f"- **{label}**: {text}")
            for formula in section.formulas:
                st.caption(formula.label)
                st.latex(formula.latex)


# --- INPUT ---
active_tab = st.radio("Modalità", [TAB_PYTH, TAB_TRIG], key="active_tab", horizontal=True,
                      label_visibility="collapsed", on_change=clear_pdf)
is_pyth = active_tab == TAB_PYTH

col_input, col_graph, col_steps = st.columns([1, 1.3, 1.3])

with col_input:
    if is_pyth:
        st.subheader("Calcolatrice di Pitagora", help="Inserisci 2 valori per trovare il terzo.")
        st.text_input("Cateto a", key="pyth_a", placeholder="Valore di a")
        st.text_input("Cateto b", key="pyth_b", placeholder="Valore di b")
        st.text_input("Ipotenusa c", key="pyth_c", placeholder="Valore di c")
        st.button("Calcola ▶", key="calc_pyth", on_click=calculate_pythagoras, type="primary", width="stretch")
        error = st.session_state.pyth_error
        result = st.session_state.pyth_result
    else:
        st.subheader("Rapporti trigonometrici", help="Inserisci un angolo e un lato.")
        st.text_input("Angolo α (gradi)", key="trig_angle", placeholder="Es: 30")
        col1, col2 = st.columns(2)
        with col1: st.selectbox("Lato noto", list(SIDE_LABELS), format_func=SIDE_LABELS.get, key="trig_side")
        with col2: st.text_input("Valore", key="trig_value", placeholder="Valore")
        st.button("Calcola ▶", key="calc_trig", on_click=calculate_trig, type="primary", width="stretch")
        error = st.session_state.trig_error
        result = st.session_state.trig_result

    if error:
        st.error(f"⚠️ {error}")

    # --- RISULTATO ---
    if result is not None:
        if is_pyth:
            st.markdown(
                f"<div class='result-box'>Risultato ({result.unknown})<div class='value'>{to_fixed(result.value, 4)}</div></div>",
                unsafe_allow_html=True,
            )
        else:
            st.markdown("**Risultato**")
            st.dataframe(ratio_summary(result), hide_index=True, width="stretch")

# --- GRAFICO ---
with col_graph:
    st.markdown("##### Visualizzazione")
    if is_pyth:
        typed = [parse_number(st.session_state.get(k)) for k in ('pyth_a', 'pyth_b', 'pyth_c')]
        a, b, c = drawn_sides(typed, result)
    elif result is not None:
        a, b, c = result.a, result.b, result.c
    else:
        a = b = c = 0

    if a > 0 and b > 0:
        angle = result.angle if (result is not None and not is_pyth) else None
        fig = build_triangle_figure(a, b, c, angle=angle, dark=st.session_state.dark_diagram)
        st.plotly_chart(fig, width="stretch", config={'displayModeBar': False})
        st.dataframe(side_summary(a, b, c), hide_index=True, width="stretch")
    else:
        fig = None
        st.info("Servono entrambi i cateti per disegnare il triangolo.")

# --- PASSAGGI ---
with col_steps:
    st.markdown("##### Procedimento passo per passo")
    if result is None:
        st.info("Inserisci i dati e premi Calcola per vedere il procedimento dettagliato.")
    else:
        for i, step in enumerate(result.steps, 1):
            st.markdown(f"**{i}.** {step.text}")
            if step.math:
                st.latex(step.math)

        # --- ESPORTAZIONE ---
        st.divider()
        st.markdown("### 📋 Esporta")
        st.code(steps_to_text(result.steps), language=None)

        kind = "pitagora" if is_pyth else "trigonometria"
        title = TAB_PYTH if is_pyth else TAB_TRIG
        summary = {"Cateto a": to_fixed(result.a, 4), "Cateto b": to_fixed(result.b, 4), "Ipotenusa c": to_fixed(result.c, 4)}
        if not is_pyth:
            summary.update({"Seno": to_fixed(result.sin, 4), "Coseno": to_fixed(result.cos, 4), "Tangente": to_fixed(result.tan, 4)})

        st.download_button(
            label="🌐 Scarica Report HTML",
            data=generate_html_report(title, result.steps, summary),
            file_name=report_filename(kind, "html"),
            mime="text/html",
            width="stretch",
        )

        if st.button("📥 Genera Report PDF", width="stretch"):
            with st.spinner("⏳ Generazione PDF in corso..."):
                st.session_state.pdf_bytes = generate_pdf_report(title, result.steps, summary, fig)
            if not st.session_state.pdf_bytes:
                st.error("❌ Errore nella generazione del PDF. Controlla il terminale per i dettagli.")

        if st.session_state.pdf_bytes:
            st.success(f"✅ PDF generato! ({len(st.session_state.pdf_bytes) // 1024} KB)")
            st.download_button(
                label="💾 Salva PDF",
                data=st.session_state.pdf_bytes,
                file_name=report_filename(kind, "pdf"),
                mime="application/pdf",
                width="stretch",
            )
