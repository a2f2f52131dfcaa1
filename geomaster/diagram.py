import math

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from geomaster.formatting import to_fixed

# --- CONFIGURAZIONE ---
DIAGRAM_SIZE = 150  # lato più lungo, in unità del disegno
TRIANGLE_COLOR = "#2980b9"
ANGLE_COLOR = "rgba(41,128,185,0.20)"


def triangle_layout(a, b, c):
    """
    Vertici del triangolo in scala: angolo retto nell'origine,
    cateto b orizzontale, cateto a verticale.
    Restituisce un dict {'C': (x, y), 'B': ..., 'A': ...} e il fattore di scala.
    """
    max_side = max(a, b, 0 if c is None or math.isnan(c) else c) or 1
    scale = DIAGRAM_SIZE / max_side
    width = b * scale
    height = a * scale
    vertices = {
        'C': (0.0, 0.0),        # angolo retto
        'B': (width, 0.0),      # vertice di alpha (opposto al cateto a)
        'A': (0.0, height),
    }
    return vertices, scale


def get_arc_path(center_x, center_y, radius, start_angle_rad, end_angle_rad, points=50):
    # Angoli misurati dall'asse X in senso antiorario
    thetas = np.linspace(start_angle_rad, end_angle_rad, points)
    xs = center_x + radius * np.cos(thetas)
    ys = center_y + radius * np.sin(thetas)
    return xs, ys


def build_triangle_figure(a, b, c, angle=None, dark=False):
    vertices, _ = triangle_layout(a, b, c)
    (cx, cy), (bx, by), (ax, ay) = vertices['C'], vertices['B'], vertices['A']
    text_color = "#e2e8f0" if dark else "#2c3e50"

    fig = go.Figure()
    fig.update_layout(
        template="plotly_dark" if dark else "plotly_white",
        margin=dict(l=20, r=20, t=20, b=20), height=420, showlegend=False,
    )
    fig.update_xaxes(visible=False, range=[-35, DIAGRAM_SIZE + 35])
    fig.update_yaxes(visible=False, range=[-35, DIAGRAM_SIZE + 35], scaleanchor="x", scaleratio=1)

    # 1. Triangolo
    fig.add_trace(go.Scatter(
        x=[cx, bx, ax, cx], y=[cy, by, ay, cy], mode='lines',
        line=dict(color=TRIANGLE_COLOR, width=3), hoverinfo='skip',
    ))

    # 2. Quadratino dell'angolo retto
    sq = 10
    fig.add_trace(go.Scatter(
        x=[cx + sq, cx + sq, cx], y=[cy, cy + sq, cy + sq], mode='lines',
        line=dict(color='gray', width=1.5), hoverinfo='skip',
    ))

    # 3. Etichette dei lati
    fig.add_annotation(x=(cx + bx) / 2, y=cy, yshift=-16, text=f"b = {to_fixed(b, 1)}",
                       showarrow=False, font=dict(color=text_color, size=12))
    fig.add_annotation(x=cx, y=(cy + ay) / 2, xshift=-18, textangle=-90, text=f"a = {to_fixed(a, 1)}",
                       showarrow=False, font=dict(color=text_color, size=12))
    fig.add_annotation(x=(ax + bx) / 2, y=(ay + by) / 2, xshift=14, yshift=14, text=f"c = {to_fixed(c, 1)}",
                       showarrow=False, font=dict(color=text_color, size=12))

    # 4. Arco di alpha nel vertice B, tra il cateto b e l'ipotenusa
    if angle is not None and not math.isnan(angle) and bx > 0:
        radius = min(25.0, bx * 0.4)
        start, end = math.pi - math.radians(angle), math.pi
        wedge_x, wedge_y = get_arc_path(bx, by, radius, start, end, 30)
        wedge_x = np.append(np.insert(wedge_x, 0, bx), bx)
        wedge_y = np.append(np.insert(wedge_y, 0, by), by)
        fig.add_trace(go.Scatter(
            x=wedge_x, y=wedge_y, fill="toself", fillcolor=ANGLE_COLOR, line=dict(width=0),
            hoverinfo='text', text=f"α = {to_fixed(angle, 1)}°",
        ))
        mid = (start + end) / 2
        fig.add_annotation(
            x=bx + radius * 1.6 * math.cos(mid), y=by + radius * 1.6 * math.sin(mid),
            text=f"α = {to_fixed(angle, 1)}°", showarrow=False,
            font=dict(color=TRIANGLE_COLOR, size=12, weight="bold"),
        )

    return fig


def side_summary(a, b, c):
    return pd.DataFrame({
        'Lato': ["Cateto a", "Cateto b", "Ipotenusa c"],
        'Valore': [to_fixed(v, 2) for v in (a, b, c)],
    })


def ratio_summary(result):
    return pd.DataFrame({
        'Rapporto': ["Seno (sin α)", "Coseno (cos α)", "Tangente (tan α)"],
        'Valore': [to_fixed(v, 4) for v in (result.sin, result.cos, result.tan)],
    })


def drawn_sides(typed, result=None):
    """Lati (a, b, c) da disegnare in modalità Pitagora.
    Vince quello che è scritto nei campi; il risultato riempie solo i campi vuoti.
    """
    solved = (result.a, result.b, result.c) if result is not None else (None, None, None)
    return tuple(t if t is not None else (s if s is not None else 0) for t, s in zip(typed, solved))
