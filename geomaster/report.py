"""
Esportazione del procedimento: report HTML (MathJax) e PDF (ReportLab).
"""
import logging
from datetime import datetime
from html import escape
from io import BytesIO

import matplotlib
matplotlib.use('Agg')  # Backend non interattivo per server
import matplotlib.pyplot as plt
from PIL import Image as PILImage
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Image as RLImage, Table, TableStyle

from geomaster import __version__
from geomaster.formatting import clean_latex_for_text

logger = logging.getLogger(__name__)

APP_NAME = "GeoMaster"


def report_filename(kind, ext, now=None):
    # Formato: geomaster_pitagora_07_02_2025_14_30.pdf
    now = now or datetime.now()
    return f"geomaster_{kind}_{now.strftime('%d_%m_%Y_%H_%M')}.{ext}"


def latex_to_rl_image(latex_str, fontsize=12):
    """Converte stringa LaTeX in immagine ReportLab usando Matplotlib.
    Ritorna None se mathtext non supporta la sintassi (fallback testuale).
    """
    if not latex_str:
        return None

    # Matplotlib mathtext richiede $...$ e non conosce ^\circ
    render_str = "$" + latex_str.strip().replace(r"^\circ", r"^{\circ}") + "$"

    buf = BytesIO()
    fig = plt.figure(figsize=(0.1, 0.1))
    try:
        fig.text(0, 0, render_str, fontsize=fontsize)
        fig.savefig(buf, format='png', dpi=300, bbox_inches='tight', transparent=True, pad_inches=0.02)
    except ValueError as e:
        logger.debug("mathtext non supporta %r: %s", latex_str, e)
        return None
    finally:
        plt.close(fig)

    buf.seek(0)
    with PILImage.open(buf) as pil_img:
        w_px, h_px = pil_img.size

    # Conversione px -> punti (300dpi -> 72dpi)
    scale_factor = 72 / 300 * 0.8
    buf.seek(0)
    return RLImage(buf, width=w_px * scale_factor, height=h_px * scale_factor)


def figure_to_png(fig, width=900, height=700):
    """PNG del grafico Plotly (richiede kaleido). None se l'esportazione non è disponibile."""
    if fig is None:
        return None
    try:
        return fig.to_image(format='png', width=width, height=height)
    except Exception as e:
        logger.warning("Grafico non esportabile (kaleido mancante?): %s", e)
        return None


def generate_pdf_report(title, steps, summary, fig=None, now=None):
    """PDF con grafico, passaggi e riepilogo. Ritorna i byte, o None in caso di errore."""
    now = now or datetime.now()
    try:
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=20*mm, leftMargin=20*mm, topMargin=15*mm, bottomMargin=15*mm)

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle('CustomTitle', parent=styles['Heading1'], fontSize=18, textColor=colors.HexColor('#2c3e50'), spaceAfter=8, alignment=TA_CENTER)
        heading_style = ParagraphStyle('CustomHeading', parent=styles['Heading2'], fontSize=13, textColor=colors.HexColor('#2980b9'), spaceAfter=6, spaceBefore=10)
        step_style = ParagraphStyle('StepStyle', parent=styles['Normal'], fontSize=9, leading=11, leftIndent=8, rightIndent=8, spaceBefore=3, spaceAfter=3)
        step_title_style = ParagraphStyle('StepTitleStyle', parent=styles['Normal'], fontSize=10, fontName='Helvetica-Bold', leftIndent=8, spaceBefore=3)

        story = []
        story.append(Paragraph(f'<b>{APP_NAME} - {escape(title)}</b>', title_style))
        story.append(Paragraph(f'Data: {now.strftime("%d/%m/%Y %H:%M")}', styles['Normal']))
        story.append(Spacer(1, 8*mm))

        # Grafico
        png = figure_to_png(fig)
        if png:
            story.append(Paragraph('<b>Triangolo</b>', heading_style))
            story.append(RLImage(BytesIO(png), width=120*mm, height=93*mm))
            story.append(Spacer(1, 6*mm))
        elif fig is not None:
            story.append(Paragraph('<b>Triangolo</b>', heading_style))
            story.append(Paragraph('<i>[Grafico non disponibile - visibile nell\'applicazione web]</i>', styles['Normal']))
            story.append(Spacer(1, 3*mm))

        # Passaggi
        story.append(Paragraph('<b>Procedimento passo per passo</b>', heading_style))
        if not steps:
            story.append(Paragraph('<i>Nessun passaggio disponibile</i>', styles['Normal']))

        for i, step in enumerate(steps, 1):
            # Helvetica non ha le lettere greche: alpha dal font Symbol
            text = escape(step.text).replace('α', '<font name="Symbol">a</font>')
            rows = [[Paragraph(f'Passo {i}: {text}', step_title_style)]]
            if step.math:
                img = latex_to_rl_image(step.math, fontsize=11)
                rows.append([img if img else Paragraph(escape(clean_latex_for_text(step.math)), step_style)])

            step_table = Table(rows, colWidths=[165*mm])
            step_table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#e8f4f8')),
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
                ('TOPPADDING', (0, 0), (-1, -1), 5),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
                ('BOX', (0, 0), (-1, -1), 0.5, colors.grey)
            ]))
            story.append(step_table)
            story.append(Spacer(1, 3*mm))

        # Riepilogo
        if summary:
            story.append(Paragraph('<b>Riepilogo risultati</b>', heading_style))
            summary_table = Table([[k, v] for k, v in summary.items()], colWidths=[60*mm, 40*mm])
            summary_table.setStyle(TableStyle([
                ('FONT', (0, 0), (0, -1), 'Helvetica-Bold', 10),
                ('FONT', (1, 0), (1, -1), 'Helvetica', 10),
                ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
                ('TOPPADDING', (0, 0), (-1, -1), 4),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
                ('LINEABOVE', (0, 0), (-1, 0), 1, colors.HexColor('#2980b9')),
                ('LINEBELOW', (0, -1), (-1, -1), 1, colors.HexColor('#2980b9'))
            ]))
            story.append(summary_table)

        story.append(Spacer(1, 8*mm))
        footer_style = ParagraphStyle('Footer', parent=styles['Normal'], fontSize=8, textColor=colors.grey, alignment=TA_CENTER)
        story.append(Paragraph(f'<i>Report generato da {APP_NAME} v{__version__}</i>', footer_style))

        doc.build(story)
        return buffer.getvalue()
    except Exception:
        logger.exception("Errore generazione PDF")
        return None


def generate_html_report(title, steps, summary, now=None):
    now = now or datetime.now()

    if not steps:
        rows_html = "<p class='empty'>Nessun passaggio disponibile.</p>"
    else:
        rows_html = ""
        for i, step in enumerate(steps, 1):
            math_html = f'<div class="math-box">$${step.math}$$</div>' if step.math else ""
            rows_html += f"""
            <div class="entry">
                <div class="entry-header">Passo {i}: {escape(step.text)}</div>
                {math_html}
            </div>
            """

    if summary:
        summary_rows = ''.join(f'<tr><td>{escape(str(k))}</td><td>{escape(str(v))}</td></tr>' for k, v in summary.items())
    else:
        summary_rows = '<tr><td colspan="2" class="empty">Nessun risultato calcolato</td></tr>'

    html = f"""<!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <title>{APP_NAME} - {escape(title)}</title>
        <script>MathJax={{tex:{{inlineMath:[['$','$'],['\\\\(','\\\\)']]}}}};</script>
        <script id="MathJax-script" async src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
        <style>
            body {{ font-family: 'Segoe UI', sans-serif; padding: 40px; color: #333; background: #fdfdfd; }}
            h1 {{ color: #2c3e50; border-bottom: 4px solid #2980b9; padding-bottom: 10px; }}
            .entry {{ border: 1px solid #e0e0e0; border-radius: 8px; margin-bottom: 20px; background: #fff; overflow: hidden; }}
            .entry-header {{ background: #2980b9; color: white; padding: 10px 15px; font-weight: bold; }}
            .math-box {{ font-size: 1.2em; background: #f8f9fa; padding: 15px; text-align: center; overflow-x: auto; }}
            .empty {{ text-align: center; color: #999; font-style: italic; }}
            table {{ width: 100%; border-collapse: collapse; margin-top: 30px; border: 1px solid #ddd; }}
            td, th {{ border: 1px solid #ddd; padding: 12px; text-align: left; }}
            th {{ background: #f2f2f2; color: #2c3e50; }}
        </style>
    </head>
    <body>
        <h1>📐 {APP_NAME} - {escape(title)}</h1>
        <p><b>Data:</b> {now.strftime("%d/%m/%Y alle %H:%M")}</p>
        <h2>Procedimento passo per passo</h2>
        {rows_html}
        <h3>Riepilogo risultati</h3>
        <table>
            <tr><th>Grandezza</th><th>Valore</th></tr>
            {summary_rows}
        </table>
    </body>
    </html>
    """
    return html
