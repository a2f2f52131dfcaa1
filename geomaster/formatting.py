import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext

import numpy as np

# Oltre questa soglia toFixed e String passano alla notazione esponenziale
EXPONENT_ABOVE = 1e21
EXPONENT_BELOW = 1e-6


def to_fixed(val, digits):
    """Arrotonda come Number.toFixed: metà verso l'alto sul valore binario esatto.
    Es: to_fixed(0.125, 2) -> '0.13' (format() darebbe '0.12')
    Accetta anche Decimal. Da 1e21 in su restituisce la forma esponenziale.
    """
    d = Decimal(val)
    if not d.is_finite():
        raise ValueError(f"Valore non finito: {val!r}")
    if d.copy_abs() >= Decimal(EXPONENT_ABOVE):
        if isinstance(val, Decimal):
            return f"{d.normalize():e}"
        return format_number(val)

    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        # 21 cifre intere + decimali: la precisione di default (28) non basta
        ctx.prec = 64
        rounded = d.quantize(quantum, rounding=ROUND_HALF_UP)
        if rounded == 0:
            rounded = rounded.copy_abs()  # niente '-0.00'
    return f"{rounded:.{digits}f}"


def format_number(val):
    """Valore inserito dall'utente, come lo scriverebbe String(): 3 -> '3', 2.5 -> '2.5',
    0.00001 -> '0.00001', 1e21 -> '1e+21'
    """
    val = float(val)
    if val == 0:
        return "0"
    if EXPONENT_BELOW <= abs(val) < EXPONENT_ABOVE:
        return np.format_float_positional(val, trim='-')
    return np.format_float_scientific(val, trim='-', exp_digits=1)


def parse_number(raw):
    """Testo di un campo -> float, oppure None se vuoto o non numerico."""
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        val = float(raw)
    else:
        text = str(raw).strip().replace(",", ".")
        if not text:
            return None
        try:
            val = float(text)
        except ValueError:
            return None
    if not math.isfinite(val):
        return None
    return val


def clean_latex_for_text(text):
    """Rimuove LaTeX e converte in testo leggibile"""
    if not isinstance(text, str):
        return str(text)

    text = text.replace('$$', '').replace('$', '')

    # \sqrt{...} -> √(...)
    text = re.sub(r'\\sqrt\{([^{}]*)\}', r'√(\1)', text)

    replacements = {
        r'^\circ': '°',
        r'\cdot': '×', r'\times': '×', r'\div': '÷',
        r'\approx': '≈', r'\le': '≤', r'\ge': '≥',
        r'\alpha': 'α', r'\beta': 'β', r'\theta': 'θ', r'\pi': 'π',
        r'\sin': 'sin', r'\cos': 'cos', r'\tan': 'tan',
        '^2': '²', '{': '', '}': '',
    }
    for latex, replacement in replacements.items():
        text = text.replace(latex, replacement)

    # \frac e altri comandi rimasti
    text = re.sub(r'\\[a-zA-Z]+', '', text)
    text = re.sub(r'\s+', ' ', text).strip()
    return text


def step_to_text(step):
    if step.math:
        return f"{step.text} {clean_latex_for_text(step.math)}"
    return step.text


def steps_to_text(steps):
    """Testo da copiare: una riga per passaggio."""
    return "\n".join(step_to_text(s) for s in steps)
