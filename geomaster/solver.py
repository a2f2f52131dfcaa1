"""
Motore di calcolo del triangolo rettangolo.

Due risolutori puri:
    solve_right_triangle  -> Pitagora: dati due lati trova il terzo
    solve_trig_ratios     -> Trigonometria: dato un angolo acuto e un lato trova
                             gli altri due lati e sin/cos/tan

Entrambi restituiscono il risultato con i passaggi (testo + LaTeX) oppure None
se i dati non bastano. Dati incoerenti sollevano InvalidGeometry / InvalidAngle.
"""
import logging
import math
import numbers
from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import Optional, Tuple

from geomaster.formatting import format_number, to_fixed

logger = logging.getLogger(__name__)

# --- CONFIGURAZIONE ---
RESULT_DECIMALS = 4
INTERMEDIATE_DECIMALS = 2

OUT_OF_RANGE = "I valori sono fuori dall'intervallo rappresentabile."


class Side:
    OPPOSITE = "a"    # cateto opposto ad alpha
    ADJACENT = "b"    # cateto adiacente ad alpha
    HYPOTENUSE = "c"

    ALL = (OPPOSITE, ADJACENT, HYPOTENUSE)


# --- ERRORI ---
class SolveError(ValueError):
    """Dati inseriti non validi: il messaggio è pensato per lo studente."""


class InvalidGeometry(SolveError):
    pass


class InvalidAngle(SolveError):
    pass


# --- TIPI ---
@dataclass(frozen=True)
class Step:
    text: str
    math: Optional[str] = None


@dataclass(frozen=True)
class TriangleSolveResult:
    unknown: str
    value: float
    a: float
    b: float
    c: float
    steps: Tuple[Step, ...]


@dataclass(frozen=True)
class TrigSolveResult:
    angle: float
    known_side: str
    a: float
    b: float
    c: float
    sin: float
    cos: float
    tan: float
    steps: Tuple[Step, ...]


@dataclass(frozen=True)
class Outcome:
    status: str  # "ok" | "pending" | "error"
    result: object = None
    error: Optional[SolveError] = None

    @property
    def ok(self):
        return self.status == "ok"

    @property
    def message(self):
        return str(self.error) if self.error else None


def is_present(val):
    """Un valore conta solo se è un numero reale finito (None, testo, NaN = assente)."""
    if val is None or isinstance(val, bool) or not isinstance(val, numbers.Real):
        return False
    return math.isfinite(val)


def fixed(val):
    return to_fixed(val, RESULT_DECIMALS)


def fixed2(val):
    return to_fixed(val, INTERMEDIATE_DECIMALS)


def check_representable(*sides):
    """I lati calcolati devono restare numeri finiti e positivi."""
    if not all(math.isfinite(s) and s > 0 for s in sides):
        raise InvalidGeometry(OUT_OF_RANGE)


def squares_text(a, b):
    """a², b² e la loro somma per il procedimento.
    Se in float andrebbero oltre il massimo, li calcola in Decimal (17 cifre).
    """
    sq_a, sq_b = a * a, b * b
    total = sq_a + sq_b
    if math.isfinite(total):
        return fixed2(sq_a), fixed2(sq_b), fixed2(total)
    with localcontext() as ctx:
        ctx.prec = 17
        sq_a, sq_b = ctx.multiply(Decimal(a), Decimal(a)), ctx.multiply(Decimal(b), Decimal(b))
        total = ctx.add(sq_a, sq_b)
    return fixed2(sq_a), fixed2(sq_b), fixed2(total)


def other_leg(leg, c):
    """sqrt(c² - leg²) senza passare da c² (niente overflow né underflow)."""
    prod = (c - leg) * (c + leg)
    if 0 < prod < math.inf:
        return math.sqrt(prod)
    r = leg / c
    return c * math.sqrt((1 - r) * (1 + r))


# --- PITAGORA ---
def solve_right_triangle(a=None, b=None, c=None):
    has_a, has_b, has_c = is_present(a), is_present(b), is_present(c)

    # Servono esattamente due valori: con 0, 1 o 3 si aspetta l'utente
    if has_a + has_b + has_c != 2:
        logger.debug("Pitagora: %d valori presenti, nessun calcolo", has_a + has_b + has_c)
        return None

    known = [float(v) for v, has in ((a, has_a), (b, has_b), (c, has_c)) if has]
    if any(v < 0 for v in known):
        raise InvalidGeometry("Le lunghezze dei lati non possono essere negative.")

    if has_a and has_b:
        a, b = float(a), float(b)
        sa, sb = format_number(a), format_number(b)
        try:
            c = math.hypot(a, b)
        except OverflowError:
            c = math.inf
        if not math.isfinite(c):
            raise InvalidGeometry(OUT_OF_RANGE)
        sq_a, sq_b, total = squares_text(a, b)
        steps = (
            Step("Identifichiamo i cateti:", f"a = {sa}, b = {sb}"),
            Step("Usiamo la formula:", r"c = \sqrt{a^2 + b^2}"),
            Step("Sostituiamo i valori:", rf"c = \sqrt{{{sa}^2 + {sb}^2}}"),
            Step("Calcoliamo i quadrati:", rf"c = \sqrt{{{sq_a} + {sq_b}}}"),
            Step("Sommiamo:", rf"c = \sqrt{{{total}}}"),
            Step("Risultato finale:", rf"c \approx {fixed(c)}"),
        )
        return TriangleSolveResult("c", c, a, b, c, steps)

    # Un cateto e l'ipotenusa: si ricava l'altro cateto
    leg_name, other_name = ("a", "b") if has_a else ("b", "a")
    leg, c = float(a if has_a else b), float(c)
    if c <= leg:
        raise InvalidGeometry("L'ipotenusa deve essere maggiore del cateto.")

    other = other_leg(leg, c)
    sl, sc = format_number(leg), format_number(c)
    steps = (
        Step("Identifichiamo i lati:", f"{leg_name} = {sl}, c = {sc}"),
        Step(f"Ricaviamo {other_name} dalla formula:", rf"{other_name} = \sqrt{{c^2 - {leg_name}^2}}"),
        Step("Sostituiamo i valori:", rf"{other_name} = \sqrt{{{sc}^2 - {sl}^2}}"),
        Step("Risultato finale:", rf"{other_name} \approx {fixed(other)}"),
    )
    if has_a:
        return TriangleSolveResult("b", other, leg, other, c, steps)
    return TriangleSolveResult("a", other, other, leg, c, steps)


# --- TRIGONOMETRIA ---
def solve_trig_ratios(angle, known_side, known_value):
    if known_side not in Side.ALL:
        raise ValueError(f"Lato sconosciuto: {known_side!r}")
    if not (is_present(angle) and is_present(known_value)):
        return None

    angle, val = float(angle), float(known_value)
    if angle <= 0 or angle >= 90:
        raise InvalidAngle("L'angolo deve essere compreso tra 0° e 90° (estremi esclusi).")
    if val <= 0:
        raise InvalidGeometry("La lunghezza del lato deve essere positiva.")

    rad = angle * math.pi / 180
    sin_t, cos_t, tan_t = math.sin(rad), math.cos(rad), math.tan(rad)
    # Angolo subnormale: in float seno e tangente valgono 0
    if sin_t == 0:
        raise InvalidAngle("L'angolo è troppo piccolo: i valori sono fuori dall'intervallo rappresentabile.")
    sv, sa = format_number(val), format_number(angle)
    alpha = rf"\alpha = {sa}^\circ"

    if known_side == Side.HYPOTENUSE:
        c = val
        a, b = c * sin_t, c * cos_t
    elif known_side == Side.OPPOSITE:
        a = val
        c, b = a / sin_t, a / tan_t
    else:
        b = val
        c, a = b / cos_t, b * tan_t
    # Valori estremi: il lato ricavato può andare a infinito o a zero
    check_representable(a, b, c)

    if known_side == Side.HYPOTENUSE:
        steps = (
            Step("Dati ipotenusa (c) e angolo (α):", f"c = {sv}, {alpha}"),
            Step("Calcoliamo il cateto opposto (a):",
                 rf"a = c \cdot \sin(\alpha) = {sv} \cdot \sin({sa}^\circ) \approx {fixed(a)}"),
            Step("Calcoliamo il cateto adiacente (b):",
                 rf"b = c \cdot \cos(\alpha) = {sv} \cdot \cos({sa}^\circ) \approx {fixed(b)}"),
        )
    elif known_side == Side.OPPOSITE:
        steps = (
            Step("Dati cateto opposto (a) e angolo (α):", f"a = {sv}, {alpha}"),
            Step("Calcoliamo l'ipotenusa (c):",
                 rf"c = a / \sin(\alpha) = {sv} / \sin({sa}^\circ) \approx {fixed(c)}"),
            Step("Calcoliamo il cateto adiacente (b):",
                 rf"b = a / \tan(\alpha) = {sv} / \tan({sa}^\circ) \approx {fixed(b)}"),
        )
    else:
        steps = (
            Step("Dati cateto adiacente (b) e angolo (α):", f"b = {sv}, {alpha}"),
            Step("Calcoliamo l'ipotenusa (c):",
                 rf"c = b / \cos(\alpha) = {sv} / \cos({sa}^\circ) \approx {fixed(c)}"),
            Step("Calcoliamo il cateto opposto (a):",
                 rf"a = b \cdot \tan(\alpha) = {sv} \cdot \tan({sa}^\circ) \approx {fixed(a)}"),
        )

    return TrigSolveResult(angle, known_side, a, b, c, sin_t, cos_t, tan_t, steps)


def evaluate(solver, *args, **kwargs):
    """Riunisce i tre esiti (risultato, dati insufficienti, errore) in un Outcome."""
    try:
        result = solver(*args, **kwargs)
    except SolveError as e:
        logger.debug("%s rifiutato: %s", solver.__name__, e)
        return Outcome("error", error=e)
    if result is None:
        return Outcome("pending")
    return Outcome("ok", result=result)
