"""Contenuto statico del pannello "Ripasso di Geometria"."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Formula:
    label: str
    latex: str


@dataclass(frozen=True)
class ReferenceSection:
    title: str
    body: str
    notes: Tuple[Tuple[str, str], ...] = ()
    formulas: Tuple[Formula, ...] = ()


REFERENCE_TITLE = "Ripasso di Geometria"

REFERENCE_SECTIONS = (
    ReferenceSection(
        "1. Il triangolo rettangolo",
        "È il triangolo che ha un angolo di 90° (angolo retto). I suoi lati hanno nomi speciali:",
        notes=(
            ("Cateti", "I due lati che formano l'angolo retto."),
            ("Ipotenusa", "Il lato più lungo, opposto all'angolo retto."),
        ),
    ),
    ReferenceSection(
        "2. Teorema di Pitagora",
        "In ogni triangolo rettangolo il quadrato dell'ipotenusa è uguale "
        "alla somma dei quadrati dei cateti.",
        formulas=(Formula("Pitagora", r"a^2 + b^2 = c^2"),),
    ),
    ReferenceSection(
        "3. Rapporti trigonometrici (SOH-CAH-TOA)",
        "Mnemotecnica per ricordare le formule di base:",
        formulas=(
            Formula("SOH", r"\sin(\alpha) = \frac{Opposto}{Ipotenusa}"),
            Formula("CAH", r"\cos(\alpha) = \frac{Adiacente}{Ipotenusa}"),
            Formula("TOA", r"\tan(\alpha) = \frac{Opposto}{Adiacente}"),
        ),
    ),
)
