"""GeoMaster: triangolo rettangolo con Pitagora e trigonometria, passo per passo."""
__version__ = "1.0.0"

from geomaster.solver import (  # noqa: E402
    InvalidAngle,
    InvalidGeometry,
    Outcome,
    Side,
    SolveError,
    Step,
    TriangleSolveResult,
    TrigSolveResult,
    evaluate,
    solve_right_triangle,
    solve_trig_ratios,
)
