"""
Body Fat Calculation Service
==============================
Estimates body fat percentage with one of seven published protocols.

Each protocol is a pure function registered in PROTOCOL_REGISTRY. Two kinds
exist:

  density  — the regression predicts body density, which is converted to
             body fat % with the Siri equation:
               Body Fat % = (4.95 / Body Density - 4.50) × 100
  direct   — the regression predicts body fat % straight away.

| Protocol  | Sites (M)                          | Sites (F)                | Clamp           |
|-----------|------------------------------------|--------------------------|-----------------|
| Pollock3  | chest, abdominal, thigh            | triceps, suprailiac, thigh | [2, 60]       |
| Pollock7  | chest, midaxillary, triceps, subscapular, abdominal, suprailiac, thigh | same | [2, 60] |
| Guedes    | triceps, suprailiac, abdominal     | same                     | [2, 60]         |
| Petroski  | subscapular, triceps, suprailiac, calf | same                 | [2, 60]         |
| Faulkner  | triceps, subscapular, suprailiac, abdominal | same            | [3, 60]         |
| Weltman   | abdomen (or waist) perimeter, weight, height | same           | M [5, 65], F [8, 70] |
| Slaughter | triceps, subscapular               | same                     | [3, 50]         |

INSUFFICIENT DATA:
  When the governing skinfold sum is 0 (nothing entered yet) the result is
  exactly 0. This is a sentinel, not an error: the evaluation screen calls
  this service on every keystroke while the form is still half empty.

Male coefficients are used for sex "M" only; "F" and "O" use the female
equations.
"""

import logging
import math
from collections.abc import Callable
from typing import NamedTuple

from anthropometry.schemas import BodyFatEstimate, Perimeters, Protocol, Sex, Skinfolds

logger = logging.getLogger(__name__)


# ============================================================
# SHARED STEPS
# ============================================================

def sanity_clamp(value: float, low: float, high: float) -> float:
    """
    Bound a protocol result into its physiological range.

    Non-finite values and exact zeros mean "no result" and come back as 0.
    """
    if not math.isfinite(value) or value == 0:
        return 0.0
    return max(low, min(high, value))


def siri_equation(body_density: float) -> float:
    """
    Convert body density to body fat percentage using the Siri equation.

    Reference:
        Siri, W.E. (1961). Body composition from fluid spaces and density:
        Analysis of methods. In J. Brozek & A. Henschel (Eds.), Techniques for
        Measuring Body Composition (pp. 223-224). Washington, DC: National
        Academy of Sciences.
    """
    if body_density <= 0:
        logger.warning(f"Invalid body density: {body_density}. Returning 0.")
        return 0.0
    return ((4.95 / body_density) - 4.50) * 100


# ============================================================
# PROTOCOL FORMULAS
# ============================================================
# Signature: (sum_mm, age, is_male, weight_kg, height_cm, perimeters) -> float
# Density protocols return g/mL, direct protocols return body fat %.

def _pollock3_density(s, age, is_male, weight, height, perimeters):
    """Jackson & Pollock (1978, 1980) three-site equations."""
    if is_male:
        return 1.10938 - (0.0008267 * s) + (0.0000016 * s * s) - (0.0002574 * age)
    return 1.0994921 - (0.0009929 * s) + (0.0000023 * s * s) - (0.0001392 * age)


def _pollock7_density(s, age, is_male, weight, height, perimeters):
    """Jackson & Pollock (1978, 1980) seven-site generalized equations."""
    if is_male:
        return 1.112 - (0.00043499 * s) + (0.00000055 * s * s) - (0.00028826 * age)
    return 1.097 - (0.00046971 * s) + (0.00000056 * s * s) - (0.00012828 * age)


def _guedes_density(s, age, is_male, weight, height, perimeters):
    """Guedes (1985), Brazilian adults."""
    if is_male:
        return 1.17136 - (0.06706 * math.log10(s))
    return 1.16650 - (0.07063 * math.log10(s))


def _petroski_density(s, age, is_male, weight, height, perimeters):
    """Petroski (1995), four sites for both sexes."""
    if is_male:
        return 1.10726863 - (0.00081201 * s) + (0.00000212 * s * s) - (0.00041761 * age)
    return 1.05481122 - (0.00082334 * s) + (0.000003 * s * s) - (0.0001392 * age)


def _faulkner_body_fat(s, age, is_male, weight, height, perimeters):
    return (s * 0.153) + 5.783


def _weltman_body_fat(s, age, is_male, weight, height, perimeters):
    """
    Weltman et al. (1987/1988) circumference equations for obese adults.
    Uses the abdominal perimeter, falling back to the waist when it is missing.
    """
    abdomen = perimeters.abdomen or perimeters.waist
    if abdomen <= 0 or weight <= 0:
        return 0.0
    if is_male:
        return (0.31457 * abdomen) - (0.10969 * weight) + 10.8336
    if height <= 0:
        return 0.0
    return (0.11077 * abdomen) - (0.17666 * height) + (0.14354 * weight) + 29.7403


def _slaughter_body_fat(s, age, is_male, weight, height, perimeters):
    """Slaughter et al. (1988), children and adolescents."""
    if s > 35:
        return (0.783 * s + 1.6) if is_male else (0.546 * s + 9.7)
    if is_male:
        return (1.21 * s) - (0.008 * s * s) - 1.7
    return (1.33 * s) - (0.013 * s * s) - 2.5


# ============================================================
# PROTOCOL REGISTRY
# ============================================================

class ProtocolEntry(NamedTuple):
    kind: str  # "density" or "direct"
    formula: Callable[..., float]
    male_sites: tuple[str, ...]
    female_sites: tuple[str, ...]
    male_clamp: tuple[float, float]
    female_clamp: tuple[float, float]

    def sites(self, is_male: bool) -> tuple[str, ...]:
        return self.male_sites if is_male else self.female_sites

    def clamp(self, is_male: bool) -> tuple[float, float]:
        return self.male_clamp if is_male else self.female_clamp


_POLLOCK7_SITES = (
    "chest", "midaxillary", "triceps", "subscapular", "abdominal", "suprailiac", "thigh",
)
_GUEDES_SITES = ("triceps", "suprailiac", "abdominal")
_PETROSKI_SITES = ("subscapular", "triceps", "suprailiac", "calf")
_FAULKNER_SITES = ("triceps", "subscapular", "suprailiac", "abdominal")
_SLAUGHTER_SITES = ("triceps", "subscapular")

PROTOCOL_REGISTRY: dict[Protocol, ProtocolEntry] = {
    Protocol.POLLOCK3: ProtocolEntry(
        "density", _pollock3_density,
        ("chest", "abdominal", "thigh"), ("triceps", "suprailiac", "thigh"),
        (2, 60), (2, 60),
    ),
    Protocol.POLLOCK7: ProtocolEntry(
        "density", _pollock7_density,
        _POLLOCK7_SITES, _POLLOCK7_SITES,
        (2, 60), (2, 60),
    ),
    Protocol.GUEDES: ProtocolEntry(
        "density", _guedes_density,
        _GUEDES_SITES, _GUEDES_SITES,
        (2, 60), (2, 60),
    ),
    Protocol.PETROSKI: ProtocolEntry(
        "density", _petroski_density,
        _PETROSKI_SITES, _PETROSKI_SITES,
        (2, 60), (2, 60),
    ),
    Protocol.FAULKNER: ProtocolEntry(
        "direct", _faulkner_body_fat,
        _FAULKNER_SITES, _FAULKNER_SITES,
        (3, 60), (3, 60),
    ),
    Protocol.WELTMAN: ProtocolEntry(
        "direct", _weltman_body_fat,
        (), (),
        (5, 65), (8, 70),
    ),
    Protocol.SLAUGHTER: ProtocolEntry(
        "direct", _slaughter_body_fat,
        _SLAUGHTER_SITES, _SLAUGHTER_SITES,
        (3, 50), (3, 50),
    ),
}


def resolve_protocol(protocol: Protocol | str) -> Protocol | None:
    """Map an identifier to a registered Protocol, or None if unknown."""
    try:
        return Protocol(protocol)
    except ValueError:
        return None


def resolve_sex(sex: Sex | str) -> Sex | None:
    """Map an identifier to a Sex, or None if unknown."""
    try:
        return Sex(sex)
    except ValueError:
        return None


def sum_of_skinfolds(skinfolds: Skinfolds, sites: tuple[str, ...]) -> float:
    return sum(getattr(skinfolds, site) for site in sites)


# ============================================================
# ENTRY POINTS
# ============================================================

def estimate_body_fat(
    protocol: Protocol | str,
    skinfolds: Skinfolds,
    age: int,
    sex: Sex,
    weight: float,
    height: float,
    perimeters: Perimeters | None = None,
) -> BodyFatEstimate | None:
    """
    Run one protocol and return the estimate with its intermediate values.

    Args:
        protocol: Protocol (or its identifier string)
        skinfolds: Skinfold thickness per site in mm
        age: Age in completed years
        sex: Sex of the client
        weight: Body weight in kg
        height: Height in cm
        perimeters: Circumferences in cm (only Weltman uses them)

    Returns:
        BodyFatEstimate, with body_fat_percent clamped to the protocol range
        or exactly 0 when the data is insufficient or the sex identifier is
        unknown. None for an unknown protocol identifier.
    """
    resolved = resolve_protocol(protocol)
    if resolved is None:
        logger.warning(f"Unknown body fat protocol '{protocol}'. Returning no estimate.")
        return None

    resolved_sex = resolve_sex(sex)
    if resolved_sex is None:
        logger.warning(f"Unknown sex '{sex}' for {resolved.value}. Returning 0.")
        return BodyFatEstimate(protocol=resolved, sum_of_skinfolds_mm=0.0, body_fat_percent=0.0)

    entry = PROTOCOL_REGISTRY[resolved]
    is_male = resolved_sex == Sex.MALE
    sites = entry.sites(is_male)
    total = sum_of_skinfolds(skinfolds, sites)
    perimeters = perimeters or Perimeters()

    def _empty() -> BodyFatEstimate:
        return BodyFatEstimate(
            protocol=resolved, sum_of_skinfolds_mm=total, body_fat_percent=0.0
        )

    if sites and total == 0:
        logger.debug(f"{resolved.value}: skinfold sum is 0, insufficient data")
        return _empty()

    # Only the selected formula runs, so a failure here cannot hide a valid
    # result from another protocol.
    try:
        raw = entry.formula(total, age, is_male, weight, height, perimeters)
        density = raw if entry.kind == "density" else None
        body_fat = siri_equation(raw) if density is not None else raw
    except (ArithmeticError, ValueError) as e:
        logger.warning(f"{resolved.value} formula failed (sum={total}mm, age={age}): {e}")
        return _empty()

    low, high = entry.clamp(is_male)
    clamped = sanity_clamp(body_fat, low, high)

    logger.debug(
        f"{resolved.value} calculation: sum_skinfolds={total}mm, age={age}, "
        f"sex={resolved_sex.value}, density={density}, raw={body_fat:.4f}% -> {clamped:.4f}%"
    )

    return BodyFatEstimate(
        protocol=resolved,
        sum_of_skinfolds_mm=total,
        body_density=density if clamped else None,
        body_fat_percent=clamped,
    )


def calculate_body_fat(
    protocol: Protocol | str,
    skinfolds: Skinfolds,
    age: int,
    sex: Sex,
    weight: float,
    height: float,
    perimeters: Perimeters | None = None,
) -> float:
    """
    Body fat percentage for the given protocol.

    Returns 0 when the required inputs are missing or the protocol
    identifier is not recognised.
    """
    estimate = estimate_body_fat(protocol, skinfolds, age, sex, weight, height, perimeters)
    if estimate is None:
        return 0.0
    return estimate.body_fat_percent
