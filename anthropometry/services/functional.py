"""
Functional Assessment Service
==============================
Cardiorespiratory fitness and body-type estimates recorded alongside the
anthropometric evaluation.

VO2MAX FIELD TESTS:
  Cooper (1968), 12-minute run:
    VO2max = (distance_m − 504.9) / 44.73
  Rockport (Kline et al., 1987), 1-mile walk:
    VO2max = 132.853 − 0.0769·weight_lb − 0.3877·age + 6.315·sex
             − 3.2649·time_min − 0.1565·heart_rate
    (sex = 1 for male, 0 otherwise)

SOMATOTYPE (Heath-Carter anthropometric method):
  Endomorphy  — height-corrected sum of triceps, subscapular and suprailiac
  Mesomorphy  — bone breadths plus skinfold-corrected arm and calf girths
  Ectomorphy  — height-weight ratio (HWR = height / weight^(1/3))
"""

import logging

from anthropometry.schemas import (
    Perimeters,
    Sex,
    Skinfolds,
    Somatotype,
    VO2Protocol,
)
from anthropometry.services.body_fat import resolve_sex

logger = logging.getLogger(__name__)

KG_TO_LB = 2.20462
ROCKPORT_DEFAULT_HEART_RATE = 120
ROCKPORT_MIN_VO2 = 5.0
COOPER_MIN_DISTANCE_M = 505

SOMATOTYPE_DOMINANCE_MARGIN = 0.5
SOMATOTYPE_MIN_COMPONENT = 0.1


def estimate_vo2max(
    protocol: VO2Protocol,
    test_value: float,
    age: int,
    weight: float,
    sex: Sex,
    hr_final: float | None = None,
) -> float:
    """
    Estimate VO2max (ml/kg/min) from a field test.

    Args:
        protocol: Cooper or Rockport
        test_value: Distance in metres (Cooper) or walk time in minutes (Rockport)
        age: Age in years
        weight: Body weight in kg
        sex: Sex of the client
        hr_final: Heart rate at the end of the walk (Rockport only)

    Returns:
        VO2max, or 0 when the test value is missing or too low to estimate,
        or (Rockport) the sex is unknown.
    """
    protocol = VO2Protocol(protocol)

    if protocol == VO2Protocol.COOPER:
        if not test_value or test_value < COOPER_MIN_DISTANCE_M:
            return 0.0
        return (test_value - 504.9) / 44.73

    if not test_value or test_value <= 0:
        return 0.0
    resolved_sex = resolve_sex(sex)
    if resolved_sex is None:
        logger.warning(f"Unknown sex '{sex}' for Rockport. Returning 0.")
        return 0.0
    weight_lb = weight * KG_TO_LB
    sex_code = 1 if resolved_sex == Sex.MALE else 0
    heart_rate = hr_final or ROCKPORT_DEFAULT_HEART_RATE
    vo2 = (
        132.853
        - (0.0769 * weight_lb)
        - (0.3877 * age)
        + (6.315 * sex_code)
        - (3.2649 * test_value)
        - (0.1565 * heart_rate)
    )
    return max(ROCKPORT_MIN_VO2, vo2)


def calculate_somatotype(
    skinfolds: Skinfolds,
    perimeters: Perimeters,
    height: float,
    weight: float,
    humerus_diameter: float = 5.5,
    femur_diameter: float = 7.5,
) -> Somatotype | None:
    """
    Heath-Carter anthropometric somatotype.

    Args:
        skinfolds: Skinfolds in mm (triceps, subscapular, suprailiac, calf)
        perimeters: Girths in cm (arm_flexed, calf)
        height: Height in cm
        weight: Weight in kg
        humerus_diameter: Biepicondylar humerus breadth in cm
        femur_diameter: Biepicondylar femur breadth in cm

    Returns:
        Somatotype with each component floored at 0.1 and reported to one
        decimal, or None when height or weight is missing.
    """
    if height <= 0 or weight <= 0:
        return None

    # ── Endomorphy ──
    sum3 = skinfolds.triceps + skinfolds.subscapular + skinfolds.suprailiac
    x = sum3 * (170.18 / height)
    endo = -0.7182 + (0.1451 * x) - (0.00068 * x ** 2) + (0.0000014 * x ** 3)

    # ── Mesomorphy ──
    arm_corrected = perimeters.arm_flexed - (skinfolds.triceps / 10)
    calf_corrected = perimeters.calf - (skinfolds.calf / 10)
    meso = (
        (0.858 * humerus_diameter)
        + (0.601 * femur_diameter)
        + (0.188 * arm_corrected)
        + (0.161 * calf_corrected)
        - (0.131 * height)
        + 4.5
    )

    # ── Ectomorphy ──
    hwr = height / (weight ** (1 / 3))
    if hwr >= 40.75:
        ecto = (0.732 * hwr) - 28.58
    elif hwr > 38.25:
        ecto = (0.463 * hwr) - 17.63
    else:
        ecto = SOMATOTYPE_MIN_COMPONENT

    margin = SOMATOTYPE_DOMINANCE_MARGIN
    if endo > meso + margin and endo > ecto + margin:
        classification = "Endomorfo"
    elif meso > endo + margin and meso > ecto + margin:
        classification = "Mesomorfo"
    elif ecto > endo + margin and ecto > meso + margin:
        classification = "Ectomorfo"
    else:
        classification = "Central"

    logger.debug(
        f"Somatotype: endo={endo:.2f}, meso={meso:.2f}, ecto={ecto:.2f} "
        f"(hwr={hwr:.2f}) -> {classification}"
    )

    return Somatotype(
        endomorphy=round(max(SOMATOTYPE_MIN_COMPONENT, endo), 1),
        mesomorphy=round(max(SOMATOTYPE_MIN_COMPONENT, meso), 1),
        ectomorphy=round(max(SOMATOTYPE_MIN_COMPONENT, ecto), 1),
        classification=classification,
    )
