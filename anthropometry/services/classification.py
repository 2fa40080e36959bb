"""
Classification Service
=======================
Independent threshold lookups for the evaluation report. Each lookup is a
pure function of its inputs and returns a label, a severity tier and the
number it classified.

BMI (WHO):
  < 18.5        Abaixo do Peso   moderate
  18.5 – < 25   Normal           low
  25 – < 30     Sobrepeso        moderate
  ≥ 30          Obesidade        high

BODY FAT %:
  Male:   < 10 Atleta, < 15 Excelente, < 20 Bom/Normal (low),
          < 25 Elevado (moderate), else Muito Elevado (high)
  Female: < 15 Atleta, < 22 Excelente, < 28 Bom/Normal (low),
          < 32 Elevado (moderate), else Muito Elevado (high)

WAIST-HIP RATIO:
  Threshold 0.95 (male) / 0.85 (female). Above threshold → Risco Elevado.

Sex "O" has no table of its own and is classified with the male bands and
threshold.

A lookup whose inputs are missing or zero returns None ("not computed").
"""

import logging
import math

from anthropometry.schemas import ClassificationResult, Severity, Sex
from anthropometry.services.body_fat import resolve_sex

logger = logging.getLogger(__name__)

# (exclusive upper bound, label, severity), checked in order
BMI_BANDS = [
    (18.5, "Abaixo do Peso", Severity.MODERATE),
    (25.0, "Normal", Severity.LOW),
    (30.0, "Sobrepeso", Severity.MODERATE),
    (math.inf, "Obesidade", Severity.HIGH),
]

BODY_FAT_BANDS_MALE = [
    (10.0, "Atleta", Severity.LOW),
    (15.0, "Excelente", Severity.LOW),
    (20.0, "Bom/Normal", Severity.LOW),
    (25.0, "Elevado", Severity.MODERATE),
    (math.inf, "Muito Elevado", Severity.HIGH),
]

BODY_FAT_BANDS_FEMALE = [
    (15.0, "Atleta", Severity.LOW),
    (22.0, "Excelente", Severity.LOW),
    (28.0, "Bom/Normal", Severity.LOW),
    (32.0, "Elevado", Severity.MODERATE),
    (math.inf, "Muito Elevado", Severity.HIGH),
]

WHR_THRESHOLD_MALE = 0.95
WHR_THRESHOLD_FEMALE = 0.85

# VO2max (ml/kg/min), (exclusive lower bound, label, severity) checked in order
VO2_BANDS_MALE = [
    (52.0, "Excelente", Severity.LOW),
    (42.0, "Bom", Severity.LOW),
    (33.0, "Médio", Severity.MODERATE),
    (-math.inf, "Fraco", Severity.HIGH),
]

VO2_BANDS_FEMALE = [
    (45.0, "Excelente", Severity.LOW),
    (35.0, "Bom", Severity.LOW),
    (28.0, "Médio", Severity.MODERATE),
    (-math.inf, "Fraco", Severity.HIGH),
]


def _resolve_sex(sex: Sex, lookup: str) -> Sex | None:
    resolved = resolve_sex(sex)
    if resolved is None:
        logger.warning(f"Unknown sex '{sex}', {lookup} not classified")
    return resolved


def _lookup_below(value: float, bands: list) -> ClassificationResult | None:
    for upper, label, severity in bands:
        if value < upper:
            return ClassificationResult(value=value, status=label, severity=severity)


def calculate_bmi(weight: float, height_cm: float) -> float | None:
    """BMI = weight_kg / (height_m)². None if either input is not positive."""
    if weight <= 0 or height_cm <= 0:
        return None
    height_m = height_cm / 100
    return weight / (height_m * height_m)


def classify_bmi(weight: float, height: float) -> ClassificationResult | None:
    """
    Classify Body Mass Index.

    Args:
        weight: Body weight in kg
        height: Height in cm

    Returns:
        ClassificationResult with the BMI as value, or None if weight or
        height is missing.
    """
    bmi = calculate_bmi(weight, height)
    if bmi is None:
        return None
    return _lookup_below(bmi, BMI_BANDS)


def classify_body_fat(body_fat_percent: float, sex: Sex) -> ClassificationResult | None:
    """
    Classify body fat percentage with the sex-specific table.

    Returns:
        ClassificationResult with the body fat % as value, or None when
        body_fat_percent is the 0 "insufficient data" sentinel (or any
        non-positive or non-finite value) or the sex is unknown.
    """
    if not math.isfinite(body_fat_percent) or body_fat_percent <= 0:
        return None
    resolved = _resolve_sex(sex, "body fat")
    if resolved is None:
        return None
    bands = BODY_FAT_BANDS_FEMALE if resolved == Sex.FEMALE else BODY_FAT_BANDS_MALE
    return _lookup_below(body_fat_percent, bands)


def classify_whr(
    waist: float | None,
    hips: float | None,
    sex: Sex,
) -> ClassificationResult | None:
    """
    Classify the waist-to-hip ratio.

    Returns:
        ClassificationResult with value == waist / hips, or None when
        waist or hips is missing or zero, the ratio is not a finite
        positive number, or the sex is unknown.
    """
    if not waist or not hips:
        return None

    whr = waist / hips
    if not math.isfinite(whr) or whr <= 0:
        return None
    resolved = _resolve_sex(sex, "waist-hip ratio")
    if resolved is None:
        return None
    threshold = WHR_THRESHOLD_FEMALE if resolved == Sex.FEMALE else WHR_THRESHOLD_MALE

    if whr > threshold:
        return ClassificationResult(value=whr, status="Risco Elevado", severity=Severity.HIGH)
    return ClassificationResult(value=whr, status="Baixo Risco", severity=Severity.LOW)


def classify_vo2(vo2max: float, sex: Sex) -> ClassificationResult | None:
    """Classify VO2max (ml/kg/min). None when no estimate is available or the sex is unknown."""
    if vo2max <= 0:
        return None
    resolved = _resolve_sex(sex, "VO2max")
    if resolved is None:
        return None
    bands = VO2_BANDS_FEMALE if resolved == Sex.FEMALE else VO2_BANDS_MALE
    for lower, label, severity in bands:
        if vo2max > lower:
            return ClassificationResult(value=vo2max, status=label, severity=severity)
    logger.warning(f"VO2max {vo2max} matched no band")
    return None
