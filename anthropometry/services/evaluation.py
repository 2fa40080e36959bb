"""
Evaluation Service
===================
Runs the whole assessment pipeline for one evaluation and compares
evaluations over time.

PIPELINE:
  1. Body fat % with the selected protocol (clamped, 0 if insufficient data)
  2. Fat mass / lean mass from total weight
  3. BMR / TDEE from lean mass
  4. BMI, body fat and waist-hip classifications (independent lookups)
  5. Heath-Carter somatotype
  6. VO2max, when a field test was recorded

Every step is a pure function, so the same request always yields the same
report. Reports are what the capture workflow stores in the client record;
compare_evaluations() turns two stored reports into a progress summary.
"""

import logging
from datetime import date

from anthropometry.schemas import (
    EvaluationReport,
    EvaluationRequest,
    MetricChange,
    ProgressComparison,
    VO2MaxResult,
)
from anthropometry.services.body_fat import estimate_body_fat
from anthropometry.services.classification import (
    classify_bmi,
    classify_body_fat,
    classify_vo2,
    classify_whr,
)
from anthropometry.services.composition import compute_composition
from anthropometry.services.functional import calculate_somatotype, estimate_vo2max
from anthropometry.services.metabolism import compute_metabolism

logger = logging.getLogger(__name__)


def calculate_age(birth_date: date, reference_date: date | None = None) -> int:
    """
    Age in completed years on the reference date (today by default).
    The evaluation date is used as reference so stored reports keep the age
    the client had when measured.
    """
    ref = reference_date or date.today()
    age = ref.year - birth_date.year
    if (ref.month, ref.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def evaluate(request: EvaluationRequest) -> EvaluationReport:
    """
    Build the full evaluation report for one set of measurements.

    Args:
        request: Protocol, measurements and optional VO2 field test

    Returns:
        EvaluationReport. Missing inputs degrade to 0 / None in the
        affected fields; nothing is raised.
    """
    m = request.measurements

    body_fat = estimate_body_fat(
        request.protocol,
        m.skinfolds,
        m.age,
        m.sex,
        m.weight_kg,
        m.height_cm,
        m.perimeters,
    )
    composition = compute_composition(body_fat.body_fat_percent, m.weight_kg)
    metabolism = compute_metabolism(
        m.weight_kg, m.height_cm, m.age, m.sex, composition.lean_mass_kg
    )

    vo2_result = None
    if request.vo2_test is not None:
        test = request.vo2_test
        vo2 = estimate_vo2max(
            test.protocol, test.test_value, m.age, m.weight_kg, m.sex, test.hr_final
        )
        vo2_result = VO2MaxResult(
            protocol=test.protocol, vo2max=vo2, classification=classify_vo2(vo2, m.sex)
        )

    report = EvaluationReport(
        protocol=request.protocol,
        sex=m.sex,
        weight_kg=m.weight_kg,
        height_cm=m.height_cm,
        body_fat=body_fat,
        composition=composition,
        metabolism=metabolism,
        bmi=classify_bmi(m.weight_kg, m.height_cm),
        body_fat_classification=classify_body_fat(body_fat.body_fat_percent, m.sex),
        whr=classify_whr(m.perimeters.waist, m.perimeters.hips, m.sex),
        somatotype=calculate_somatotype(
            m.skinfolds,
            m.perimeters,
            m.height_cm,
            m.weight_kg,
            request.humerus_diameter_cm,
            request.femur_diameter_cm,
        ),
        vo2max=vo2_result,
    )

    logger.info(
        f"Evaluation ({request.protocol.value}, sex={m.sex.value}, age={m.age}): "
        f"weight={m.weight_kg}kg, body_fat={body_fat.body_fat_percent:.2f}%, "
        f"lean_mass={composition.lean_mass_kg:.2f}kg, tdee={metabolism.tdee_kcal:.0f} kcal"
    )
    return report


def _make_change(previous: float, current: float) -> MetricChange:
    difference = current - previous
    return MetricChange(
        previous=previous,
        current=current,
        difference=difference,
        percentage=(difference / previous) * 100 if previous else 0.0,
    )


def compare_evaluations(
    previous: EvaluationReport,
    current: EvaluationReport,
) -> ProgressComparison:
    """
    Compare two evaluations of the same client, oldest first.

    Raises:
        ValueError: If the two reports were produced with different
            protocols. Body fat from different regressions is not comparable.
    """
    if previous.protocol != current.protocol:
        raise ValueError(
            f"Não é possível comparar avaliações de protocolos diferentes "
            f"({previous.protocol.value} → {current.protocol.value})."
        )

    bmi = None
    if previous.bmi is not None and current.bmi is not None:
        bmi = _make_change(previous.bmi.value, current.bmi.value)

    whr = None
    if previous.whr is not None and current.whr is not None:
        whr = _make_change(previous.whr.value, current.whr.value)

    return ProgressComparison(
        weight_kg=_make_change(previous.weight_kg, current.weight_kg),
        body_fat_percent=_make_change(
            previous.composition.body_fat_percent, current.composition.body_fat_percent
        ),
        fat_mass_kg=_make_change(
            previous.composition.fat_mass_kg, current.composition.fat_mass_kg
        ),
        lean_mass_kg=_make_change(
            previous.composition.lean_mass_kg, current.composition.lean_mass_kg
        ),
        bmr_kcal=_make_change(previous.metabolism.bmr_kcal, current.metabolism.bmr_kcal),
        bmi=bmi,
        whr=whr,
    )
