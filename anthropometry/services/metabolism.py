"""
Metabolic Estimation Service
=============================
Estimates energy requirements from lean body mass.

FORMULA (Katch-McArdle style):
  BMR  = 370 + (21.6 × Lean Mass kg)
  TDEE = BMR × 1.55

The activity factor is fixed at 1.55 ("moderately active"). Alternative
activity levels are deliberately not supported.
"""

import logging

from anthropometry.schemas import MetabolicResult, Sex

logger = logging.getLogger(__name__)

BMR_INTERCEPT_KCAL = 370.0
BMR_KCAL_PER_LEAN_KG = 21.6
MODERATE_ACTIVITY_FACTOR = 1.55


def compute_metabolism(
    weight: float,
    height: float,
    age: int,
    sex: Sex,
    lean_mass_kg: float,
) -> MetabolicResult:
    """
    Calculate basal metabolic rate and total daily energy expenditure.

    Only lean mass drives the estimate; weight, height, age and sex are
    accepted so every caller uses the same signature as the rest of the
    evaluation pipeline.

    Returns:
        MetabolicResult. Both values are 0 when lean_mass_kg <= 0.
    """
    if lean_mass_kg <= 0:
        logger.debug(f"Lean mass {lean_mass_kg}kg is not positive, no metabolic estimate")
        return MetabolicResult(bmr_kcal=0.0, tdee_kcal=0.0)

    bmr = BMR_INTERCEPT_KCAL + (BMR_KCAL_PER_LEAN_KG * lean_mass_kg)
    tdee = bmr * MODERATE_ACTIVITY_FACTOR

    logger.debug(f"Metabolism: lean_mass={lean_mass_kg}kg -> bmr={bmr:.1f}, tdee={tdee:.1f} kcal")

    return MetabolicResult(bmr_kcal=bmr, tdee_kcal=tdee)
