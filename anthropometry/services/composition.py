"""
Body Composition Service
=========================
Splits total body weight into fat mass and lean (fat-free) mass.

  fat_mass  = weight × body_fat% / 100
  lean_mass = weight − fat_mass

Fat mass is re-derived as weight − lean_mass, so fat_mass + lean_mass adds
back up to the weight exactly in floating point. Nothing is rounded here;
rounding is a presentation concern.
"""

import logging

from anthropometry.schemas import BodyCompositionResult

logger = logging.getLogger(__name__)


def compute_composition(body_fat_percent: float, weight: float) -> BodyCompositionResult:
    """
    Derive fat and lean mass from body fat percentage and total weight.

    Args:
        body_fat_percent: Body fat percentage (e.g., 21.5 means 21.5%)
        weight: Total body weight in kilograms

    Returns:
        BodyCompositionResult with fat_mass_kg and lean_mass_kg
    """
    # Re-derive fat from lean: both subtractions are exact, so
    # fat_mass + lean_mass == weight with no rounding residue.
    lean_mass = weight - (weight * body_fat_percent / 100)
    fat_mass = weight - lean_mass

    logger.debug(
        f"Composition: weight={weight}kg, fat={body_fat_percent}% -> "
        f"fat_mass={fat_mass:.3f}kg, lean_mass={lean_mass:.3f}kg"
    )

    return BodyCompositionResult(
        body_fat_percent=body_fat_percent,
        fat_mass_kg=fat_mass,
        lean_mass_kg=lean_mass,
    )
