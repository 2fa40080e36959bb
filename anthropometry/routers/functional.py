"""
Functional Assessment Router
=============================
Endpoints for the fitness tests recorded alongside body composition.

Endpoints:
  POST /functional/vo2max      - VO2max from a Cooper or Rockport field test
  POST /functional/somatotype  - Heath-Carter somatotype
"""

import logging

from fastapi import APIRouter

from anthropometry.schemas import (
    Somatotype,
    SomatotypeRequest,
    VO2MaxRequest,
    VO2MaxResult,
)
from anthropometry.services.classification import classify_vo2
from anthropometry.services.functional import calculate_somatotype, estimate_vo2max

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functional", tags=["Functional"])


@router.post("/vo2max", response_model=VO2MaxResult)
async def vo2max_endpoint(request: VO2MaxRequest):
    """
    Estimate VO2max (ml/kg/min) and classify it.

    `test.test_value` is the distance in metres for Cooper and the walk time
    in minutes for Rockport. vo2max is 0 and classification null when the
    test value is too low to estimate.
    """
    test = request.test
    vo2 = estimate_vo2max(
        test.protocol,
        test.test_value,
        request.age,
        request.weight_kg,
        request.sex,
        test.hr_final,
    )
    logger.info(f"VO2max ({test.protocol.value}): test_value={test.test_value} -> {vo2:.1f}")
    return VO2MaxResult(
        protocol=test.protocol,
        vo2max=vo2,
        classification=classify_vo2(vo2, request.sex),
    )


@router.post("/somatotype", response_model=Somatotype | None)
async def somatotype_endpoint(request: SomatotypeRequest):
    """Heath-Carter somatotype. Null when height or weight is missing."""
    return calculate_somatotype(
        request.skinfolds,
        request.perimeters,
        request.height_cm,
        request.weight_kg,
        request.humerus_diameter_cm,
        request.femur_diameter_cm,
    )
