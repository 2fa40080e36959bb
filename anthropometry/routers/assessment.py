"""
Assessment Router
==================
Endpoints for the anthropometric assessment engine. The evaluation wizard
calls these on every keystroke for its live preview, so all of them are
stateless and side-effect free.

Endpoints:
  GET  /assessment/protocols    - List protocols, required sites and clamp ranges
  POST /assessment/body-fat     - Body fat % with sum of skinfolds and density
  POST /assessment/composition  - Fat mass / lean mass from body fat % and weight
  POST /assessment/metabolism   - BMR / TDEE from lean mass
  POST /assessment/classify     - BMI, body fat and waist-hip classifications
  POST /assessment/evaluate     - Full evaluation report
  POST /assessment/compare      - Progress between two evaluation reports
"""

import logging

from fastapi import APIRouter, HTTPException

from anthropometry.schemas import (
    AnthropometricInput,
    BodyCompositionResult,
    BodyFatEstimate,
    ClassifyRequest,
    ClassifyResponse,
    CompareRequest,
    CompositionRequest,
    EvaluationReport,
    EvaluationRequest,
    MetabolicResult,
    MetabolismRequest,
    ProgressComparison,
    Protocol,
    ProtocolInfo,
)
from anthropometry.services.body_fat import PROTOCOL_REGISTRY, estimate_body_fat
from anthropometry.services.classification import (
    classify_bmi,
    classify_body_fat,
    classify_whr,
)
from anthropometry.services.composition import compute_composition
from anthropometry.services.evaluation import compare_evaluations, evaluate
from anthropometry.services.metabolism import compute_metabolism

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assessment", tags=["Assessment"])


@router.get("/protocols", response_model=list[ProtocolInfo])
async def list_protocols():
    """
    List the seven body fat protocols.

    The wizard uses `required_sites_*` to decide which skinfold inputs to show.
    Weltman needs no skinfolds: it uses the abdominal (or waist) perimeter,
    weight and height instead.
    """
    return [
        ProtocolInfo(
            protocol=protocol,
            kind=entry.kind,
            required_sites_male=list(entry.male_sites),
            required_sites_female=list(entry.female_sites),
            clamp_male=entry.male_clamp,
            clamp_female=entry.female_clamp,
        )
        for protocol, entry in PROTOCOL_REGISTRY.items()
    ]


@router.post("/body-fat", response_model=BodyFatEstimate)
async def body_fat_endpoint(
    measurements: AnthropometricInput,
    protocol: Protocol,
):
    """
    Estimate body fat % with the selected protocol (query parameter).

    Returns 0 as body_fat_percent while the required skinfolds are still
    empty. Unknown protocol names are rejected with 422 by validation.
    """
    return estimate_body_fat(
        protocol,
        measurements.skinfolds,
        measurements.age,
        measurements.sex,
        measurements.weight_kg,
        measurements.height_cm,
        measurements.perimeters,
    )


@router.post("/composition", response_model=BodyCompositionResult)
async def composition_endpoint(request: CompositionRequest):
    """Split total weight into fat mass and lean mass."""
    return compute_composition(request.body_fat_percent, request.weight_kg)


@router.post("/metabolism", response_model=MetabolicResult)
async def metabolism_endpoint(request: MetabolismRequest):
    """
    Basal metabolic rate (370 + 21.6 × lean mass) and TDEE (BMR × 1.55).
    Both are 0 when lean mass is not positive.
    """
    return compute_metabolism(
        request.weight_kg,
        request.height_cm,
        request.age,
        request.sex,
        request.lean_mass_kg,
    )


@router.post("/classify", response_model=ClassifyResponse)
async def classify_endpoint(request: ClassifyRequest):
    """
    Run the three independent classifications.

    A field comes back null when its inputs are missing: no height for BMI,
    no body fat for the body fat table, no waist or hips for WHR.
    """
    return ClassifyResponse(
        bmi=classify_bmi(request.weight_kg, request.height_cm),
        body_fat=classify_body_fat(request.body_fat_percent, request.sex),
        whr=classify_whr(request.waist_cm, request.hips_cm, request.sex),
    )


@router.post("/evaluate", response_model=EvaluationReport)
async def evaluate_endpoint(request: EvaluationRequest):
    """
    Produce the full evaluation report: body fat breakdown, composition,
    metabolism, classifications, somatotype and (optionally) VO2max.
    """
    return evaluate(request)


@router.post("/compare", response_model=ProgressComparison)
async def compare_endpoint(request: CompareRequest):
    """
    Compare two evaluation reports of the same client (oldest first).

    Returns 400 if the reports were produced with different protocols.
    """
    try:
        return compare_evaluations(request.previous, request.current)
    except ValueError as e:
        logger.info(f"Rejected evaluation comparison: {e}")
        raise HTTPException(status_code=400, detail=str(e))
