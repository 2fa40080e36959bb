"""
Pydantic V2 Schemas (Value Types)
===================================
These schemas define the shape of data that flows in and out of the
assessment engine, both for direct Python calls and for the HTTP API.

Naming Convention:
  - *Input   : Raw measurements supplied by the caller
  - *Result  : Values computed by the engine
  - *Request : HTTP request bodies that bundle several inputs

Every model is frozen: results are constructed fresh per evaluation and are
never mutated in place. All units are metric (kg, cm, mm).
"""

from enum import Enum

from pydantic import BaseModel, Field, computed_field


# ============================================================
# ENUMERATIONS
# ============================================================

class Sex(str, Enum):
    """Biological sex as recorded on the client file."""
    MALE = "M"
    FEMALE = "F"
    OTHER = "O"


class Protocol(str, Enum):
    """The seven supported body-fat estimation protocols."""
    POLLOCK3 = "Pollock3"
    POLLOCK7 = "Pollock7"
    GUEDES = "Guedes"
    PETROSKI = "Petroski"
    FAULKNER = "Faulkner"
    WELTMAN = "Weltman"
    SLAUGHTER = "Slaughter"


class Severity(str, Enum):
    """Risk tier of a classification. Each tier maps to a display colour."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def color(self) -> str:
        return _SEVERITY_COLORS[self]


_SEVERITY_COLORS = {
    Severity.LOW: "green",
    Severity.MODERATE: "amber",
    Severity.HIGH: "red",
}


class VO2Protocol(str, Enum):
    """Field tests used to estimate VO2max."""
    COOPER = "Cooper"        # 12-minute run, distance in metres
    ROCKPORT = "Rockport"    # 1-mile walk, time in minutes


# ============================================================
# RAW MEASUREMENT SCHEMAS
# ============================================================

class Skinfolds(BaseModel):
    """
    Caliper skinfold thickness per site, in millimetres.
    Sites that were not measured are left at 0.
    """
    triceps: float = Field(default=0.0, ge=0, description="Triceps skinfold (mm)")
    biceps: float = Field(default=0.0, ge=0, description="Biceps skinfold (mm)")
    subscapular: float = Field(default=0.0, ge=0, description="Subscapular skinfold (mm)")
    suprailiac: float = Field(default=0.0, ge=0, description="Suprailiac skinfold (mm)")
    abdominal: float = Field(default=0.0, ge=0, description="Abdominal skinfold (mm)")
    chest: float = Field(default=0.0, ge=0, description="Chest skinfold (mm)")
    thigh: float = Field(default=0.0, ge=0, description="Thigh skinfold (mm)")
    midaxillary: float = Field(default=0.0, ge=0, description="Mid-axillary skinfold (mm)")
    calf: float = Field(default=0.0, ge=0, description="Medial calf skinfold (mm)")

    model_config = {"frozen": True}


class Perimeters(BaseModel):
    """
    Body circumferences in centimetres.
    Circumferences that were not measured are left at 0.
    """
    waist: float = Field(default=0.0, ge=0, description="Waist circumference (cm)")
    hips: float = Field(default=0.0, ge=0, description="Hip circumference (cm)")
    abdomen: float = Field(default=0.0, ge=0, description="Abdominal circumference (cm)")
    chest: float = Field(default=0.0, ge=0, description="Chest circumference (cm)")
    arm: float = Field(default=0.0, ge=0, description="Relaxed arm circumference (cm)")
    arm_flexed: float = Field(default=0.0, ge=0, description="Flexed arm circumference (cm)")
    forearm: float = Field(default=0.0, ge=0, description="Forearm circumference (cm)")
    neck: float = Field(default=0.0, ge=0, description="Neck circumference (cm)")
    shoulders: float = Field(default=0.0, ge=0, description="Shoulder circumference (cm)")
    thigh: float = Field(default=0.0, ge=0, description="Mid-thigh circumference (cm)")
    thigh_proximal: float = Field(default=0.0, ge=0, description="Proximal thigh circumference (cm)")
    calf: float = Field(default=0.0, ge=0, description="Calf circumference (cm)")

    model_config = {"frozen": True}


class AnthropometricInput(BaseModel):
    """Everything measured during a single evaluation."""
    skinfolds: Skinfolds = Field(default_factory=Skinfolds)
    perimeters: Perimeters = Field(default_factory=Perimeters)
    weight_kg: float = Field(..., ge=0, description="Body weight in kilograms")
    height_cm: float = Field(..., ge=0, description="Height in centimetres")
    age: int = Field(..., ge=0, description="Age in completed years")
    sex: Sex

    model_config = {"frozen": True}


class VO2TestInput(BaseModel):
    """
    Result of a cardiorespiratory field test.

    test_value is the distance covered in metres for Cooper and the
    walk time in minutes for Rockport.
    """
    protocol: VO2Protocol = VO2Protocol.COOPER
    test_value: float = Field(..., ge=0, description="Distance (m) or time (min)")
    hr_final: float | None = Field(
        default=None, gt=0, description="Heart rate at the end of the test (Rockport)"
    )

    model_config = {"frozen": True}


# ============================================================
# ENGINE RESULT SCHEMAS
# ============================================================

class BodyFatEstimate(BaseModel):
    """
    Body-fat estimate with the intermediate values that produced it.
    body_density is None for protocols that regress body fat directly.
    """
    protocol: Protocol
    sum_of_skinfolds_mm: float
    body_density: float | None = None
    body_fat_percent: float

    model_config = {"frozen": True}


class BodyCompositionResult(BaseModel):
    """Split of total weight into fat and lean mass."""
    body_fat_percent: float
    fat_mass_kg: float
    lean_mass_kg: float

    model_config = {"frozen": True}


class MetabolicResult(BaseModel):
    """Basal metabolic rate and total daily energy expenditure, kcal/day."""
    bmr_kcal: float
    tdee_kcal: float

    model_config = {"frozen": True}


class ClassificationResult(BaseModel):
    """
    A labelled band lookup.
    `value` is the number that was classified (BMI, BF% or WHR ratio).
    """
    value: float
    status: str
    severity: Severity

    model_config = {"frozen": True}

    @computed_field
    @property
    def color(self) -> str:
        return self.severity.color


class VO2MaxResult(BaseModel):
    """Estimated VO2max (ml/kg/min) and its classification, if any."""
    protocol: VO2Protocol
    vo2max: float
    classification: ClassificationResult | None = None

    model_config = {"frozen": True}


class Somatotype(BaseModel):
    """Heath-Carter somatotype components, reported to 0.1."""
    endomorphy: float
    mesomorphy: float
    ectomorphy: float
    classification: str

    model_config = {"frozen": True}


# ============================================================
# EVALUATION SCHEMAS
# ============================================================

class EvaluationRequest(BaseModel):
    """A complete evaluation: measurements, protocol and optional VO2 test."""
    protocol: Protocol
    measurements: AnthropometricInput
    vo2_test: VO2TestInput | None = None
    humerus_diameter_cm: float = Field(
        default=5.5, gt=0, description="Biepicondylar humerus breadth (cm)"
    )
    femur_diameter_cm: float = Field(
        default=7.5, gt=0, description="Biepicondylar femur breadth (cm)"
    )

    model_config = {"frozen": True}


class EvaluationReport(BaseModel):
    """
    Every number the engine derives from one evaluation.
    This is what the capture workflow persists into the client record.
    """
    protocol: Protocol
    sex: Sex
    weight_kg: float
    height_cm: float
    body_fat: BodyFatEstimate
    composition: BodyCompositionResult
    metabolism: MetabolicResult
    bmi: ClassificationResult | None = None
    body_fat_classification: ClassificationResult | None = None
    whr: ClassificationResult | None = None
    somatotype: Somatotype | None = None
    vo2max: VO2MaxResult | None = None

    model_config = {"frozen": True}


class MetricChange(BaseModel):
    """
    Change of one metric between two evaluations.
    Positive difference = the metric went up.
    """
    previous: float
    current: float
    difference: float  # current - previous
    percentage: float  # (difference / previous) * 100, 0 when previous is 0


class ProgressComparison(BaseModel):
    """Metric-by-metric progress between a previous and a current evaluation."""
    weight_kg: MetricChange
    body_fat_percent: MetricChange
    fat_mass_kg: MetricChange
    lean_mass_kg: MetricChange
    bmr_kcal: MetricChange
    bmi: MetricChange | None = None
    whr: MetricChange | None = None


class CompareRequest(BaseModel):
    """Two evaluation reports to compare, oldest first."""
    previous: EvaluationReport
    current: EvaluationReport


# ============================================================
# HTTP-ONLY REQUEST SCHEMAS
# ============================================================

class CompositionRequest(BaseModel):
    """Split a weight into fat and lean mass."""
    body_fat_percent: float = Field(..., ge=0, le=100)
    weight_kg: float = Field(..., ge=0)


class MetabolismRequest(BaseModel):
    """Inputs for BMR / TDEE. Only lean mass drives the estimate."""
    weight_kg: float = Field(default=0.0, ge=0)
    height_cm: float = Field(default=0.0, ge=0)
    age: int = Field(default=0, ge=0)
    sex: Sex = Sex.OTHER
    lean_mass_kg: float = Field(..., description="Lean body mass in kilograms")


class ClassifyRequest(BaseModel):
    """Raw values for the three independent classification lookups."""
    weight_kg: float = Field(..., ge=0)
    height_cm: float = Field(..., ge=0)
    sex: Sex
    body_fat_percent: float = Field(default=0.0, ge=0, le=100)
    waist_cm: float | None = Field(default=None, ge=0)
    hips_cm: float | None = Field(default=None, ge=0)


class ClassifyResponse(BaseModel):
    """Classification results; a field is null when its inputs were missing."""
    bmi: ClassificationResult | None = None
    body_fat: ClassificationResult | None = None
    whr: ClassificationResult | None = None


class VO2MaxRequest(BaseModel):
    """VO2max estimate request."""
    test: VO2TestInput
    age: int = Field(..., ge=0)
    weight_kg: float = Field(..., ge=0)
    sex: Sex


class SomatotypeRequest(BaseModel):
    """Heath-Carter somatotype request."""
    skinfolds: Skinfolds = Field(default_factory=Skinfolds)
    perimeters: Perimeters = Field(default_factory=Perimeters)
    height_cm: float = Field(..., ge=0)
    weight_kg: float = Field(..., ge=0)
    humerus_diameter_cm: float = Field(default=5.5, gt=0)
    femur_diameter_cm: float = Field(default=7.5, gt=0)


class ProtocolInfo(BaseModel):
    """Description of a protocol for the evaluation wizard."""
    protocol: Protocol
    kind: str  # "density" or "direct"
    required_sites_male: list[str]
    required_sites_female: list[str]
    clamp_male: tuple[float, float]
    clamp_female: tuple[float, float]
