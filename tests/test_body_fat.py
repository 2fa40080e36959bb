"""
Tests for the Body Fat Calculation Service
============================================
Pure functions only, no fixtures beyond small builders.

Test matrix:
  1. Siri equation and sanity clamp
  2. Each protocol's regression (male / female coefficients)
  3. Clamp ranges per protocol (lower and upper bound)
  4. Insufficient data: zero skinfold sum → exactly 0
  5. Unknown protocol identifier → 0
  6. A failing formula only affects its own protocol
  7. Unknown sex identifier → 0
"""

import math

import pytest

from anthropometry.schemas import Perimeters, Protocol, Sex, Skinfolds
from anthropometry.services.body_fat import (
    PROTOCOL_REGISTRY,
    calculate_body_fat,
    estimate_body_fat,
    sanity_clamp,
    siri_equation,
)


# ── Helpers ─────────────────────────────────────────────────────

def _siri(density: float) -> float:
    return ((4.95 / density) - 4.50) * 100


def _even_skinfolds(sites, total: float) -> Skinfolds:
    """Spread `total` mm evenly over the given sites."""
    return Skinfolds(**{site: total / len(sites) for site in sites})


SUM_BASED = [p for p, entry in PROTOCOL_REGISTRY.items() if entry.male_sites]


# ── Shared steps ────────────────────────────────────────────────

class TestSharedSteps:

    def test_siri_equation(self):
        assert siri_equation(1.05) == pytest.approx(_siri(1.05))

    def test_siri_rejects_non_positive_density(self):
        assert siri_equation(0) == 0.0
        assert siri_equation(-1.0) == 0.0

    def test_clamp_inside_range_is_unchanged(self):
        assert sanity_clamp(21.5, 2, 60) == 21.5

    def test_clamp_bounds(self):
        assert sanity_clamp(0.5, 2, 60) == 2
        assert sanity_clamp(75.0, 2, 60) == 60

    @pytest.mark.parametrize("value", [0.0, math.nan, math.inf, -math.inf])
    def test_clamp_no_result(self, value):
        """Zero and non-finite values mean 'no result'."""
        assert sanity_clamp(value, 2, 60) == 0.0


# ── Protocol formulas ───────────────────────────────────────────

class TestPollock7:

    def test_female_reference_case(self):
        """Female, 29 years, sum 104 mm → density ≈ 1.05049, BF ≈ 21.2%."""
        sf = Skinfolds(
            chest=10, midaxillary=12, triceps=12, subscapular=14,
            abdominal=18, suprailiac=16, thigh=22,
        )
        estimate = estimate_body_fat(Protocol.POLLOCK7, sf, 29, Sex.FEMALE, 60, 165)

        assert estimate.sum_of_skinfolds_mm == 104
        assert estimate.body_density == pytest.approx(1.050487, abs=1e-6)
        assert estimate.body_fat_percent == pytest.approx(21.21, abs=0.01)

    def test_male_equation(self):
        sf = _even_skinfolds(PROTOCOL_REGISTRY[Protocol.POLLOCK7].male_sites, 70)
        s, age = 70.0, 35
        density = 1.112 - 0.00043499 * s + 0.00000055 * s * s - 0.00028826 * age

        result = calculate_body_fat(Protocol.POLLOCK7, sf, age, Sex.MALE, 80, 180)
        assert result == pytest.approx(_siri(density))


class TestPollock3:

    def test_male_uses_chest_abdominal_thigh(self):
        sf = Skinfolds(chest=10, abdominal=20, thigh=15, triceps=99)
        s, age = 45.0, 30
        density = 1.10938 - 0.0008267 * s + 0.0000016 * s * s - 0.0002574 * age

        result = calculate_body_fat(Protocol.POLLOCK3, sf, age, Sex.MALE, 80, 180)
        assert result == pytest.approx(_siri(density))
        assert result == pytest.approx(13.61, abs=0.01)

    def test_female_uses_triceps_suprailiac_thigh(self):
        sf = Skinfolds(triceps=18, suprailiac=14, thigh=25, chest=99)
        s, age = 57.0, 40
        density = 1.0994921 - 0.0009929 * s + 0.0000023 * s * s - 0.0001392 * age

        estimate = estimate_body_fat(Protocol.POLLOCK3, sf, age, Sex.FEMALE, 62, 160)
        assert estimate.sum_of_skinfolds_mm == 57
        assert estimate.body_fat_percent == pytest.approx(_siri(density))


class TestGuedes:

    @pytest.mark.parametrize(
        "sex, intercept, slope",
        [(Sex.MALE, 1.17136, 0.06706), (Sex.FEMALE, 1.16650, 0.07063)],
    )
    def test_log_equation(self, sex, intercept, slope):
        sf = Skinfolds(triceps=15, suprailiac=20, abdominal=25)
        density = intercept - slope * math.log10(60)

        result = calculate_body_fat(Protocol.GUEDES, sf, 30, sex, 70, 170)
        assert result == pytest.approx(_siri(density))


class TestPetroski:

    def test_male_equation(self):
        sf = Skinfolds(subscapular=10, triceps=12, suprailiac=15, calf=8)
        s, age = 45.0, 30
        density = 1.10726863 - 0.00081201 * s + 0.00000212 * s * s - 0.00041761 * age

        result = calculate_body_fat(Protocol.PETROSKI, sf, age, Sex.MALE, 75, 175)
        assert result == pytest.approx(_siri(density))

    def test_female_equation(self):
        sf = Skinfolds(subscapular=15, triceps=20, suprailiac=18, calf=17)
        s, age = 70.0, 45
        density = 1.05481122 - 0.00082334 * s + 0.000003 * s * s - 0.0001392 * age

        result = calculate_body_fat(Protocol.PETROSKI, sf, age, Sex.FEMALE, 65, 162)
        assert result == pytest.approx(_siri(density))


class TestFaulkner:

    def test_direct_regression(self):
        sf = Skinfolds(triceps=10, subscapular=12, suprailiac=14, abdominal=20)
        estimate = estimate_body_fat(Protocol.FAULKNER, sf, 30, Sex.MALE, 80, 180)

        assert estimate.body_density is None
        assert estimate.body_fat_percent == pytest.approx(56 * 0.153 + 5.783)

    def test_all_sites_zero_returns_exactly_zero(self):
        assert calculate_body_fat(Protocol.FAULKNER, Skinfolds(), 30, Sex.MALE, 80, 180) == 0

    def test_upper_clamp(self):
        sf = Skinfolds(triceps=100, subscapular=100, suprailiac=100, abdominal=100)
        assert calculate_body_fat(Protocol.FAULKNER, sf, 30, Sex.MALE, 80, 180) == 60


class TestWeltman:

    def test_male_equation(self):
        pm = Perimeters(abdomen=100)
        result = calculate_body_fat(Protocol.WELTMAN, Skinfolds(), 40, Sex.MALE, 90, 178, pm)
        assert result == pytest.approx(0.31457 * 100 - 0.10969 * 90 + 10.8336)

    def test_female_equation(self):
        pm = Perimeters(abdomen=90)
        result = calculate_body_fat(Protocol.WELTMAN, Skinfolds(), 40, Sex.FEMALE, 70, 165, pm)
        assert result == pytest.approx(20.6085, abs=1e-4)

    def test_falls_back_to_waist(self):
        with_abdomen = calculate_body_fat(
            Protocol.WELTMAN, Skinfolds(), 40, Sex.MALE, 90, 178, Perimeters(abdomen=100)
        )
        with_waist = calculate_body_fat(
            Protocol.WELTMAN, Skinfolds(), 40, Sex.MALE, 90, 178, Perimeters(waist=100)
        )
        assert with_waist == with_abdomen

    def test_missing_perimeters_returns_zero(self):
        assert calculate_body_fat(Protocol.WELTMAN, Skinfolds(), 40, Sex.MALE, 90, 178) == 0
        assert calculate_body_fat(
            Protocol.WELTMAN, Skinfolds(), 40, Sex.MALE, 90, 178, Perimeters()
        ) == 0

    def test_sex_specific_clamp(self):
        """Lean male hits 5%, female floor is 8%."""
        male = calculate_body_fat(
            Protocol.WELTMAN, Skinfolds(), 30, Sex.MALE, 200, 190, Perimeters(abdomen=40)
        )
        female = calculate_body_fat(
            Protocol.WELTMAN, Skinfolds(), 30, Sex.FEMALE, 40, 200, Perimeters(abdomen=60)
        )
        assert male == 5
        assert female == 8


class TestSlaughter:

    def test_male_above_35_branch(self):
        """Sum 40 > 35 → 0.783 × 40 + 1.6 = 32.92, inside [3, 50]."""
        sf = Skinfolds(triceps=20, subscapular=20)
        result = calculate_body_fat(Protocol.SLAUGHTER, sf, 12, Sex.MALE, 45, 150)
        assert result == pytest.approx(32.92)

    def test_female_quadratic_branch(self):
        sf = Skinfolds(triceps=12, subscapular=10)
        s = 22.0
        result = calculate_body_fat(Protocol.SLAUGHTER, sf, 12, Sex.FEMALE, 40, 148)
        assert result == pytest.approx(1.33 * s - 0.013 * s * s - 2.5)

    def test_clamps(self):
        low = calculate_body_fat(
            Protocol.SLAUGHTER, Skinfolds(triceps=1, subscapular=1), 10, Sex.MALE, 30, 140
        )
        high = calculate_body_fat(
            Protocol.SLAUGHTER, Skinfolds(triceps=50, subscapular=50), 10, Sex.FEMALE, 60, 150
        )
        assert low == 3
        assert high == 50


# ── Cross-protocol properties ───────────────────────────────────

class TestProtocolProperties:

    @pytest.mark.parametrize("protocol", SUM_BASED)
    @pytest.mark.parametrize("sex", list(Sex))
    def test_zero_sum_returns_exactly_zero(self, protocol, sex):
        assert calculate_body_fat(protocol, Skinfolds(), 30, sex, 70, 170) == 0

    @pytest.mark.parametrize("protocol", SUM_BASED)
    @pytest.mark.parametrize("sex", [Sex.MALE, Sex.FEMALE])
    @pytest.mark.parametrize("total", [1, 15, 40, 90, 180, 400])
    def test_result_within_clamp_range(self, protocol, sex, total):
        entry = PROTOCOL_REGISTRY[protocol]
        is_male = sex == Sex.MALE
        sf = _even_skinfolds(entry.sites(is_male), total)
        low, high = entry.clamp(is_male)

        result = calculate_body_fat(protocol, sf, 35, sex, 75, 172)
        assert result == 0 or low <= result <= high

    @pytest.mark.parametrize("protocol", list(Protocol))
    def test_other_sex_uses_female_equations(self, protocol):
        sf = Skinfolds(
            triceps=12, biceps=6, subscapular=14, suprailiac=16, abdominal=18,
            chest=10, thigh=22, midaxillary=12, calf=9,
        )
        pm = Perimeters(abdomen=85, waist=80)
        other = calculate_body_fat(protocol, sf, 30, Sex.OTHER, 68, 168, pm)
        female = calculate_body_fat(protocol, sf, 30, Sex.FEMALE, 68, 168, pm)
        assert other == female

    def test_idempotent(self):
        sf = Skinfolds(chest=10, abdominal=20, thigh=15)
        first = calculate_body_fat(Protocol.POLLOCK3, sf, 30, Sex.MALE, 80, 180)
        second = calculate_body_fat(Protocol.POLLOCK3, sf, 30, Sex.MALE, 80, 180)
        assert first == second

    def test_accepts_identifier_strings(self):
        sf = Skinfolds(triceps=20, subscapular=20)
        assert calculate_body_fat("Slaughter", sf, 12, "M", 45, 150) == pytest.approx(32.92)


class TestUnknownAndFailingProtocols:

    def test_unknown_protocol_returns_zero(self):
        sf = Skinfolds(triceps=20, subscapular=20)
        assert calculate_body_fat("Bioimpedance", sf, 30, Sex.MALE, 80, 180) == 0.0
        assert estimate_body_fat("Bioimpedance", sf, 30, Sex.MALE, 80, 180) is None

    def test_failing_formula_is_isolated(self, monkeypatch):
        """An arithmetic error in one formula yields 0 for that protocol only."""
        def _broken(*args):
            raise ZeroDivisionError("boom")

        entry = PROTOCOL_REGISTRY[Protocol.GUEDES]
        monkeypatch.setitem(PROTOCOL_REGISTRY, Protocol.GUEDES, entry._replace(formula=_broken))

        sf = Skinfolds(triceps=15, suprailiac=20, abdominal=25, subscapular=10)
        assert calculate_body_fat(Protocol.GUEDES, sf, 30, Sex.MALE, 80, 180) == 0.0
        assert calculate_body_fat(Protocol.FAULKNER, sf, 30, Sex.MALE, 80, 180) > 0


class TestUnknownSex:

    @pytest.mark.parametrize("protocol", list(Protocol))
    def test_unknown_sex_returns_zero(self, protocol):
        sf = Skinfolds(**{site: 15 for site in Skinfolds.model_fields})
        pm = Perimeters(abdomen=95, waist=90)
        assert calculate_body_fat(protocol, sf, 30, "X", 80, 180, pm) == 0.0
        estimate = estimate_body_fat(protocol, sf, 30, "X", 80, 180, pm)
        assert estimate.protocol == protocol
        assert estimate.body_fat_percent == 0.0
        assert estimate.body_density is None

    def test_unknown_protocol_wins_over_unknown_sex(self):
        sf = Skinfolds(triceps=20, subscapular=20)
        assert estimate_body_fat("Bioimpedance", sf, 30, "X", 80, 180) is None
