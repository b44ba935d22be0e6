"""Unit tests for the PTZ eligibility calculator"""

import dataclasses
import pytest
from ptz_gateway.domain.eligibility import calculate, compute_loan_amount, determine_income_bracket
from ptz_gateway.domain.exceptions import InvalidProfileError
from ptz_gateway.domain.models import Eligible, HouseholdProfile, HousingType, Ineligible, Zone
from ptz_gateway.domain.tables import PTZ_2025


def _profile(
    household_size: int = 2,
    zone: Zone = Zone.A,
    income: int = 70000,
    housing_type: HousingType = HousingType.INDIVIDUAL,
    project_cost: int = 300000,
) -> HouseholdProfile:
    return HouseholdProfile(
        household_size=household_size,
        zone=zone,
        income=income,
        housing_type=housing_type,
        project_cost=project_cost,
    )


def test_calculate_zone_a_couple_tranche_4():
    """Test a zone A couple just under the ceiling lands in tranche 4"""
    result = calculate(_profile())

    assert result == Eligible(
        income_bracket=4,
        quota_percent=10,
        cost_ceiling=225000,
        capped_project_cost=225000,
        loan_amount=22500,
    )
    assert result.eligible is True


def test_calculate_income_above_ceiling():
    """Test income over the household ceiling is a business outcome, not an error"""
    result = calculate(_profile(household_size=1, zone=Zone.C, income=30000))

    assert isinstance(result, Ineligible)
    assert result.eligible is False
    assert "30 000 €" in result.reason
    assert "28 500 €" in result.reason


def test_calculate_income_equal_to_ceiling_is_eligible():
    """Test the income ceiling is inclusive"""
    result = calculate(_profile(household_size=1, zone=Zone.C, income=28500, project_cost=50000))

    assert isinstance(result, Eligible)
    assert result.income_bracket == 4


def test_calculate_bracket_threshold_inclusive():
    """Test an income equal to the tranche 1 threshold stays in tranche 1"""
    at_threshold = calculate(_profile(household_size=1, income=25000, project_cost=100000))
    above_threshold = calculate(_profile(household_size=1, income=25001, project_cost=100000))

    assert at_threshold.income_bracket == 1
    assert at_threshold.quota_percent == 30
    assert above_threshold.income_bracket == 2
    assert above_threshold.quota_percent == 20


def test_calculate_collective_quotas():
    """Test collective housing uses the higher quota row"""
    result = calculate(
        _profile(household_size=1, income=20000, housing_type=HousingType.COLLECTIVE, project_cost=100000)
    )

    assert result.income_bracket == 1
    assert result.quota_percent == 50
    assert result.cost_ceiling == 150000
    assert result.capped_project_cost == 100000
    assert result.loan_amount == 50000


def test_calculate_project_cost_below_ceiling_not_capped():
    result = calculate(_profile(project_cost=180000))

    assert result.capped_project_cost == 180000
    assert result.loan_amount == 18000


def test_calculate_household_size_clamped_to_eight():
    """Test households larger than 8 share the 8-person income ceiling"""
    at_ceiling = calculate(_profile(household_size=12, zone=Zone.B1, income=113850))
    over_ceiling = calculate(_profile(household_size=12, zone=Zone.B1, income=113851))

    assert isinstance(at_ceiling, Eligible)
    assert isinstance(over_ceiling, Ineligible)
    assert calculate(_profile(household_size=12)) == calculate(_profile(household_size=8))


def test_calculate_cost_ceiling_flat_above_five():
    """Test households of 6 or more use the 5+ cost ceiling"""
    five = calculate(_profile(household_size=5, project_cost=500000))
    seven = calculate(_profile(household_size=7, project_cost=500000))

    assert five.cost_ceiling == 360000
    assert seven.cost_ceiling == 360000
    assert seven.capped_project_cost == 360000


def test_calculate_is_deterministic():
    profile = _profile(zone=Zone.B2, household_size=3, income=40000)
    assert calculate(profile) == calculate(profile)


def test_calculate_uses_injected_tables():
    """Test a different policy snapshot changes the outcome without touching the default"""
    tables = dataclasses.replace(
        PTZ_2025,
        version="test",
        quotas={HousingType.INDIVIDUAL: {1: 40, 2: 40, 3: 40, 4: 40}},
    )

    assert calculate(_profile(), tables).loan_amount == 90000
    assert calculate(_profile()).loan_amount == 22500


def test_calculate_invariants_hold_across_tables():
    """Test capped cost never exceeds the ceiling and the loan follows the quota"""
    for zone in Zone:
        for housing_type in HousingType:
            for size in range(1, 11):
                for income in range(0, 170001, 2500):
                    for project_cost in (0, 99999, 175000, 400000):
                        result = calculate(_profile(size, zone, income, housing_type, project_cost))
                        if isinstance(result, Ineligible):
                            assert income > PTZ_2025.income_ceilings[zone][min(size, 8)]
                            continue
                        assert 1 <= result.income_bracket <= 4
                        assert result.capped_project_cost <= result.cost_ceiling
                        assert result.capped_project_cost <= project_cost
                        expected = (result.capped_project_cost * result.quota_percent + 50) // 100
                        assert result.loan_amount == expected


def test_calculate_unknown_zone_raises():
    """Test a profile built around validation fails loudly on table lookup"""
    with pytest.raises(InvalidProfileError) as exc_info:
        calculate(_profile(zone="D"))

    assert exc_info.value.field == "zone"


def test_determine_income_bracket():
    thresholds = PTZ_2025.bracket_thresholds[Zone.A]

    assert determine_income_bracket(0, thresholds, 49000) == 1
    assert determine_income_bracket(31000, thresholds, 49000) == 2
    assert determine_income_bracket(37000, thresholds, 49000) == 3
    assert determine_income_bracket(37001, thresholds, 49000) == 4
    assert determine_income_bracket(73500, thresholds, 73500) == 4
    assert determine_income_bracket(73501, thresholds, 73500) is None


def test_compute_loan_amount_rounds_half_up():
    assert compute_loan_amount(225000, 10) == 22500
    assert compute_loan_amount(5, 10) == 1
    assert compute_loan_amount(225004, 10) == 22500
    assert compute_loan_amount(225005, 10) == 22501
    assert compute_loan_amount(0, 50) == 0


def test_profile_from_raw_parses_form_strings():
    profile = HouseholdProfile.from_raw(
        household_size="2",
        zone="B1",
        income=" 45000 ",
        housing_type="collective",
        project_cost="200000",
    )

    assert profile == HouseholdProfile(2, Zone.B1, 45000, HousingType.COLLECTIVE, 200000)


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"zone": "D"}, "zone"),
        ({"housing_type": "villa"}, "housingType"),
        ({"income": "abc"}, "income"),
        ({"income": -1}, "income"),
        ({"project_cost": None}, "projectCost"),
        ({"household_size": 0}, "householdSize"),
        ({"household_size": True}, "householdSize"),
        ({"household_size": 100}, "householdSize"),
        ({"income": 10**20}, "income"),
        ({"project_cost": "1000000001"}, "projectCost"),
    ],
)
def test_profile_from_raw_rejects_malformed_fields(overrides, field):
    raw = {
        "household_size": 2,
        "zone": "A",
        "income": 70000,
        "housing_type": "individual",
        "project_cost": 300000,
    }
    raw.update(overrides)

    with pytest.raises(InvalidProfileError) as exc_info:
        HouseholdProfile.from_raw(**raw)

    assert exc_info.value.field == field
