"""Unit tests for the embedded PTZ reference tables"""

import pytest
from ptz_gateway.domain.models import HousingType, Zone
from ptz_gateway.domain.tables import PTZ_2025, get_policy_tables


def test_income_ceilings_cover_every_zone_and_size():
    for zone in Zone:
        assert sorted(PTZ_2025.income_ceilings[zone]) == list(range(1, 9))


def test_income_ceilings_increase_with_household_size():
    for zone in Zone:
        row = PTZ_2025.income_ceilings[zone]
        assert all(row[size] < row[size + 1] for size in range(1, 8))


def test_cost_ceilings_increase_with_household_size():
    for zone in Zone:
        row = PTZ_2025.cost_ceilings[zone]
        assert sorted(row) == [1, 2, 3, 4, 5]
        assert all(row[size] < row[size + 1] for size in range(1, 5))


def test_bracket_thresholds_ascending_and_capped_by_single_ceiling():
    """Test tranche 4 threshold equals the one-person income ceiling"""
    for zone in Zone:
        row = PTZ_2025.bracket_thresholds[zone]
        assert row[1] < row[2] < row[3] < row[4]
        assert row[4] == PTZ_2025.income_ceilings[zone][1]


def test_published_values():
    assert PTZ_2025.income_ceilings[Zone.A][2] == 73500
    assert PTZ_2025.income_ceilings[Zone.B1][8] == 113850
    assert PTZ_2025.income_ceilings[Zone.C][1] == 28500
    assert PTZ_2025.bracket_thresholds[Zone.B2] == {1: 18000, 2: 22500, 3: 27000, 4: 31500}
    assert PTZ_2025.quotas[HousingType.INDIVIDUAL] == {1: 30, 2: 20, 3: 20, 4: 10}
    assert PTZ_2025.quotas[HousingType.COLLECTIVE] == {1: 50, 2: 40, 3: 40, 4: 20}
    assert PTZ_2025.cost_ceilings[Zone.A][2] == 225000
    assert PTZ_2025.cost_ceilings[Zone.C][5] == 240000


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        PTZ_2025.income_ceilings[Zone.A][1] = 1
    with pytest.raises(TypeError):
        PTZ_2025.quotas[HousingType.INDIVIDUAL] = {}


def test_get_policy_tables():
    assert get_policy_tables("PTZ 2025") is PTZ_2025

    with pytest.raises(ValueError):
        get_policy_tables("PTZ 1995")


def test_as_dict_is_json_friendly():
    data = PTZ_2025.as_dict()

    assert data["version"] == "PTZ 2025"
    assert data["incomeCeilings"]["A"]["2"] == 73500
    assert data["quotas"]["collective"]["1"] == 50
    assert data["costCeilings"]["B2"]["5"] == 264000
    assert set(data["bracketThresholds"]) == {"A", "B1", "B2", "C"}
