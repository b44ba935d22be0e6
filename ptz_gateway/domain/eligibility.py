"""PTZ eligibility calculator - core business logic for loan simulations"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, TypeVar

from ptz_gateway.domain.exceptions import InvalidProfileError
from ptz_gateway.domain.models import EligibilityResult, Eligible, HouseholdProfile, Ineligible
from ptz_gateway.domain.tables import MAX_COST_CEILING_SIZE, MAX_HOUSEHOLD_SIZE, PTZ_2025, PolicyTables
from ptz_gateway.utils.formatting import format_euros

K = TypeVar("K")

NO_BRACKET_REASON = "Vos revenus ne correspondent à aucune tranche d'éligibilité au PTZ."


def _lookup(table: Mapping[K, Mapping[int, int]], key: K, field: str) -> Mapping[int, int]:
    try:
        return table[key]
    except KeyError:
        raise InvalidProfileError(field, f"No PTZ table entry for {field}={key!r}")


def determine_income_bracket(income: int, thresholds: Mapping[int, int], max_income: int) -> int | None:
    """
    Map income to one of the four tranches of a zone.

    Thresholds are inclusive upper bounds: an income equal to the tranche 1
    threshold stays in tranche 1. Tranche 4 covers everything up to the
    household's income ceiling.

    Returns:
        1..4, or None when income is above the ceiling
    """
    for bracket in (1, 2, 3):
        if income <= thresholds[bracket]:
            return bracket
    if income <= max_income:
        return 4
    return None


def compute_loan_amount(capped_project_cost: int, quota_percent: int) -> int:
    """Quota applied to the capped cost, rounded half up to the euro"""
    amount = Decimal(capped_project_cost) * Decimal(quota_percent) / Decimal(100)
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate(profile: HouseholdProfile, tables: PolicyTables = PTZ_2025) -> EligibilityResult:
    """
    Main entry point: evaluate a household against one policy snapshot.

    Steps:
    1. Clamp household size to the 8-person bracket
    2. Compare income with the zone/size ceiling
    3. Pick the income tranche and its quota for the housing type
    4. Cap the project cost at the zone/size cost ceiling (5+ bracket for larger households)
    5. Apply the quota to the capped cost

    Raises:
        InvalidProfileError: zone or housing type has no table entry
    """
    size = min(profile.household_size, MAX_HOUSEHOLD_SIZE)

    income_ceilings = _lookup(tables.income_ceilings, profile.zone, "zone")
    max_income = income_ceilings[size]

    if profile.income > max_income:
        return Ineligible(
            reason=(
                f"Vos revenus ({format_euros(profile.income)}) dépassent le plafond "
                f"d'éligibilité au PTZ ({format_euros(max_income)}) pour votre zone "
                f"et la taille de votre foyer."
            )
        )

    thresholds = _lookup(tables.bracket_thresholds, profile.zone, "zone")
    quotas = _lookup(tables.quotas, profile.housing_type, "housingType")
    cost_ceilings = _lookup(tables.cost_ceilings, profile.zone, "zone")

    bracket = determine_income_bracket(profile.income, thresholds, max_income)
    if bracket is None:
        return Ineligible(reason=NO_BRACKET_REASON)

    quota_percent = quotas[bracket]
    cost_ceiling = cost_ceilings[min(size, MAX_COST_CEILING_SIZE)]
    capped_project_cost = min(profile.project_cost, cost_ceiling)

    return Eligible(
        income_bracket=bracket,
        quota_percent=quota_percent,
        cost_ceiling=cost_ceiling,
        capped_project_cost=capped_project_cost,
        loan_amount=compute_loan_amount(capped_project_cost, quota_percent),
    )
