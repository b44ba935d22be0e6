"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from ptz_gateway.domain.exceptions import InvalidProfileError


class Zone(str, Enum):
    """Geographic tier reflecting local housing market tension"""

    A = "A"
    B1 = "B1"
    B2 = "B2"
    C = "C"


class HousingType(str, Enum):
    INDIVIDUAL = "individual"
    COLLECTIVE = "collective"


# Upper bounds for form input; both fit a 64-bit integer column
MAX_AMOUNT = 1_000_000_000
MAX_OCCUPANTS = 99


def _parse_amount(field: str, value: Any, maximum: int = MAX_AMOUNT) -> int:
    if isinstance(value, bool):
        raise InvalidProfileError(field, f"{field} must be a number")
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise InvalidProfileError(field, f"{field} must be a whole number, got {value!r}")
    if amount < 0:
        raise InvalidProfileError(field, f"{field} must not be negative")
    if amount > maximum:
        raise InvalidProfileError(field, f"{field} must not exceed {maximum}")
    return amount


@dataclass(frozen=True)
class HouseholdProfile:
    """Input to the eligibility calculation"""

    household_size: int
    zone: Zone
    income: int
    housing_type: HousingType
    project_cost: int

    @classmethod
    def from_raw(
        cls,
        household_size: Any,
        zone: Any,
        income: Any,
        housing_type: Any,
        project_cost: Any,
    ) -> "HouseholdProfile":
        """
        Build a profile from loosely-typed values (form strings, legacy records).

        Raises:
            InvalidProfileError: naming the first missing or malformed field
        """
        size = _parse_amount("householdSize", household_size, MAX_OCCUPANTS)
        if size < 1:
            raise InvalidProfileError("householdSize", "householdSize must be at least 1")

        try:
            zone_value = Zone(zone)
        except ValueError:
            raise InvalidProfileError("zone", f"Unknown zone {zone!r}")

        try:
            housing_value = HousingType(housing_type)
        except ValueError:
            raise InvalidProfileError("housingType", f"Unknown housing type {housing_type!r}")

        return cls(
            household_size=size,
            zone=zone_value,
            income=_parse_amount("income", income),
            housing_type=housing_value,
            project_cost=_parse_amount("projectCost", project_cost),
        )


@dataclass(frozen=True)
class Eligible:
    """Positive outcome with derived loan figures"""

    income_bracket: int
    quota_percent: int
    cost_ceiling: int
    capped_project_cost: int
    loan_amount: int

    eligible = True


@dataclass(frozen=True)
class Ineligible:
    """Business outcome, not an error"""

    reason: str

    eligible = False


EligibilityResult = Union[Eligible, Ineligible]


@dataclass(frozen=True)
class Contact:
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class Submission:
    """A completed simulation as stored for the admin dashboard"""

    id: Optional[str]
    contact: Contact
    profile: HouseholdProfile
    result: EligibilityResult
    submission_date: Optional[str] = None  # DD/MM/YYYY HH:MM:SS, local time
    not_prior_owner: Optional[bool] = None
    address: Optional[str] = None
    commune: Optional[str] = None
