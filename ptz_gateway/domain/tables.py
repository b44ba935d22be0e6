"""PTZ reference tables

Published threshold tables, embedded verbatim. A regulatory update replaces
a snapshot wholesale; nothing here is interpolated or derived.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping

from ptz_gateway.domain.models import HousingType, Zone

MAX_HOUSEHOLD_SIZE = 8
MAX_COST_CEILING_SIZE = 5


def _frozen(table: Dict) -> Mapping:
    return MappingProxyType({key: MappingProxyType(dict(row)) for key, row in table.items()})


@dataclass(frozen=True)
class PolicyTables:
    """One immutable snapshot of the regulatory tables"""

    version: str
    income_ceilings: Mapping[Zone, Mapping[int, int]]  # zone -> household size 1..8
    bracket_thresholds: Mapping[Zone, Mapping[int, int]]  # zone -> bracket 1..4
    quotas: Mapping[HousingType, Mapping[int, int]]  # housing type -> bracket 1..4 (percent)
    cost_ceilings: Mapping[Zone, Mapping[int, int]]  # zone -> household size 1..5

    def as_dict(self) -> dict:
        """Plain JSON-friendly view, keyed by enum values"""
        def plain(table: Mapping) -> dict:
            return {key.value: {str(k): v for k, v in row.items()} for key, row in table.items()}

        return {
            "version": self.version,
            "incomeCeilings": plain(self.income_ceilings),
            "bracketThresholds": plain(self.bracket_thresholds),
            "quotas": plain(self.quotas),
            "costCeilings": plain(self.cost_ceilings),
        }


PTZ_2025 = PolicyTables(
    version="PTZ 2025",
    income_ceilings=_frozen({
        Zone.A: {1: 49000, 2: 73500, 3: 88200, 4: 102900, 5: 117600, 6: 132300, 7: 147000, 8: 161700},
        Zone.B1: {1: 34500, 2: 51750, 3: 62100, 4: 72450, 5: 82800, 6: 93150, 7: 103500, 8: 113850},
        Zone.B2: {1: 31500, 2: 47250, 3: 56700, 4: 66150, 5: 75600, 6: 85050, 7: 94500, 8: 103950},
        Zone.C: {1: 28500, 2: 42750, 3: 51300, 4: 59850, 5: 68400, 6: 76950, 7: 85500, 8: 94050},
    }),
    bracket_thresholds=_frozen({
        Zone.A: {1: 25000, 2: 31000, 3: 37000, 4: 49000},
        Zone.B1: {1: 21500, 2: 26000, 3: 30000, 4: 34500},
        Zone.B2: {1: 18000, 2: 22500, 3: 27000, 4: 31500},
        Zone.C: {1: 15000, 2: 19500, 3: 24000, 4: 28500},
    }),
    quotas=_frozen({
        HousingType.INDIVIDUAL: {1: 30, 2: 20, 3: 20, 4: 10},
        HousingType.COLLECTIVE: {1: 50, 2: 40, 3: 40, 4: 20},
    }),
    cost_ceilings=_frozen({
        Zone.A: {1: 150000, 2: 225000, 3: 270000, 4: 315000, 5: 360000},
        Zone.B1: {1: 135000, 2: 202500, 3: 243000, 4: 283500, 5: 324000},
        Zone.B2: {1: 110000, 2: 165000, 3: 198000, 4: 231000, 5: 264000},
        Zone.C: {1: 100000, 2: 150000, 3: 180000, 4: 210000, 5: 240000},
    }),
)

POLICIES: Mapping[str, PolicyTables] = MappingProxyType({PTZ_2025.version: PTZ_2025})


def get_policy_tables(version: str) -> PolicyTables:
    """Look up a policy snapshot by version label (e.g. "PTZ 2025")"""
    try:
        return POLICIES[version]
    except KeyError:
        raise ValueError(f"Unknown PTZ policy version {version!r}; known: {sorted(POLICIES)}")
