"""POST /v1/eligibility and GET /v1/reference-tables - stateless simulation endpoints"""

from fastapi import APIRouter, Depends, HTTPException

from ptz_gateway.api.v1.schemas import EligibilityRequest, EligibilityResponse
from ptz_gateway.api.dependencies import get_policy
from ptz_gateway.domain.eligibility import calculate
from ptz_gateway.domain.exceptions import InvalidProfileError
from ptz_gateway.domain.tables import PolicyTables

router = APIRouter()


@router.post("/eligibility", response_model=EligibilityResponse)
def simulate_eligibility(
    request_body: EligibilityRequest,
    policy: PolicyTables = Depends(get_policy),
):
    """
    Run the calculator without storing anything.

    Returns:
        Verdict with tranche, quota and capped loan amount when eligible
    """
    try:
        result = calculate(request_body.to_profile(), policy)
    except InvalidProfileError as e:
        raise HTTPException(status_code=422, detail={"field": e.field, "message": str(e)})

    return EligibilityResponse.from_result(result, policy.version)


@router.get("/reference-tables")
def get_reference_tables(policy: PolicyTables = Depends(get_policy)):
    """Income ceilings, tranches, quotas and cost ceilings of the active policy"""
    return policy.as_dict()
