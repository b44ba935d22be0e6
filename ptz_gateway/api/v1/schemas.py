"""Pydantic schemas for API request/response validation

Field names are camelCase on the wire so stored records keep the shape of
the legacy submissions.json files.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional

from ptz_gateway.domain.eligibility import calculate
from ptz_gateway.domain.models import (
    MAX_AMOUNT,
    MAX_OCCUPANTS,
    Contact,
    EligibilityResult,
    Eligible,
    HouseholdProfile,
    HousingType,
    Submission,
    Zone,
)
from ptz_gateway.domain.tables import PolicyTables

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileFields(CamelModel):
    """Household inputs of the simulation"""

    household_size: int = Field(
        ..., ge=1, le=MAX_OCCUPANTS, description="Number of occupants, 8+ share the 8-person ceiling"
    )
    zone: Zone
    income: int = Field(..., ge=0, le=MAX_AMOUNT, description="Annual reference income in euros")
    housing_type: HousingType
    project_cost: int = Field(..., ge=0, le=MAX_AMOUNT, description="Total project cost in euros")

    def to_profile(self) -> HouseholdProfile:
        return HouseholdProfile.from_raw(
            household_size=self.household_size,
            zone=self.zone,
            income=self.income,
            housing_type=self.housing_type,
            project_cost=self.project_cost,
        )


class EligibilityRequest(ProfileFields):
    """Request body for POST /v1/eligibility"""


class EligibilityResponse(CamelModel):
    """Response for POST /v1/eligibility"""

    eligible: bool
    tranche: Optional[int] = None
    quotity: Optional[int] = None
    cost_ceiling: Optional[int] = None
    capped_project_cost: Optional[int] = None
    ptz_amount: Optional[int] = None
    reason: Optional[str] = None
    policy_version: str

    @classmethod
    def from_result(cls, result: EligibilityResult, policy_version: str) -> "EligibilityResponse":
        if isinstance(result, Eligible):
            return cls(
                eligible=True,
                tranche=result.income_bracket,
                quotity=result.quota_percent,
                cost_ceiling=result.cost_ceiling,
                capped_project_cost=result.capped_project_cost,
                ptz_amount=result.loan_amount,
                policy_version=policy_version,
            )
        return cls(eligible=False, reason=result.reason, policy_version=policy_version)


class SubmissionRequest(ProfileFields):
    """Request body for POST /v1/submissions"""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    phone: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = Field(None, max_length=300)
    commune: Optional[str] = Field(None, max_length=150)
    not_prior_owner: Optional[bool] = None


class SubmissionRecordIn(ProfileFields):
    """Stored or legacy record accepted by bulk replace and import; derived fields are ignored"""

    id: Optional[str] = Field(None, max_length=36)
    submission_date: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    commune: Optional[str] = None
    not_prior_owner: Optional[bool] = None

    def to_submission(self, policy: PolicyTables) -> Submission:
        """Rebuild a submission, recomputing its eligibility with the active tables"""
        profile = self.to_profile()
        return Submission(
            id=self.id,
            contact=Contact(
                first_name=self.first_name,
                last_name=self.last_name,
                email=self.email,
                phone=self.phone,
            ),
            profile=profile,
            result=calculate(profile, policy),
            submission_date=self.submission_date,
            not_prior_owner=self.not_prior_owner,
            address=self.address,
            commune=self.commune,
        )


class SubmissionRecord(CamelModel):
    """Persisted record shape"""

    id: Optional[str] = None
    submission_date: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    commune: Optional[str] = None
    household_size: int
    zone: Zone
    income: int
    housing_type: HousingType
    project_cost: int
    not_prior_owner: Optional[bool] = None
    eligible: bool
    tranche: Optional[int] = None
    quotity: Optional[int] = None
    cost_ceiling: Optional[int] = None
    capped_project_cost: Optional[int] = None
    ptz_amount: Optional[int] = None
    reason: Optional[str] = None

    @classmethod
    def from_submission(cls, submission: Submission) -> "SubmissionRecord":
        result = submission.result
        if isinstance(result, Eligible):
            derived = {
                "tranche": result.income_bracket,
                "quotity": result.quota_percent,
                "cost_ceiling": result.cost_ceiling,
                "capped_project_cost": result.capped_project_cost,
                "ptz_amount": result.loan_amount,
            }
        else:
            derived = {"reason": result.reason}

        return cls(
            id=submission.id,
            submission_date=submission.submission_date,
            first_name=submission.contact.first_name,
            last_name=submission.contact.last_name,
            email=submission.contact.email,
            phone=submission.contact.phone,
            address=submission.address,
            commune=submission.commune,
            household_size=submission.profile.household_size,
            zone=submission.profile.zone,
            income=submission.profile.income,
            housing_type=submission.profile.housing_type,
            project_cost=submission.profile.project_cost,
            not_prior_owner=submission.not_prior_owner,
            eligible=result.eligible,
            **derived,
        )


class SubmissionResponse(BaseModel):
    """Response for POST /v1/submissions"""

    submission: SubmissionRecord
    persisted: bool
    warnings: List[str] = Field(default_factory=list)


class SubmissionListResponse(BaseModel):
    """Response for GET /v1/submissions"""

    submissions: List[SubmissionRecord]
    count: int


class ReplaceSubmissionsRequest(BaseModel):
    """Request body for PUT /v1/submissions"""

    submissions: List[SubmissionRecordIn]


class DeleteSubmissionsRequest(BaseModel):
    """Request body for POST /v1/submissions/delete"""

    ids: List[str] = Field(..., min_length=1)


class DeleteSubmissionsResponse(BaseModel):
    deleted: int


class ImportSubmissionsRequest(BaseModel):
    """Two legacy record collections; secondary wins over primary on identity clashes"""

    primary: List[SubmissionRecordIn] = Field(default_factory=list)
    secondary: List[SubmissionRecordIn] = Field(default_factory=list)


class ImportSubmissionsResponse(BaseModel):
    imported: int
    total: int
