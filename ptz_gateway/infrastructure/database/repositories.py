"""Data access layer for PTZ submissions"""

import logging
import time
from typing import Callable, Iterable, List, Set
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from ptz_gateway.infrastructure.database.models import PTZSubmission
from ptz_gateway.infrastructure.observability.metrics import store_retry_counter, store_failure_counter
from ptz_gateway.domain.exceptions import PersistenceError
from ptz_gateway.domain.merge import identity_key
from ptz_gateway.domain.models import (
    Contact,
    Eligible,
    HouseholdProfile,
    HousingType,
    Ineligible,
    Submission,
    Zone,
)

logger = logging.getLogger(__name__)


def to_row(submission: Submission) -> PTZSubmission:
    """Map a domain submission onto a new ORM row"""
    result = submission.result
    row = PTZSubmission(
        id=identity_key(submission),
        submission_date=submission.submission_date,
        first_name=submission.contact.first_name,
        last_name=submission.contact.last_name,
        email=submission.contact.email,
        phone=submission.contact.phone,
        address=submission.address,
        commune=submission.commune,
        household_size=submission.profile.household_size,
        zone=submission.profile.zone.value,
        income=submission.profile.income,
        housing_type=submission.profile.housing_type.value,
        project_cost=submission.profile.project_cost,
        not_prior_owner=submission.not_prior_owner,
        eligible=result.eligible,
    )
    if isinstance(result, Eligible):
        row.income_bracket = result.income_bracket
        row.quota_percent = result.quota_percent
        row.cost_ceiling = result.cost_ceiling
        row.capped_project_cost = result.capped_project_cost
        row.loan_amount = result.loan_amount
    else:
        row.reason = result.reason
    return row


def to_domain(row: PTZSubmission) -> Submission:
    """Rebuild a domain submission from a stored row"""
    if row.eligible:
        result = Eligible(
            income_bracket=row.income_bracket,
            quota_percent=row.quota_percent,
            cost_ceiling=row.cost_ceiling,
            capped_project_cost=row.capped_project_cost,
            loan_amount=row.loan_amount,
        )
    else:
        result = Ineligible(reason=row.reason or "")

    return Submission(
        id=row.id,
        contact=Contact(
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            phone=row.phone,
        ),
        profile=HouseholdProfile(
            household_size=row.household_size,
            zone=Zone(row.zone),
            income=row.income,
            housing_type=HousingType(row.housing_type),
            project_cost=row.project_cost,
        ),
        result=result,
        submission_date=row.submission_date,
        not_prior_owner=row.not_prior_owner,
        address=row.address,
        commune=row.commune,
    )


class SubmissionRepository:
    """Repository for PTZ submissions"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, submission: Submission) -> PTZSubmission:
        """Insert one submission (single-row insert, safe under concurrent writers)"""
        row = to_row(submission)
        self.db.add(row)
        self.db.flush()
        return row

    def list_all(self) -> List[Submission]:
        """All stored submissions, newest insert first"""
        rows = (
            self.db.query(PTZSubmission)
            .order_by(PTZSubmission.created_at.desc())
            .all()
        )
        return [to_domain(row) for row in rows]

    def replace_all(self, submissions: Iterable[Submission]) -> int:
        """Swap the whole collection within the current transaction"""
        self.db.query(PTZSubmission).delete(synchronize_session=False)
        # Rows loaded earlier in this session would clash with re-inserted ids
        self.db.expunge_all()
        count = 0
        for submission in submissions:
            self.db.add(to_row(submission))
            count += 1
        self.db.flush()
        return count

    def existing_ids(self, ids: Iterable[str]) -> Set[str]:
        """Subset of the given identity keys already stored"""
        ids = list(ids)
        if not ids:
            return set()
        rows = self.db.query(PTZSubmission.id).filter(PTZSubmission.id.in_(ids)).all()
        return {row.id for row in rows}

    def append_missing(self, submissions: Iterable[Submission]) -> int:
        """
        Insert only submissions whose identity key is not stored yet.

        Stored rows are never rewritten, so writes committed by other
        sessions in the meantime are left untouched.
        """
        by_key = {identity_key(submission): submission for submission in submissions}
        stored = self.existing_ids(by_key)
        inserted = 0
        for key, submission in by_key.items():
            if key in stored:
                continue
            self.db.add(to_row(submission))
            inserted += 1
        self.db.flush()
        return inserted

    def count(self) -> int:
        return self.db.query(PTZSubmission).count()

    def delete_by_ids(self, ids: Iterable[str]) -> int:
        """Remove submissions by identity key, returns number of rows deleted"""
        ids = list(ids)
        if not ids:
            return 0
        deleted = (
            self.db.query(PTZSubmission)
            .filter(PTZSubmission.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted


def persist_with_retry(
    repository: SubmissionRepository,
    submission: Submission,
    max_retries: int,
    backoff_base: float,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Append and commit a submission, retrying transient database errors.

    Retry strategy:
    - Exponential backoff: base, 2*base, 4*base, ...
    - The session is rolled back before each new attempt

    Raises:
        PersistenceError: when every attempt failed
    """
    attempt = 0
    while True:
        try:
            repository.append(submission)
            repository.db.commit()
            return
        except SQLAlchemyError as e:
            repository.db.rollback()
            attempt += 1

            if attempt >= max_retries:
                store_failure_counter.inc()
                raise PersistenceError(f"Submission not stored after {attempt} attempts: {e}") from e

            store_retry_counter.inc()
            backoff = backoff_base * (2 ** (attempt - 1))
            logger.warning(
                "Store write failed, retrying",
                extra={"attempt": attempt, "backoff_seconds": backoff, "error": str(e)},
            )
            sleep(backoff)
