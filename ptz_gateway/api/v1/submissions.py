"""/v1/submissions - PTZ submission intake and admin maintenance endpoints"""

import time
import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ptz_gateway.api.v1.schemas import (
    DeleteSubmissionsRequest,
    DeleteSubmissionsResponse,
    ImportSubmissionsRequest,
    ImportSubmissionsResponse,
    ReplaceSubmissionsRequest,
    SubmissionListResponse,
    SubmissionRecord,
    SubmissionRequest,
    SubmissionResponse,
)
from ptz_gateway.api.dependencies import (
    get_mailer,
    get_policy,
    get_request_id,
    get_sheets_client,
    require_admin,
)
from ptz_gateway.config import settings
from ptz_gateway.infrastructure.database.session import get_db
from ptz_gateway.infrastructure.database.repositories import SubmissionRepository, persist_with_retry
from ptz_gateway.infrastructure.clients.email_templates import render_confirmation_email
from ptz_gateway.infrastructure.clients.mailer import Mailer
from ptz_gateway.infrastructure.clients.sheets import SheetsClient
from ptz_gateway.domain.eligibility import calculate
from ptz_gateway.domain.exceptions import InvalidProfileError, NotificationError, PersistenceError
from ptz_gateway.domain.merge import merge_submissions
from ptz_gateway.domain.models import Contact, Eligible, Submission
from ptz_gateway.domain.tables import PolicyTables
from ptz_gateway.infrastructure.observability.metrics import notification_failure_counter, record_submission
from ptz_gateway.infrastructure.observability.logging import log_submission
from ptz_gateway.utils.date_utils import format_submission_date

router = APIRouter()

NOT_STORED_WARNING = (
    "Les résultats ont été calculés mais n'ont pas pu être enregistrés. "
    "Veuillez réessayer ultérieurement."
)
EMAIL_FAILED_WARNING = "L'email de confirmation n'a pas pu être envoyé."


def _invalid_profile(e: InvalidProfileError) -> HTTPException:
    return HTTPException(status_code=422, detail={"field": e.field, "message": str(e)})


@router.post("/submissions", response_model=SubmissionResponse)
def create_submission(
    request_body: SubmissionRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    policy: PolicyTables = Depends(get_policy),
    mailer: Mailer = Depends(get_mailer),
    sheets_client: SheetsClient = Depends(get_sheets_client),
):
    """
    Evaluate and store a completed PTZ simulation.

    Flow:
    1. Validate the household profile and compute eligibility
    2. Persist the submission (retried with backoff)
    3. Send the confirmation email once stored
    4. Schedule the spreadsheet mirror webhook
    5. Return the stored record; storage and email failures become warnings
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        profile = request_body.to_profile()
    except InvalidProfileError as e:
        logging.warning(f"Invalid profile: {e}", extra={"request_id": request_id, "field": e.field})
        raise _invalid_profile(e)

    try:
        # 1. Pure calculation
        result = calculate(profile, policy)
        submission = Submission(
            id=str(uuid.uuid4()),
            contact=Contact(
                first_name=request_body.first_name,
                last_name=request_body.last_name,
                email=request_body.email,
                phone=request_body.phone,
            ),
            profile=profile,
            result=result,
            submission_date=format_submission_date(tz=settings.timezone),
            not_prior_owner=request_body.not_prior_owner,
            address=request_body.address,
            commune=request_body.commune,
        )
        record = SubmissionRecord.from_submission(submission)
        warnings: list[str] = []

        # 2. Persist
        persisted = True
        try:
            persist_with_retry(
                SubmissionRepository(db),
                submission,
                max_retries=settings.store_max_retries,
                backoff_base=settings.store_backoff_base,
            )
        except PersistenceError as e:
            persisted = False
            logging.error(f"Submission not stored: {e}", extra={"request_id": request_id})
            warnings.append(NOT_STORED_WARNING)

        if persisted:
            # 3. Confirmation email
            if mailer.enabled:
                subject, html = render_confirmation_email(submission)
                try:
                    mailer.send(submission.contact.email, subject, html)
                except NotificationError as e:
                    notification_failure_counter.labels(channel="email").inc()
                    logging.warning(f"Confirmation email failed: {e}", extra={"request_id": request_id})
                    warnings.append(EMAIL_FAILED_WARNING)

            # 4. Spreadsheet mirror
            if sheets_client.enabled:
                background_tasks.add_task(
                    sheets_client.send_submission,
                    record.model_dump(mode="json", by_alias=True),
                )

        loan_amount = result.loan_amount if isinstance(result, Eligible) else 0
        duration_ms = (time.time() - start_time) * 1000
        record_submission(result.eligible, loan_amount)
        log_submission(request_id, submission.id, result.eligible, loan_amount, persisted, duration_ms)

        return SubmissionResponse(submission=record, persisted=persisted, warnings=warnings)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id}, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/submissions", response_model=SubmissionListResponse)
def list_submissions(
    db: Session = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    """
    Canonical submission list for the admin dashboard.

    Returns:
        Deduplicated submissions, newest first
    """
    submissions = merge_submissions(SubmissionRepository(db).list_all(), [])
    return SubmissionListResponse(
        submissions=[SubmissionRecord.from_submission(s) for s in submissions],
        count=len(submissions),
    )


@router.put("/submissions", response_model=SubmissionListResponse)
def replace_submissions(
    request_body: ReplaceSubmissionsRequest,
    request: Request,
    db: Session = Depends(get_db),
    policy: PolicyTables = Depends(get_policy),
    _admin: str = Depends(require_admin),
):
    """Bulk replace the stored collection; eligibility is recomputed for every record"""
    request_id = get_request_id(request)

    try:
        incoming = [record.to_submission(policy) for record in request_body.submissions]
    except InvalidProfileError as e:
        raise _invalid_profile(e)

    canonical = merge_submissions(incoming, [])
    try:
        SubmissionRepository(db).replace_all(canonical)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Bulk replace failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Submission store unavailable")

    logging.info("Submissions replaced", extra={"request_id": request_id, "count": len(canonical)})
    stored = merge_submissions(SubmissionRepository(db).list_all(), [])
    return SubmissionListResponse(
        submissions=[SubmissionRecord.from_submission(s) for s in stored],
        count=len(stored),
    )


@router.post("/submissions/delete", response_model=DeleteSubmissionsResponse)
def delete_submissions(
    request_body: DeleteSubmissionsRequest,
    request: Request,
    db: Session = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    """Remove submissions by identity key"""
    request_id = get_request_id(request)

    try:
        deleted = SubmissionRepository(db).delete_by_ids(request_body.ids)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Bulk delete failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Submission store unavailable")

    logging.info("Submissions deleted", extra={"request_id": request_id, "deleted": deleted})
    return DeleteSubmissionsResponse(deleted=deleted)


@router.post("/submissions/import", response_model=ImportSubmissionsResponse)
def import_submissions(
    request_body: ImportSubmissionsRequest,
    request: Request,
    db: Session = Depends(get_db),
    policy: PolicyTables = Depends(get_policy),
    _admin: str = Depends(require_admin),
):
    """
    Reconcile legacy submission files into the store.

    The two legacy collections are merged first (secondary wins). Only records
    whose identity is not stored yet are inserted: stored records always win
    and are never rewritten.
    """
    request_id = get_request_id(request)

    try:
        primary = [record.to_submission(policy) for record in request_body.primary]
        secondary = [record.to_submission(policy) for record in request_body.secondary]
    except InvalidProfileError as e:
        raise _invalid_profile(e)

    repository = SubmissionRepository(db)
    legacy = merge_submissions(primary, secondary)

    try:
        imported = repository.append_missing(legacy)
        db.commit()
        total = repository.count()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Legacy import failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Submission store unavailable")

    logging.info(
        "Legacy submissions imported",
        extra={"request_id": request_id, "imported": imported, "total": total},
    )
    return ImportSubmissionsResponse(imported=imported, total=total)
