"""GET /v1/submissions/export - CSV download of the canonical submission list"""

import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ptz_gateway.api.dependencies import get_request_id, require_admin
from ptz_gateway.config import settings
from ptz_gateway.domain.export import render_submissions_csv
from ptz_gateway.domain.merge import merge_submissions
from ptz_gateway.infrastructure.database.session import get_db
from ptz_gateway.infrastructure.database.repositories import SubmissionRepository

router = APIRouter()

EXPORT_FILENAME = "ptz_submissions.csv"


@router.get("/submissions/export")
def export_submissions(
    request: Request,
    db: Session = Depends(get_db),
    _admin: str = Depends(require_admin),
):
    """Render every submission, newest first, as a semicolon-separated file"""
    submissions = merge_submissions(SubmissionRepository(db).list_all(), [])
    document = render_submissions_csv(submissions, delimiter=settings.csv_delimiter)

    logging.info(
        "Submissions exported",
        extra={"request_id": get_request_id(request), "row_count": len(submissions)},
    )
    return Response(
        content=document,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
