"""Submission deduplication and merge into the canonical, time-ordered list"""

import json
import uuid
from typing import Dict, Iterable, List, Tuple

from ptz_gateway.domain.models import Submission
from ptz_gateway.utils.date_utils import parse_submission_date

# Namespace for ids derived from legacy identity keys
LEGACY_NAMESPACE = uuid.UUID("6f0d6c56-3d4e-5b8a-9a51-2f7c1c1e9a40")


def legacy_identity_key(submission: Submission) -> Tuple[str, ...]:
    """(date, email, first name, last name), or without the date when it is missing"""
    contact = submission.contact
    if submission.submission_date:
        return (submission.submission_date, contact.email, contact.first_name, contact.last_name)
    return (contact.email, contact.first_name, contact.last_name)


def identity_key(submission: Submission) -> str:
    """
    Identity used for deduplication.

    Records created by this service carry a UUID. Legacy records without one
    get a UUIDv5 derived from their legacy key, so the same legacy record
    always maps to the same identity.
    """
    if submission.id:
        return submission.id
    encoded = json.dumps(list(legacy_identity_key(submission)), ensure_ascii=False)
    return str(uuid.uuid5(LEGACY_NAMESPACE, encoded))


def merge_submissions(primary: Iterable[Submission], secondary: Iterable[Submission]) -> List[Submission]:
    """
    Reconcile two submission collections.

    Rules:
    - Primary entries are inserted first; a secondary entry with the same
      identity overwrites it (last write wins)
    - Result sorted by submission date, newest first; missing or malformed
      dates sort as the epoch
    - Equal dates keep insertion order
    """
    by_key: Dict[str, Submission] = {}
    for submission in primary:
        by_key[identity_key(submission)] = submission
    for submission in secondary:
        by_key[identity_key(submission)] = submission

    return sorted(
        by_key.values(),
        key=lambda s: parse_submission_date(s.submission_date),
        reverse=True,
    )
