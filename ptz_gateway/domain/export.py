"""CSV rendering of the canonical submission list"""

import csv
import io
from typing import Iterable, List

from ptz_gateway.domain.models import Eligible, HousingType, Ineligible, Submission
from ptz_gateway.utils.formatting import format_euros, format_percent, format_yes_no

COLUMNS = [
    "Date",
    "Nom",
    "Contact",
    "Zone",
    "Adresse",
    "Type de logement",
    "Taille du foyer",
    "Revenu fiscal de référence",
    "Coût du projet",
    "Éligible",
    "Tranche",
    "Quotité",
    "Montant PTZ",
    "Primo-accédant",
    "Motif",
]

HOUSING_LABELS = {
    HousingType.INDIVIDUAL: "Individuel",
    HousingType.COLLECTIVE: "Collectif",
}


def _row(submission: Submission) -> List[str]:
    contact = submission.contact
    profile = submission.profile
    result = submission.result

    address = ", ".join(part for part in (submission.address, submission.commune) if part)
    contact_info = " / ".join(part for part in (contact.email, contact.phone) if part)

    bracket = quota = amount = reason = ""
    if isinstance(result, Eligible):
        bracket = str(result.income_bracket)
        quota = format_percent(result.quota_percent)
        amount = format_euros(result.loan_amount)
    elif isinstance(result, Ineligible):
        reason = result.reason

    return [
        submission.submission_date or "",
        f"{contact.first_name} {contact.last_name}".strip(),
        contact_info,
        profile.zone.value,
        address,
        HOUSING_LABELS.get(profile.housing_type, profile.housing_type.value),
        str(profile.household_size),
        format_euros(profile.income),
        format_euros(profile.project_cost),
        format_yes_no(result.eligible),
        bracket,
        quota,
        amount,
        format_yes_no(submission.not_prior_owner),
        reason,
    ]


def render_submissions_csv(submissions: Iterable[Submission], delimiter: str = ";") -> str:
    """
    Render submissions as a delimited document with a fixed column order.

    Fields containing the delimiter, a quote or a line break are quoted and
    internal quotes doubled. An empty input yields the header line only.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=delimiter, quotechar='"', quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(COLUMNS)
    for submission in submissions:
        writer.writerow(_row(submission))
    return buf.getvalue()
