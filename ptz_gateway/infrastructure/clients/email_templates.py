"""Confirmation email templates"""

from typing import Tuple

from jinja2 import Environment

from ptz_gateway.domain.models import Eligible, Submission
from ptz_gateway.utils.formatting import format_euros

_env = Environment(autoescape=True)

ELIGIBLE_SUBJECT = "Confirmation de votre simulation PTZ"
INELIGIBLE_SUBJECT = "Résultat de votre simulation PTZ"
DEFAULT_REASON = "Critères d'éligibilité non remplis"

ELIGIBLE_TEMPLATE = _env.from_string(
    """<h1>Bonjour {{ first_name }} {{ last_name }},</h1>
<p>Nous avons bien reçu votre simulation de Prêt à Taux Zéro (PTZ).</p>
<p>Félicitations ! Selon nos calculs, vous êtes éligible au PTZ.</p>
{% if loan_amount %}<p>Montant estimé du PTZ : {{ loan_amount }}</p>{% endif %}
<p>Un conseiller va étudier votre dossier et vous recontacter prochainement pour vous accompagner dans vos démarches.</p>
<p>Cordialement,<br>L'équipe PTZ</p>
"""
)

INELIGIBLE_TEMPLATE = _env.from_string(
    """<h1>Bonjour {{ first_name }} {{ last_name }},</h1>
<p>Nous avons bien reçu votre simulation de Prêt à Taux Zéro (PTZ).</p>
<p>Malheureusement, selon nos calculs, vous n'êtes pas éligible au PTZ pour la raison suivante :</p>
<p>{{ reason }}</p>
<p>Si vous souhaitez plus d'informations ou discuter de solutions alternatives, n'hésitez pas à nous contacter.</p>
<p>Cordialement,<br>L'équipe PTZ</p>
"""
)


def render_confirmation_email(submission: Submission) -> Tuple[str, str]:
    """Returns (subject, html body) for the submission's outcome"""
    contact = submission.contact
    result = submission.result

    if isinstance(result, Eligible):
        html = ELIGIBLE_TEMPLATE.render(
            first_name=contact.first_name,
            last_name=contact.last_name,
            loan_amount=format_euros(result.loan_amount) if result.loan_amount else None,
        )
        return ELIGIBLE_SUBJECT, html

    html = INELIGIBLE_TEMPLATE.render(
        first_name=contact.first_name,
        last_name=contact.last_name,
        reason=result.reason or DEFAULT_REASON,
    )
    return INELIGIBLE_SUBJECT, html
