import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string

from apps.core.tasks import BaseTaskWithRetry
from apps.negotiations.models import Decision, Proposal, SenderRole

logger = logging.getLogger(__name__)


def _deliver(template: str, subject: str, recipient: str, context: dict) -> None:
    html_content = render_to_string(f"negotiations/email/{template}.html", context)
    text_content = render_to_string(f"negotiations/email/{template}.txt", context)

    send_mail(
        subject=subject,
        message=text_content,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
        html_message=html_content,
        fail_silently=False,
    )


@shared_task(bind=True, base=BaseTaskWithRetry)
def send_proposal_notification(self, proposal_id):
    """
    E-mail the receiving party of one proposal. A retry only re-sends
    this proposal's mail.
    """
    proposal = (
        Proposal.objects.select_related(
            "thread__buyer", "thread__business_owner"
        )
        .filter(id=proposal_id)
        .first()
    )
    if proposal is None:
        logger.warning(f"Proposal {proposal_id} no longer exists, skipping notification")
        return 0

    thread = proposal.thread
    if proposal.sender_role == SenderRole.BUSINESS_OWNER:
        recipient = thread.buyer.contact_email
    else:
        recipient = thread.business_owner.email
    if not recipient:
        return 0

    context = {
        "offer_name": proposal.offer_name,
        "version_no": proposal.version_no,
        "from_party": proposal.from_party,
        "to_party": proposal.to_party,
        "proposal": proposal,
    }
    _deliver(
        "proposal_received",
        f"New offer version {proposal.version_no}: {proposal.offer_name}",
        recipient,
        context,
    )
    logger.info(f"Proposal notification for {proposal_id} sent to {recipient}")
    return 1


@shared_task(bind=True, base=BaseTaskWithRetry)
def send_decision_notification(self, decision_id):
    """E-mail the counterparty when an offer version is accepted or rejected."""
    decision = (
        Decision.objects.select_related("proposal", "business_owner", "buyer")
        .filter(id=decision_id)
        .first()
    )
    if decision is None:
        logger.warning(f"Decision {decision_id} no longer exists, skipping notification")
        return 0

    if decision.actor_role == SenderRole.BUYER:
        recipient = decision.business_owner.email
    else:
        recipient = decision.buyer.contact_email
    if not recipient:
        return 0

    verb = "accepted" if decision.is_accepted else "rejected"
    context = {
        "offer_name": decision.offer_name,
        "version_no": decision.proposal.version_no,
        "verb": verb,
        "actor": decision.accepted_by or decision.rejected_by,
    }
    _deliver(
        "decision_recorded",
        f"Offer {decision.offer_name} {verb}",
        recipient,
        context,
    )
    logger.info(f"Decision notification for {decision_id} sent to {recipient}")
    return 1
