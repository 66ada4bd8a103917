"""Convenience wrappers for the portal's business events.

Each wrapper builds the NotificationEvent for one kind of portal action,
with the title, message, link and email default that action calls for,
and hands it to the dispatcher.
"""

from decimal import Decimal

from notifications.enums import NotificationCategory
from notifications.schemas.notification import DispatchResult, NotificationEvent
from notifications.services.dispatcher import (
    NotificationDispatcher,
    notification_dispatcher,
)


def project_link(project_id: str) -> str:
    return f"/dashboard/projects/{project_id}"


def _money(amount: Decimal | float) -> str:
    return f"${Decimal(str(amount)):,.2f}"


def _send(event: NotificationEvent, dispatcher: NotificationDispatcher | None):
    return (dispatcher or notification_dispatcher).dispatch(event)


def notify_new_message(
    user_id: str,
    sender_name: str,
    project_id: str | None = None,
    preview: str | None = None,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    """Notify a user that someone sent them a message."""
    message = f"{sender_name} sent you a message"
    if preview:
        message = f"{message}: {preview}"
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.MESSAGES,
            title="New Message",
            message=message[:1000],
            link=project_link(project_id) if project_id else "/dashboard/messages",
            project_id=project_id,
            request_email=True,
            email_subject_override=f"New message from {sender_name}",
        ),
        dispatcher,
    )


def notify_project_update(
    user_id: str,
    project_id: str,
    project_name: str,
    update_message: str,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    title = f"Project Update: {project_name}"
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.PROJECT_UPDATES,
            title=title,
            message=update_message,
            link=project_link(project_id),
            project_id=project_id,
            request_email=True,
            email_subject_override=title,
        ),
        dispatcher,
    )


def notify_invoice_sent(
    user_id: str,
    project_id: str,
    invoice_number: str,
    total: Decimal | float,
    due_date: str,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    """Notify a client that an invoice was issued.

    Args:
        user_id: Client receiving the invoice.
        project_id: Project the invoice belongs to.
        invoice_number: Human-readable invoice number.
        total: Invoice total in dollars.
        due_date: Due date as displayed to the client.
    """
    amount = _money(total)
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.INVOICES,
            title="New Invoice",
            message=(
                f"Invoice {invoice_number} for {amount} has been sent. "
                f"Due by {due_date}."
            ),
            link=project_link(project_id),
            project_id=project_id,
            request_email=True,
            email_subject_override=f"Invoice {invoice_number} - {amount}",
        ),
        dispatcher,
    )


def notify_payment_received(
    user_id: str,
    project_id: str,
    invoice_number: str,
    total: Decimal | float,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    amount = _money(total)
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.INVOICES,
            title="Payment Received",
            message=(
                f"Payment for invoice {invoice_number} ({amount}) "
                "has been confirmed. Thank you!"
            ),
            link=project_link(project_id),
            project_id=project_id,
            request_email=True,
            email_subject_override=f"Payment Confirmed - Invoice {invoice_number}",
        ),
        dispatcher,
    )


def notify_milestone_completed(
    user_id: str,
    project_id: str,
    milestone_title: str,
    *,
    send_email: bool = False,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    """Notify a client that a milestone was completed.

    Milestones are frequent and low urgency, so email is off unless the
    caller asks for it.
    """
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.MILESTONES,
            title="Milestone Completed",
            message=f'Milestone "{milestone_title}" has been completed.',
            link=project_link(project_id),
            project_id=project_id,
            request_email=send_email,
            email_subject_override=f"Milestone Completed - {milestone_title}",
        ),
        dispatcher,
    )


def notify_deliverable_approved(
    user_id: str,
    project_id: str,
    deliverable_title: str,
    notes: str | None = None,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    suffix = f": {notes}" if notes else "!"
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.MILESTONES,
            title="Deliverable Approved",
            message=f'Your deliverable "{deliverable_title}" has been approved{suffix}',
            link=project_link(project_id),
            project_id=project_id,
            request_email=True,
            email_subject_override=f"Deliverable Approved - {deliverable_title}",
        ),
        dispatcher,
    )


def notify_changes_requested(
    user_id: str,
    project_id: str,
    deliverable_title: str,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.PROJECT_UPDATES,
            title="Changes Requested",
            message=(
                f'Changes have been requested for "{deliverable_title}". '
                "Please review the feedback and resubmit."
            ),
            link=project_link(project_id),
            project_id=project_id,
            request_email=True,
            email_subject_override=f"Changes Requested - {deliverable_title}",
        ),
        dispatcher,
    )


def notify_task_assigned(
    user_id: str,
    project_id: str,
    task_title: str,
    due_date: str | None = None,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    due = f" - Due: {due_date}" if due_date else ""
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.TASKS,
            title="New Task Assigned",
            message=f'You have been assigned: "{task_title}"{due}',
            link=project_link(project_id),
            project_id=project_id,
            request_email=True,
            email_subject_override=f"New Task Assigned - {task_title}",
        ),
        dispatcher,
    )


def notify_mention(
    user_id: str,
    mentioned_by: str,
    context: str,
    link: str | None = None,
    project_id: str | None = None,
    *,
    dispatcher: NotificationDispatcher | None = None,
) -> DispatchResult:
    """Notify a user that someone mentioned them.

    Args:
        user_id: User who was mentioned.
        mentioned_by: Display name of the author.
        context: Where the mention happened, e.g. "a comment on Homepage".
        link: Portal link to the mention.
        project_id: Related project, if any.
    """
    return _send(
        NotificationEvent(
            recipient_user_id=user_id,
            category=NotificationCategory.MENTIONS,
            title="You were mentioned",
            message=f"{mentioned_by} mentioned you in {context}",
            link=link or (project_link(project_id) if project_id else None),
            project_id=project_id,
            request_email=True,
            email_subject_override=f"{mentioned_by} mentioned you",
        ),
        dispatcher,
    )
