"""Back-office reviews, contact inbox, email templates and newsletter."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eatfreshly.core.security import require_admin
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from eatfreshly.schemas.contact import ContactInfo, ContactInfoUpdate, ContactRead, ContactUpdate
from eatfreshly.schemas.email import (
    EmailLogRead,
    EmailTemplateCreate,
    EmailTemplateRead,
    EmailTemplateUpdate,
    RenderedEmail,
    TemplatePreviewRequest,
    TemplateTestSend,
)
from eatfreshly.schemas.newsletter import NewsletterSend, NewsletterSendResult, SubscriberRead
from eatfreshly.schemas.review import ReviewModeration, ReviewRead
from eatfreshly.services import contact_service, email_service, newsletter_service, review_service

router: APIRouter = APIRouter()


@router.get("/reviews", response_model=ApiResponse[Page[ReviewRead]])
def list_reviews(approved: bool | None = None, params: PageParams = Depends(), db: Session = Depends(get_db)) -> dict:
    reviews, total = review_service.list_all_reviews(db, offset=params.offset, limit=params.limit, approved=approved)
    return ok(page_of([review_service.serialize_review(review) for review in reviews], total, params))


@router.put("/reviews/{review_id}", response_model=ApiResponse[ReviewRead])
def moderate_review(review_id: int, payload: ReviewModeration, db: Session = Depends(get_db)) -> dict:
    review = review_service.moderate_review(db, review_id, payload)
    return ok(review_service.serialize_review(review), "Review updated")


@router.delete("/reviews/{review_id}", response_model=ApiResponse[None])
def delete_review(review_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)) -> dict:
    review_service.delete_review(db, admin, review_id)
    return ok(message="Review deleted")


@router.get("/contact", response_model=ApiResponse[Page[ContactRead]])
def list_contact_messages(
    status_filter: str | None = Query(default=None, alias="status"),
    inquiry_type: str | None = None,
    search: str | None = None,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> dict:
    messages, total = contact_service.list_messages(
        db,
        offset=params.offset,
        limit=params.limit,
        status=status_filter,
        inquiry_type=inquiry_type,
        search=search,
    )
    return ok(page_of(messages, total, params))


@router.get("/contact/stats", response_model=ApiResponse[dict])
def contact_stats(db: Session = Depends(get_db)) -> dict:
    return ok(contact_service.message_stats(db))


@router.get("/contact/{message_id}", response_model=ApiResponse[ContactRead])
def get_contact_message(message_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(contact_service.get_message(db, message_id))


@router.put("/contact/{message_id}", response_model=ApiResponse[ContactRead])
def update_contact_message(message_id: int, payload: ContactUpdate, db: Session = Depends(get_db)) -> dict:
    return ok(contact_service.update_message(db, message_id, payload), "Contact message updated")


@router.delete("/contact/{message_id}", response_model=ApiResponse[None])
def delete_contact_message(message_id: int, db: Session = Depends(get_db)) -> dict:
    contact_service.delete_message(db, message_id)
    return ok(message="Contact message deleted")


@router.put("/contact-info", response_model=ApiResponse[ContactInfo])
def update_contact_info(
    payload: ContactInfoUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict:
    return ok(contact_service.update_contact_info(db, payload, updated_by=admin.email), "Contact information updated")


@router.get("/email/templates", response_model=ApiResponse[list[EmailTemplateRead]])
def list_templates(template_type: str | None = None, db: Session = Depends(get_db)) -> dict:
    return ok(email_service.list_templates(db, template_type))


@router.get("/email/templates/{template_id}", response_model=ApiResponse[EmailTemplateRead])
def get_template(template_id: int, db: Session = Depends(get_db)) -> dict:
    return ok(email_service.get_template(db, template_id))


@router.post("/email/templates", response_model=ApiResponse[EmailTemplateRead], status_code=status.HTTP_201_CREATED)
def create_template(
    payload: EmailTemplateCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict:
    return ok(email_service.create_template(db, admin, payload), "Email template created")


@router.put("/email/templates/{template_id}", response_model=ApiResponse[EmailTemplateRead])
def update_template(
    template_id: int,
    payload: EmailTemplateUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict:
    return ok(email_service.update_template(db, admin, template_id, payload), "Email template updated")


@router.delete("/email/templates/{template_id}", response_model=ApiResponse[None])
def delete_template(template_id: int, db: Session = Depends(get_db)) -> dict:
    email_service.delete_template(db, template_id)
    return ok(message="Email template deleted")


@router.post("/email/templates/{template_id}/preview", response_model=ApiResponse[RenderedEmail])
def preview_template(template_id: int, payload: TemplatePreviewRequest, db: Session = Depends(get_db)) -> dict:
    template = email_service.get_template(db, template_id)
    return ok(email_service.render_template(template, payload.variables))


@router.post("/email/templates/{template_id}/test", response_model=ApiResponse[EmailLogRead])
def send_test_email(template_id: int, payload: TemplateTestSend, db: Session = Depends(get_db)) -> dict:
    """Render a template with sample values and send it to one address."""
    template = email_service.get_template(db, template_id)
    log = email_service.deliver(
        db,
        to_email=payload.recipient_email,
        to_name=None,
        rendered=email_service.render_template(template, payload.variables),
        template_type=template.type,
    )
    return ok(log, "Test email sent" if log.status == "sent" else "Test email could not be delivered")


@router.get("/email/logs", response_model=ApiResponse[Page[EmailLogRead]])
def list_email_logs(
    status_filter: str | None = Query(default=None, alias="status"),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> dict:
    logs, total = email_service.list_logs(db, offset=params.offset, limit=params.limit, status=status_filter)
    return ok(page_of(logs, total, params))


@router.get("/newsletter/subscribers", response_model=ApiResponse[Page[SubscriberRead]])
def list_subscribers(
    active: bool | None = None,
    search: str | None = None,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> dict:
    rows, total = newsletter_service.list_subscribers(
        db, offset=params.offset, limit=params.limit, active=active, search=search
    )
    return ok(page_of(rows, total, params))


@router.get("/newsletter/stats", response_model=ApiResponse[dict])
def newsletter_stats(db: Session = Depends(get_db)) -> dict:
    return ok(newsletter_service.subscriber_stats(db))


@router.post("/newsletter/send", response_model=ApiResponse[NewsletterSendResult])
def send_newsletter(payload: NewsletterSend, db: Session = Depends(get_db)) -> dict:
    result = newsletter_service.send_newsletter(db, payload)
    return ok(result, f"Newsletter sent to {result['sent']} subscribers")
