"""Public contact endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eatfreshly.db.session import get_db
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.contact import ContactCreate, ContactInfo, ContactRead
from eatfreshly.services import contact_service

router: APIRouter = APIRouter()


@router.post("", response_model=ApiResponse[ContactRead], status_code=status.HTTP_201_CREATED)
def submit(payload: ContactCreate, db: Session = Depends(get_db)) -> dict:
    message = contact_service.submit_message(db, payload)
    return ok(message, "Thank you for contacting us. We will get back to you soon.")


@router.get("/info", response_model=ApiResponse[ContactInfo])
def contact_info(db: Session = Depends(get_db)) -> dict:
    return ok(contact_service.get_contact_info(db))
