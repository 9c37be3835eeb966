from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from database import get_session, store_operation
from schemas.lead_schema import InquiryCreateSchema
from services import leads as lead_service

router = APIRouter(tags=["Inquiry"])


# Landing-page form (no authentication required)
@router.post("/inquiries", status_code=status.HTTP_201_CREATED)
def submit_inquiry(payload: InquiryCreateSchema, db: Session = Depends(get_session)):
    with store_operation(db, "submit your inquiry"):
        lead_service.submit_inquiry(db, payload)
    return {"message": "Thank you for your inquiry! Our team will contact you within 24 hours."}
