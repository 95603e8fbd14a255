from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, StringConstraints
from sqlalchemy.orm import Session
from typing import Annotated, Optional

from database import get_db
from models import ContactMessage

router = APIRouter()

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ContactRequest(BaseModel):
    firstName: Name
    lastName: Name
    email: EmailStr
    companyName: Optional[str] = None
    companySize: Optional[str] = None
    topic: Optional[str] = None
    message: Optional[str] = None


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_contact(contact: ContactRequest, db: Session = Depends(get_db)):
    db.add(
        ContactMessage(
            first_name=contact.firstName,
            last_name=contact.lastName,
            email=contact.email,
            company_name=contact.companyName,
            company_size=contact.companySize,
            topic=contact.topic,
            message=contact.message,
        )
    )
    db.commit()
    return {"message": "Contact form submitted successfully"}
