import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, EmailStr
from sqlalchemy.orm import Session

from database import get_db
from models import Subscriber

logger = logging.getLogger(__name__)

router = APIRouter()


class SubscribeRequest(BaseModel):
    email: EmailStr

    model_config = ConfigDict(str_strip_whitespace=True)


@router.post("", status_code=status.HTTP_201_CREATED)
def subscribe(request: SubscribeRequest, db: Session = Depends(get_db)):
    email = request.email.lower()

    if db.query(Subscriber).filter(Subscriber.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This email is already subscribed"
        )

    db.add(Subscriber(email=email))
    db.commit()

    logger.info(f"New subscription: {email}")
    return {"message": "Successfully subscribed to the newsletter"}
