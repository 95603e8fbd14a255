
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import datetime
from core.errors import UpstreamError
from core.news_verifier import InputFetchError, verify_news
from database import get_db
from dependencies import Services, get_services
from models import User, VerificationResult
from auth import get_current_active_user
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


class VerifyRequest(BaseModel):
    """Request model for verification endpoint"""
    input: Optional[str] = None


class SentenceScore(BaseModel):
    text: str
    score: float


class VerifyResponse(BaseModel):
    """Response model for verification endpoint"""
    score: float
    text: str
    sentences: List[SentenceScore]


class VerificationRecord(BaseModel):
    id: int
    input: str
    score: float
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


def _save_result(db: Session, record: VerificationResult) -> None:
    db.add(record)
    db.commit()


@router.post("", response_model=VerifyResponse)
async def verify(
    request: VerifyRequest,
    current_user: User = Depends(get_current_active_user),
    services: Services = Depends(get_services),
    db: Session = Depends(get_db),
):
    """
    Score the check-worthiness of a claim or article
    
    This endpoint:
    1. Fetches and extracts the article text when the input is a URL
    2. Scores every sentence with ClaimBuster
    3. Stores the result in the verification audit log
    
    Raises:
        HTTPException: If input is empty, the URL cannot be read or ClaimBuster fails
    """
    if not request.input or not request.input.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Input is required"
        )

    logger.info(f"Verification request from user: {current_user.id}")

    try:
        result = await verify_news(services.http_client, services.claimbuster, request.input)
    except InputFetchError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UpstreamError as e:
        logger.error(f"Verification error: {e.message}", exc_info=True)
        raise HTTPException(status_code=e.status_code, detail=e.message)

    record = VerificationResult(
        user_id=current_user.id,
        input=request.input.strip(),
        text=result["text"],
        score=result["score"],
    )
    await run_in_threadpool(_save_result, db, record)

    return VerifyResponse(**result)


@router.get("/results", response_model=List[VerificationRecord])
def get_user_results(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    skip: int = 0,
    limit: int = 10
):
    """
    Get the verification results submitted by the current user, newest first.
    """
    return db.query(VerificationResult).filter(
        VerificationResult.user_id == current_user.id
    ).order_by(VerificationResult.id.desc()).offset(skip).limit(limit).all()
