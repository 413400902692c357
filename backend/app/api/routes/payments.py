"""
Payment routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.user import User
from app.schemas.payment import PaymentCreate, PaymentUpdate, PaymentResponse
from app.api.dependencies import get_current_user
from app.services import payment_service

router = APIRouter(tags=["payments"])


@router.get("/trips/{trip_id}/payments", response_model=List[PaymentResponse])
async def list_payments(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Payments for a trip, newest first."""
    return payment_service.list_payments(trip_id, current_user.id, db)


@router.post("/trips/{trip_id}/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def add_payment(
    trip_id: int,
    data: PaymentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record a payment made by the current user."""
    return payment_service.create_payment(trip_id, current_user.id, data, db)


@router.patch("/payments/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int,
    data: PaymentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit a payment; split changes replace all splits atomically."""
    return payment_service.update_payment(payment_id, current_user.id, data, db)


@router.delete("/payments/{payment_id}")
async def delete_payment(
    payment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    payment_service.delete_payment(payment_id, current_user.id, db)
    return {"message": "Payment deleted"}
