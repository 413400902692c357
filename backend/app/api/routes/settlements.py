"""
Settlement routes: who owes whom, and marking debts as settled.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.user import User
from app.schemas.payment import PaymentSplitResponse
from app.schemas.settlement import SettlementSummary, SettleAllRequest, SettleAllResponse
from app.api.dependencies import get_current_user
from app.services import settlement_service

router = APIRouter(tags=["settlement"])


@router.get("/trips/{trip_id}/settlement", response_model=SettlementSummary)
async def get_settlement(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Balances and the transfers that settle them."""
    return settlement_service.get_trip_settlement(trip_id, current_user.id, db)


@router.post("/splits/{split_id}/settle", response_model=PaymentSplitResponse)
async def settle_split(
    split_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark a single split as paid."""
    return settlement_service.settle_payment_split(split_id, current_user.id, db)


@router.post("/trips/{trip_id}/settlement/settle-all", response_model=SettleAllResponse)
async def settle_all(
    trip_id: int,
    data: SettleAllRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark everything one user owes another on this trip as paid."""
    count = settlement_service.settle_all_debts(
        trip_id, data.from_user_id, data.to_user_id, current_user.id, db
    )
    return SettleAllResponse(settled_count=count)
