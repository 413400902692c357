"""
Budget expense routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.user import User
from app.schemas.expense import ExpenseCreate, ExpenseResponse
from app.api.dependencies import get_current_user
from app.services import expense_service

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Budget lines for a trip."""
    return expense_service.list_expenses(trip_id, current_user.id, db)


@router.get("/total")
async def get_total_budget(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Sum of the trip's budget lines."""
    expense_service.list_expenses(trip_id, current_user.id, db)
    return {"trip_id": trip_id, "total": expense_service.get_total_budget(trip_id, db)}


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def add_expense(
    trip_id: int,
    data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return expense_service.add_expense(trip_id, current_user.id, data, db)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    trip_id: int,
    expense_id: int,
    data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return expense_service.update_expense(expense_id, trip_id, current_user.id, data, db)


@router.delete("/{expense_id}")
async def delete_expense(
    trip_id: int,
    expense_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    expense_service.delete_expense(expense_id, trip_id, current_user.id, db)
    return {"message": "Expense deleted"}
