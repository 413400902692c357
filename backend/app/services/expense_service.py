"""
Expense service for budget line items.
"""
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List
from app.core.exceptions import NotFoundError, ValidationError
from app.models.expense import Expense
from app.models.share import Role
from app.schemas.expense import ExpenseCreate
from app.services.permission_service import require_trip_access


def _validate(data: ExpenseCreate):
    if not data.description or not data.category or data.amount is None:
        raise ValidationError("Missing required fields")
    if data.amount <= 0:
        raise ValidationError("Invalid amount")


def _get_trip_expense(expense_id: int, trip_id: int, db: Session) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense or expense.trip_id != trip_id:
        raise NotFoundError("Expense not found")
    return expense


def list_expenses(trip_id: int, user_id: int, db: Session) -> List[Expense]:
    require_trip_access(trip_id, user_id, db, Role.VIEWER)
    return db.query(Expense).filter(
        Expense.trip_id == trip_id
    ).order_by(Expense.created_at, Expense.id).all()


def get_total_budget(trip_id: int, db: Session) -> Decimal:
    """Sum of all budget lines on the trip."""
    expenses = db.query(Expense).filter(Expense.trip_id == trip_id).all()
    return sum((Decimal(e.amount) for e in expenses), Decimal(0))


def add_expense(trip_id: int, user_id: int, data: ExpenseCreate, db: Session) -> Expense:
    """Add a budget line. Editor access required."""
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    _validate(data)

    expense = Expense(
        trip_id=trip_id,
        description=data.description,
        amount=data.amount,
        category=data.category
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def update_expense(expense_id: int, trip_id: int, user_id: int, data: ExpenseCreate, db: Session) -> Expense:
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    expense = _get_trip_expense(expense_id, trip_id, db)
    _validate(data)

    expense.description = data.description
    expense.amount = data.amount
    expense.category = data.category
    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(expense_id: int, trip_id: int, user_id: int, db: Session):
    require_trip_access(trip_id, user_id, db, Role.EDITOR)
    expense = _get_trip_expense(expense_id, trip_id, db)
    db.delete(expense)
    db.commit()
