# app/routers/users.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Task, User
from app.schemas.user import AdminUserCreate, UserOut, UserUpdate
from app.utils.auth import get_current_admin, get_current_user
from app.utils.permissions import is_admin
from app.utils.security import hash_password
from app.utils.validation import valid_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

def _email_taken(db: Session, email: str, exclude_id: int = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None

@router.get("", response_model=List[UserOut])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Get all users - admin only"""
    return db.query(User).order_by(User.name).all()

@router.get("/assignable", response_model=List[UserOut])
def get_assignable_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Users the current user may assign a task to"""
    if is_admin(current_user):
        return db.query(User).order_by(User.name).all()
    # Non-admins can only assign to themselves
    return [current_user]

@router.get("/{user_id}", response_model=UserOut)
def get_user(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    user_id: int = Depends(valid_user_id),
):
    """Get a specific user by ID - admins, or the user themself"""
    user = _get_user_or_404(db, user_id)
    if not is_admin(current_user) and user.id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return user

@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    user: AdminUserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Create a new user with an explicit role - admin only"""
    email = user.email.lower()
    if _email_taken(db, email):
        raise HTTPException(status_code=400, detail="User already exists")

    new_user = User(
        name=user.name,
        email=email,
        hashed_password=hash_password(user.password),
        role=user.role,
    )
    try:
        db.add(new_user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists")
    db.refresh(new_user)

    logger.info("Admin %s created %s user %s", current_user.id, new_user.role.value, new_user.id)
    return new_user

@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
    user_id: int = Depends(valid_user_id),
):
    """Update name, email or password - admin only. Roles never change."""
    user = _get_user_or_404(db, user_id)
    update_data = {k: v for k, v in user_update.model_dump(exclude_unset=True).items() if v is not None}

    if "email" in update_data:
        update_data["email"] = update_data["email"].lower()
        if _email_taken(db, update_data["email"], exclude_id=user.id):
            raise HTTPException(status_code=400, detail="Email already in use")
    if "password" in update_data:
        update_data["hashed_password"] = hash_password(update_data.pop("password"))

    for key, value in update_data.items():
        setattr(user, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already in use")
    db.refresh(user)

    logger.info("Admin %s updated user %s", current_user.id, user.id)
    return user

@router.delete("/{user_id}")
def delete_user(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
    user_id: int = Depends(valid_user_id),
):
    """Delete a user - admin only, and only once no task references them"""
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    referenced = db.query(Task).filter(
        or_(Task.assigned_user_id == user.id, Task.created_by_id == user.id)
    ).count()
    if referenced:
        raise HTTPException(
            status_code=400,
            detail=f"User is referenced by {referenced} task(s); reassign or delete them first",
        )

    db.delete(user)
    db.commit()

    logger.info("Admin %s deleted user %s", current_user.id, user_id)
    return {"message": "User deleted successfully"}
