# storefront/api/routers/users.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import UserRead, UserUpsert
from storefront.services.user_service import UserService
from storefront.utils.errors import NotFoundError

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead)
def upsert_user(payload: UserUpsert, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.upsert_user(payload)
    except SQLAlchemyError:
        db.rollback()
        # unique email is the only constraint a caller can hit
        raise HTTPException(status_code=400, detail="Could not save user profile")


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: str, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
