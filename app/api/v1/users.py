from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_owner_user
from app.models.user import User
from app.schemas.common import success_response
from app.services.user_service import user_service

router = APIRouter(prefix="/users")


@router.get("", summary="List users (Owner)")
def list_users(db: Session = Depends(get_db), _: User = Depends(get_owner_user)):
    return success_response("Users retrieved", user_service.list_users(db))
