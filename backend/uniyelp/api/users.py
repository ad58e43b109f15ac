"""
Users API - profile reads and updates
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from uniyelp.api.deps import authorize
from uniyelp.auth.policies import require_admin_or_owner, require_auth, require_owner
from uniyelp.core.database import get_db
from uniyelp.crud import user as crud
from uniyelp.schemas.auth import Principal, UserResponse, UserUpdate

router = APIRouter(tags=["users"])


@router.get("/me")
async def read_me(principal: Principal = Depends(authorize(require_auth))):
    return {"success": True, "data": principal.model_dump()}


@router.get("/users/{id}")
def read_user(
    id: str,
    principal: Principal = Depends(authorize(require_admin_or_owner)),
    db: Session = Depends(get_db)
):
    user = crud.get_user(db, id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "data": UserResponse.model_validate(user).model_dump()}


@router.patch("/users/{id}")
def update_user(
    id: str,
    body: UserUpdate,
    principal: Principal = Depends(authorize(require_owner)),
    db: Session = Depends(get_db)
):
    user = crud.get_user(db, id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if body.name:
        user = crud.update_user_name(db, user, body.name)
    return {"success": True, "data": UserResponse.model_validate(user).model_dump()}
