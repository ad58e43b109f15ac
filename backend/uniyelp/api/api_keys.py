"""
API Keys API - a signed-in user manages their own keys

Only browser sessions may manage keys; a key cannot mint or revoke keys.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from uniyelp.api.deps import authorize
from uniyelp.auth.policies import require_session_only
from uniyelp.core.config import get_settings
from uniyelp.core.database import get_db
from uniyelp.crud import user as crud
from uniyelp.schemas.auth import ApiKeyCreate, ApiKeyCreated, ApiKeyResponse, Principal

router = APIRouter(tags=["api-keys"])
settings = get_settings()

require_session = authorize(require_session_only)


@router.get("")
def list_api_keys(
    principal: Principal = Depends(require_session),
    db: Session = Depends(get_db)
):
    keys = crud.get_user_api_keys(db, principal.id)
    return {
        "success": True,
        "data": {
            "total": len(keys),
            "items": [ApiKeyResponse.model_validate(k).model_dump() for k in keys],
        },
    }


@router.post("")
def create_api_key(
    body: ApiKeyCreate,
    principal: Principal = Depends(require_session),
    db: Session = Depends(get_db)
):
    """The raw key is only returned here"""
    api_key, raw_key = crud.create_api_key(
        db, principal.id, settings.API_KEY_PREFIX, name=body.name, expires_at=body.expires_at
    )
    created = ApiKeyCreated(**ApiKeyResponse.model_validate(api_key).model_dump(), key=raw_key)
    return {"success": True, "data": created.model_dump()}


@router.delete("/{key_id}")
def delete_api_key(
    key_id: str,
    principal: Principal = Depends(require_session),
    db: Session = Depends(get_db)
):
    if not crud.delete_api_key(db, principal.id, key_id):
        raise HTTPException(status_code=404, detail="API key not found")
    return {"success": True}
