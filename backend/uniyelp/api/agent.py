"""
Agent API - entry point for tool clients authenticating with API keys
"""
from fastapi import APIRouter, Depends

from uniyelp.api.deps import authorize
from uniyelp.auth.policies import require_api_key_only
from uniyelp.schemas.auth import Principal

router = APIRouter(tags=["agent"])


@router.get("/whoami")
async def whoami(principal: Principal = Depends(authorize(require_api_key_only))):
    return {"success": True, "data": principal.model_dump()}
