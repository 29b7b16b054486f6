"""User API routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from sync_api.services import get_user_store
from sync_common.models.results import StoreResultKind
from sync_common.models.user import UserRecord
from sync_common.services.user_store import UserStore

router = APIRouter(prefix="/users", tags=["users"], redirect_slashes=False)


@router.get("/{clerk_id}", response_model=UserRecord, response_model_by_alias=True)
def get_user(clerk_id: str, store: UserStore = Depends(get_user_store)) -> UserRecord:
    result = store.find(clerk_id)
    if result.kind == StoreResultKind.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return result.record
