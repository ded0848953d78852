from datetime import datetime

from fastapi import APIRouter, Depends, Query

from pomoplus.dependencies import get_session_store
from pomoplus.schemas.session import SessionRecord
from pomoplus.services.session_service import SessionStore

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=list[SessionRecord])
async def list_sessions(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    store: SessionStore = Depends(get_session_store),
):
    return await store.recent(
        limit=limit, offset=offset, start_date=start_date, end_date=end_date
    )
