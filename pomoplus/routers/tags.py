from fastapi import APIRouter, Depends

from pomoplus.dependencies import get_timer
from pomoplus.schemas.tag import TagCreate, TagListResponse
from pomoplus.services.timer_controller import SessionTimer

router = APIRouter(prefix="/tags", tags=["tags"])


def _tag_list(timer: SessionTimer) -> TagListResponse:
    return TagListResponse(tags=timer.registry.list(), selected=timer.registry.selected)


@router.get("", response_model=TagListResponse)
async def list_tags(timer: SessionTimer = Depends(get_timer)):
    return _tag_list(timer)


@router.post("", response_model=TagListResponse, status_code=201)
async def create_tag(data: TagCreate, timer: SessionTimer = Depends(get_timer)):
    timer.add_tag(data.name)
    return _tag_list(timer)


@router.delete("/{name:path}", response_model=TagListResponse)
async def delete_tag(name: str, timer: SessionTimer = Depends(get_timer)):
    timer.remove_tag(name)
    return _tag_list(timer)
