from fastapi import APIRouter, Depends

from pomoplus.dependencies import get_timer, get_write_queue
from pomoplus.schemas.timer import DurationAdjust, TagSelect, TimerResponse
from pomoplus.services.timer_controller import SessionTimer
from pomoplus.services.write_queue import WriteQueue

router = APIRouter(prefix="/timer", tags=["timer"])


@router.get("", response_model=TimerResponse)
async def get_timer_state(
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    return timer.snapshot(degraded=queue.degraded)


@router.post("/start", response_model=TimerResponse)
async def start_timer(
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    timer.start()
    return timer.snapshot(degraded=queue.degraded)


@router.post("/pause", response_model=TimerResponse)
async def pause_timer(
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    timer.pause()
    return timer.snapshot(degraded=queue.degraded)


@router.post("/reset", response_model=TimerResponse)
async def reset_timer(
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    timer.reset()
    return timer.snapshot(degraded=queue.degraded)


@router.post("/duration", response_model=TimerResponse)
async def adjust_duration(
    data: DurationAdjust,
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    timer.adjust_duration(data.phase, data.delta_minutes)
    return timer.snapshot(degraded=queue.degraded)


@router.put("/tag", response_model=TimerResponse)
async def select_tag(
    data: TagSelect,
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    timer.select_tag(data.name)
    return timer.snapshot(degraded=queue.degraded)


@router.post("/tag/next", response_model=TimerResponse)
async def select_next_tag(
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    timer.select_next_tag()
    return timer.snapshot(degraded=queue.degraded)


@router.post("/tag/previous", response_model=TimerResponse)
async def select_previous_tag(
    timer: SessionTimer = Depends(get_timer),
    queue: WriteQueue = Depends(get_write_queue),
):
    timer.select_previous_tag()
    return timer.snapshot(degraded=queue.degraded)
