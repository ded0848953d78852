from fastapi import Request

from pomoplus.clock import Clock
from pomoplus.services.session_service import SessionStore
from pomoplus.services.timer_controller import SessionTimer
from pomoplus.services.write_queue import WriteQueue


async def get_timer(request: Request) -> SessionTimer:
    return request.app.state.timer


async def get_clock(request: Request) -> Clock:
    return request.app.state.clock


async def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


async def get_write_queue(request: Request) -> WriteQueue:
    return request.app.state.write_queue
