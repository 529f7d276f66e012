"""FastAPI dependencies resolving the per-process handles set up in the lifespan."""

from fastapi import Request

from bookstock.config import Settings
from bookstock.services.store import RecordStore
from bookstock.utils.activity import ActivityRecorder


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_recorder(request: Request) -> ActivityRecorder:
    return request.app.state.recorder
