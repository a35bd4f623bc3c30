from fastapi import APIRouter, HTTPException, Request

from gpsfix.fix_store import FixStore
from gpsfix.models import FixResponse

router = APIRouter(tags=["gps"])


def require_store(request: Request) -> FixStore:
    store = getattr(request.app.state, "fix_store", None)
    if store is None:
        raise HTTPException(status_code=404, detail="GPS reader not enabled")
    return store


@router.get("/", response_model=FixResponse)
@router.get("/fix", response_model=FixResponse)
async def get_fix(request: Request) -> FixResponse:
    store = require_store(request)
    return FixResponse.from_view(store.snapshot())
