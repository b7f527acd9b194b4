from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from bgp_status.status import NodeStatusReporter

router = APIRouter()


@router.get("/status/", response_class=PlainTextResponse)
def status():
    # Sync endpoint: FastAPI runs it in the threadpool, so the blocking
    # socket reads do not stall the event loop.
    return PlainTextResponse(NodeStatusReporter().report())
