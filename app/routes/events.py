import json
import time

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import StreamingResponse

from app.services.notifier import broker

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/stream")
def event_stream(
    topics: str = Query("", description="Comma-separated topic names; empty means all"),
    max_seconds: float = Query(300.0, gt=0, le=3600),
):
    wanted = {t.strip() for t in topics.split(",") if t.strip()}
    try:
        subscription = broker.subscribe(wanted)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    def event_generator():
        deadline = time.monotonic() + max_seconds
        try:
            yield ": connected\n\n"
            while time.monotonic() < deadline:
                event = subscription.get(timeout=1.0)
                if event is None:
                    yield ": keep-alive\n\n"
                    continue
                payload = {"topic": event.topic, "at": event.at.isoformat(), "data": event.payload}
                yield f"event: {event.topic}\ndata: {json.dumps(payload)}\n\n"
        finally:
            subscription.close()

    return StreamingResponse(event_generator(), media_type="text/event-stream")
