from typing import Optional
from fastapi import APIRouter, Query, Request

router = APIRouter()


@router.get('/api/events')
def get_events(request: Request, since: Optional[int] = Query(default=None)):
    """Recent ledger events, newer than 'since' when given."""
    return request.app.state.activity.get_events(since)
