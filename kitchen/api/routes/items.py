from fastapi import APIRouter, Body, HTTPException, Query, Request
from fastapi.responses import JSONResponse
import logging

from kitchen.domain.errors import ValidationError
from kitchen.logic.reporting.costing import build_summary
from kitchen.utilities.currency import format_zar

router = APIRouter()
logger = logging.getLogger("kitchen_app")

CONFIRM_REQUIRED = {"error": "Confirmation required: repeat the request with confirm=true"}

# JSON body key for each LineItemInput field
BODY_KEYS = {"name": "name", "cost_per_unit": "costPerUnit", "quantity_used": "quantityUsed", "unit": "unit"}


def _ledger(request: Request):
    return request.app.state.ledger


def _coerce_id(raw: str):
    # Ids written by this app are integers; older payloads may carry strings
    try:
        return int(raw)
    except ValueError:
        return raw


@router.get('/api/items')
def list_items(request: Request):
    ledger = _ledger(request)
    return {"items": [item.to_dict() for item in ledger.items()], "total": ledger.total()}


@router.post('/api/items', status_code=201)
def add_item(request: Request, payload: dict = Body(...)):
    ledger = _ledger(request)
    try:
        item = ledger.add(
            payload.get('name'),
            payload.get('costPerUnit'),
            payload.get('quantityUsed'),
            payload.get('unit'),
        )
    except ValidationError as e:
        fields = {BODY_KEYS.get(k, k): msg for k, msg in e.fields.items()}
        return JSONResponse(status_code=400, content={"error": e.message, "fields": fields})
    except OSError as e:
        logger.error("Failed to persist new item: %s", e)
        raise HTTPException(status_code=500, detail="Could not save costing data")
    logger.info("Item added id=%s name=%s", item.id, item.name)
    return {"item": item.to_dict(), "total": ledger.total()}


@router.delete('/api/items/{item_id}')
def remove_item(request: Request, item_id: str, confirm: bool = Query(default=False)):
    if not confirm:
        return JSONResponse(status_code=409, content=CONFIRM_REQUIRED)
    ledger = _ledger(request)
    try:
        removed = ledger.remove(_coerce_id(item_id))
    except OSError as e:
        logger.error("Failed to persist removal of %s: %s", item_id, e)
        raise HTTPException(status_code=500, detail="Could not save costing data")
    if not removed:
        raise HTTPException(status_code=404, detail="Item not found")
    return {"removed": True, "total": ledger.total()}


@router.delete('/api/items')
def clear_items(request: Request, confirm: bool = Query(default=False)):
    if not confirm:
        return JSONResponse(status_code=409, content=CONFIRM_REQUIRED)
    ledger = _ledger(request)
    try:
        ledger.clear()
    except OSError as e:
        logger.error("Failed to erase costing data: %s", e)
        raise HTTPException(status_code=500, detail="Could not erase costing data")
    logger.info("Ledger cleared")
    return {"cleared": True, "total": ledger.total()}


@router.get('/api/total')
def get_total(request: Request):
    total = _ledger(request).total()
    return {"total": total, "total_display": format_zar(total)}


@router.get('/api/summary')
def get_summary(request: Request):
    return build_summary(_ledger(request), warnings=request.app.state.warnings)
