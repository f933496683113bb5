"""Gemini relay route (pass-through for browser clients)."""

import json
import logging

from api.dependencies import get_gemini_proxy
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from services.gemini_proxy import GeminiProxy
from utils.errors import DocuGenError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Proxy"])


@router.post(
    "/api/gemini",
    summary="Gemini relay",
    description=(
        "Forward `{prompt}` or `{contents}` to Gemini generateContent and return the "
        "upstream JSON verbatim."
    ),
    responses={400: {"description": "Missing prompt"}, 500: {"description": "Upstream failure"}},
)
async def gemini_relay(request: Request, proxy: GeminiProxy = Depends(get_gemini_proxy)) -> JSONResponse:
    raw = await request.body()
    if not raw:
        return JSONResponse(status_code=400, content={"error": "No body provided"})

    try:
        body = json.loads(raw)
        if not isinstance(body, dict):
            raise ValueError("Body must be a JSON object")
        data = await proxy.forward(body)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except (ValueError, DocuGenError) as e:
        logger.error(f"Gemini relay failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return JSONResponse(status_code=200, content=data)
