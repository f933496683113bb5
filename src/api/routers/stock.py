"""Stock media routes: search, keywords, auto-match and background music."""

from api.dependencies import get_automation_runner, get_stock_media_service
from api.schemas import KeywordsRequest, ScenesRequest
from fastapi import APIRouter, Depends, Query
from production.automation import AutomationRunner
from services.stock_media_service import StockMediaService

router = APIRouter(tags=["Stock Media"])


@router.get(
    "/api/stock/search",
    summary="Search stock videos",
    description=(
        "Search Pexels, then Pixabay, then the built-in mock catalog. Mock results "
        "that did not match any tag are flagged `suggested`."
    ),
)
async def search_stock(
    q: str = Query(..., min_length=1),
    stock: StockMediaService = Depends(get_stock_media_service),
) -> list[dict]:
    results = await stock.search_videos(q)
    return [result.to_dict() for result in results]


@router.post("/api/stock/keywords", summary="Extract search keywords")
async def extract_keywords(
    body: KeywordsRequest,
    stock: StockMediaService = Depends(get_stock_media_service),
) -> dict:
    return {"keywords": await stock.extract_keywords(body.text)}


@router.post(
    "/api/stock/auto-match",
    summary="Auto-match stock footage",
    description="Switch every scene to video and match footage for scenes that have none.",
)
async def auto_match(
    body: ScenesRequest,
    runner: AutomationRunner = Depends(get_automation_runner),
) -> dict:
    scenes = [scene.to_scene() for scene in body.scenes]
    result = await runner.auto_match_scenes(scenes)
    return result.to_dict()


@router.get("/api/music/{style}", summary="Background music for a style")
async def background_music(
    style: str,
    stock: StockMediaService = Depends(get_stock_media_service),
) -> dict:
    return {"style": style, "url": stock.get_background_music(style)}
