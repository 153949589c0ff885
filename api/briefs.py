"""Strategic brief API endpoints."""

from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from schemas.brief import (
    BriefResponse,
    BriefStatsResponse,
    CreateBriefRequest,
    CreateBriefResponse,
    HiringInsights,
    ImproveBriefRequest,
    ImproveBriefResponse,
)
from services.brief_repository import (
    BriefNotFoundError,
    BriefPersistenceError,
    BriefRepository,
    to_response,
)
from services.brief_service import IMPROVED_MESSAGE, BriefValidationError, brief_service
from services.export_service import export_briefs_csv
from services.hiring_analysis import hiring_insights
from services.rate_limiter import RATE_LIMIT_CONFIGS, rate_limit

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/briefs", tags=["Briefs"])


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def not_found() -> JSONResponse:
    return error_response(404, "Brief not found")


def internal_error(e: Exception) -> JSONResponse:
    return error_response(500, "Internal server error", str(e))


def caller_id(user_id: Optional[str] = Query(default=None, alias="userId")) -> Optional[str]:
    """The ``userId`` query parameter; a blank value is anonymous access."""
    return user_id or None


@router.post("", response_model=CreateBriefResponse)
@rate_limit(**RATE_LIMIT_CONFIGS["api_write"])
async def create_brief(
    request: Request,
    response: Response,
    payload: CreateBriefRequest,
    db: AsyncSession = Depends(get_db),
):
    """Collect signals for a company and store a new strategic brief."""
    try:
        record = await brief_service.create_brief(
            db,
            company_name=payload.company_name,
            user_intent=payload.user_intent,
            website=payload.website,
            user_id=payload.user_id or None,
            user_company=payload.user_company,
        )
    except BriefValidationError as e:
        return error_response(400, str(e))
    except BriefPersistenceError as e:
        return error_response(500, "Failed to save brief", str(e))
    except Exception as e:
        logger.error("Brief creation failed", company=payload.company_name, error=str(e))
        return internal_error(e)

    return CreateBriefResponse(success=True, brief=to_response(record))


@router.post("/improve", response_model=ImproveBriefResponse)
@rate_limit(**RATE_LIMIT_CONFIGS["api_write"])
async def improve_brief(
    request: Request,
    response: Response,
    payload: ImproveBriefRequest,
    db: AsyncSession = Depends(get_db),
):
    """Regenerate a brief's summary, pitch angle and warnings from its stored signals."""
    if not payload.brief_id:
        return error_response(400, "Brief ID is required")

    try:
        record = await brief_service.improve_brief(db, payload.brief_id, user_id=payload.user_id or None)
    except BriefNotFoundError:
        return not_found()
    except BriefPersistenceError as e:
        return error_response(500, "Failed to update brief", str(e))
    except Exception as e:
        logger.error("Brief improvement failed", brief_id=payload.brief_id, error=str(e))
        return internal_error(e)

    return ImproveBriefResponse(success=True, brief=to_response(record), message=IMPROVED_MESSAGE)


@router.get("", response_model=List[BriefResponse])
@rate_limit(**RATE_LIMIT_CONFIGS["api_read"])
async def list_briefs(
    request: Request,
    response: Response,
    user_id: Optional[str] = Depends(caller_id),
    db: AsyncSession = Depends(get_db),
):
    """All briefs visible to the caller, newest first."""
    try:
        briefs = await BriefRepository(db).get_all(owner_id=user_id)
    except BriefPersistenceError as e:
        return error_response(500, "Failed to load briefs", str(e))
    return [to_response(brief) for brief in briefs]


@router.get("/stats", response_model=BriefStatsResponse)
@rate_limit(**RATE_LIMIT_CONFIGS["api_read"])
async def brief_stats(
    request: Request,
    response: Response,
    user_id: Optional[str] = Depends(caller_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await brief_service.get_stats(db, user_id=user_id)
    except BriefPersistenceError as e:
        return error_response(500, "Failed to load briefs", str(e))


@router.get("/export.csv")
@rate_limit(**RATE_LIMIT_CONFIGS["api_read"])
async def export_briefs(
    request: Request,
    response: Response,
    user_id: Optional[str] = Depends(caller_id),
    db: AsyncSession = Depends(get_db),
):
    """Download the caller's briefs as CSV."""
    try:
        briefs = await BriefRepository(db).get_all(owner_id=user_id)
    except BriefPersistenceError as e:
        return error_response(500, "Failed to load briefs", str(e))
    return Response(
        content=export_briefs_csv(briefs),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="briefs.csv"'},
    )


@router.get("/{brief_id}", response_model=BriefResponse)
@rate_limit(**RATE_LIMIT_CONFIGS["api_read"])
async def get_brief(
    request: Request,
    response: Response,
    brief_id: str,
    user_id: Optional[str] = Depends(caller_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        brief = await BriefRepository(db).get_by_id(brief_id, owner_id=user_id)
    except BriefPersistenceError as e:
        return error_response(500, "Failed to load brief", str(e))
    if brief is None:
        return not_found()
    return to_response(brief)


@router.get("/{brief_id}/hiring", response_model=HiringInsights)
@rate_limit(**RATE_LIMIT_CONFIGS["api_read"])
async def get_hiring_insights(
    request: Request,
    response: Response,
    brief_id: str,
    user_id: Optional[str] = Depends(caller_id),
    db: AsyncSession = Depends(get_db),
):
    """Department and location breakdown of the brief's job postings."""
    try:
        brief = await BriefRepository(db).get_by_id(brief_id, owner_id=user_id)
    except BriefPersistenceError as e:
        return error_response(500, "Failed to load brief", str(e))
    if brief is None:
        return not_found()
    return hiring_insights(to_response(brief).job_signals)


@router.delete("/{brief_id}")
@rate_limit(**RATE_LIMIT_CONFIGS["api_write"])
async def delete_brief(
    request: Request,
    response: Response,
    brief_id: str,
    user_id: Optional[str] = Depends(caller_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        await BriefRepository(db).delete(brief_id, owner_id=user_id)
    except BriefNotFoundError:
        return not_found()
    except BriefPersistenceError as e:
        return error_response(500, "Failed to delete brief", str(e))
    return {"success": True}
