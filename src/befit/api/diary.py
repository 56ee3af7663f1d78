"""Profile, daily log and dashboard endpoints."""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request, status

from befit.api.dependencies import get_container, require_session
from befit.api.schemas import DashboardResponse, QuickLogRequest
from befit.domain.accounts import Session
from befit.domain.coach import MealEstimate
from befit.domain.meals import DailyLog
from befit.domain.profiles import ProfileDraft
from befit.services.daily_logs import summarize

router = APIRouter(prefix="/api", tags=["diary"])


@router.get("/user")
async def get_profile(
    request: Request, session: Session = Depends(require_session)
) -> dict[str, object] | None:
    """Return the stored profile, or null before onboarding."""
    profile = get_container(request).profile_service.get_profile(session)
    return profile.to_document() if profile else None


@router.post("/user")
async def save_profile(
    draft: ProfileDraft,
    request: Request,
    session: Session = Depends(require_session),
) -> dict[str, object]:
    """Save the profile with freshly derived targets."""
    profile = get_container(request).profile_service.save_profile(session, draft)
    return profile.to_document()


@router.get("/logs/today")
async def get_today_log(
    request: Request, session: Session = Depends(require_session)
) -> dict[str, object]:
    """Return today's log."""
    return get_container(request).daily_log_service.get_today(session).to_document()


@router.get("/logs/{day}")
async def get_log(
    day: date, request: Request, session: Session = Depends(require_session)
) -> dict[str, object]:
    """Return the log for a date."""
    log = get_container(request).daily_log_service.get_log(session, day)
    return log.to_document()


@router.post("/logs")
async def save_log(
    log: DailyLog, request: Request, session: Session = Depends(require_session)
) -> dict[str, object]:
    """Replace the log for the date it carries."""
    saved = get_container(request).daily_log_service.save_log(session, log)
    return saved.to_document()


@router.post("/logs/today/meals")
async def add_meal(
    payload: QuickLogRequest,
    request: Request,
    session: Session = Depends(require_session),
) -> dict[str, object]:
    """Append a reviewed meal estimate to today's log."""
    service = get_container(request).daily_log_service
    meal = service.meal_from_estimate(
        MealEstimate(name=payload.name, macros=payload.macros, advice=payload.notes),
        meal_type=payload.type,
        image=payload.image,
    )
    return service.add_meal(session, meal).to_document()


@router.get("/dashboard")
async def dashboard(
    request: Request, session: Session = Depends(require_session)
) -> DashboardResponse:
    """Return today's totals against the profile targets."""
    container = get_container(request)
    profile = container.profile_service.get_profile(session)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    log = container.daily_log_service.get_today(session)
    return DashboardResponse(**asdict(summarize(log, profile)))
