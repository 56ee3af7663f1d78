"""Meal analysis and AI coach endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from befit.api.dependencies import get_container, require_session
from befit.api.schemas import (
    AcceptPlannedMealRequest,
    AnalyzeMealRequest,
    ChatRequest,
    ChatResponse,
    MealImageRequest,
    MealImageResponse,
)
from befit.domain.accounts import Session
from befit.domain.coach import DietAdjustment, MealEstimate
from befit.domain.profiles import UserProfile
from befit.services.coach import decode_image

router = APIRouter(prefix="/api", tags=["coach"])


@router.post("/meals/analyze")
async def analyze_meal(
    payload: AnalyzeMealRequest,
    request: Request,
    session: Session = Depends(require_session),
) -> MealEstimate:
    """Estimate a meal's name and macros from text or a photo."""
    coach = get_container(request).coach_service
    if payload.image:
        try:
            image_bytes = decode_image(payload.image)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return await coach.estimate_meal_from_image(image_bytes)
    return await coach.estimate_meal_from_description(payload.description or "")


@router.post("/coach/chat")
async def chat(
    payload: ChatRequest,
    request: Request,
    session: Session = Depends(require_session),
) -> ChatResponse:
    """Send a message to the coach."""
    coach = get_container(request).coach_service
    reply = await coach.chat(payload.history, payload.message)
    return ChatResponse(reply=reply)


@router.post("/coach/meal-plan")
async def meal_plan(
    request: Request, session: Session = Depends(require_session)
) -> dict[str, object]:
    """Generate a meal plan for the stored profile."""
    container = get_container(request)
    profile = _require_profile(request, session)
    plan = await container.coach_service.generate_meal_plan(profile)
    return {"plan": plan.model_dump() if plan else None}


@router.post("/coach/meal-plan/accept")
async def accept_planned_meal(
    payload: AcceptPlannedMealRequest,
    request: Request,
    session: Session = Depends(require_session),
) -> dict[str, object]:
    """Add a recipe from the meal plan to today's log."""
    service = get_container(request).daily_log_service
    meal = service.meal_from_plan(payload.meal, payload.slot, image=payload.image)
    return service.add_meal(session, meal).to_document()


@router.post("/coach/meal-image")
async def meal_image(
    payload: MealImageRequest,
    request: Request,
    session: Session = Depends(require_session),
) -> MealImageResponse:
    """Generate a food photo for a meal name."""
    coach = get_container(request).coach_service
    return MealImageResponse(image=await coach.generate_meal_image(payload.meal_name))


@router.get("/coach/adjustments")
async def adjustments(
    request: Request, session: Session = Depends(require_session)
) -> DietAdjustment | None:
    """Suggest what the next meal should focus on.

    Returns null while nothing has been logged today.
    """
    container = get_container(request)
    profile = _require_profile(request, session)
    log = container.daily_log_service.get_today(session)
    if not log.meals:
        return None
    return await container.coach_service.suggest_adjustments(profile, log.meals)


def _require_profile(request: Request, session: Session) -> UserProfile:
    profile = get_container(request).profile_service.get_profile(session)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    return profile
