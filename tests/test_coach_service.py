"""Tests for the AI coach service."""

import asyncio
import base64

import pytest

from befit.domain.coach import ChatTurn, DietAdjustment
from befit.domain.errors import MealAnalysisError
from befit.domain.meals import MacroNutrients, MealLog, MealType
from befit.services.coach import (
    CHAT_EMPTY_REPLY,
    CHAT_FAILURE_REPLY,
    COACH_INSTRUCTIONS,
    FALLBACK_ADJUSTMENT,
    MEAL_PLAN_SCHEMA,
    build_meal_plan_prompt,
    decode_image,
    to_data_url,
)
from tests.conftest import FakeCoachClient, make_coach_service, make_profile

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8


def test_estimate_from_description() -> None:
    client = FakeCoachClient()

    estimate = asyncio.run(
        make_coach_service(client).estimate_meal_from_description(" chicken salad ")
    )

    assert estimate.name == "Chicken salad"
    assert estimate.macros == MacroNutrients(calories=420, protein=35, carbs=12, fat=24)
    assert estimate.advice == "Add some whole grains for lasting energy."
    call = client.json_calls[0]
    assert call["schema_name"] == "meal_estimate"
    assert '"chicken salad"' in str(call["prompt"])
    assert call["image_data_url"] is None


def test_estimate_from_image_sends_data_url() -> None:
    client = FakeCoachClient()

    asyncio.run(make_coach_service(client).estimate_meal_from_image(PNG_BYTES))

    image_url = str(client.json_calls[0]["image_data_url"])
    assert image_url.startswith("data:image/png;base64,")


def test_estimate_failure_raises_analysis_error() -> None:
    service = make_coach_service(FakeCoachClient(fail=True))

    with pytest.raises(MealAnalysisError):
        asyncio.run(service.estimate_meal_from_description("pizza"))


def test_estimate_with_malformed_payload_raises_analysis_error() -> None:
    client = FakeCoachClient()
    client.json_payloads["meal_estimate"] = {"name": "Pizza"}

    with pytest.raises(MealAnalysisError):
        asyncio.run(make_coach_service(client).estimate_meal_from_description("pizza"))


def test_generate_meal_plan() -> None:
    client = FakeCoachClient()

    plan = asyncio.run(make_coach_service(client).generate_meal_plan(make_profile()))

    assert plan is not None
    assert plan.breakfast[0].name == "Greek yogurt bowl"
    assert plan.lunch == []
    assert client.json_calls[0]["schema_name"] == "meal_plan"


def test_generate_meal_plan_failure_returns_none() -> None:
    service = make_coach_service(FakeCoachClient(fail=True))

    assert asyncio.run(service.generate_meal_plan(make_profile())) is None


def test_meal_plan_prompt_carries_per_meal_targets() -> None:
    prompt = build_meal_plan_prompt(
        make_profile(
            target_calories=2400, target_protein=160, dietary_restrictions="Vegan"
        )
    )

    assert "Approx 720 kcal and 48g protein" in prompt
    assert "Approx 840 kcal and 56g protein" in prompt
    assert "2400 Calories, 160g Protein" in prompt
    assert "Dietary Restrictions: Vegan" in prompt
    assert "Height: 170cm, Weight: 70kg" in prompt


def test_generate_meal_image() -> None:
    client = FakeCoachClient()

    image = asyncio.run(make_coach_service(client).generate_meal_image("Pad thai"))

    assert image == "data:image/png;base64,aW1hZ2U="
    assert client.image_calls[0]["model"] == "gpt-image-1"
    assert "Pad thai" in str(client.image_calls[0]["prompt"])


@pytest.mark.parametrize(
    "client", [FakeCoachClient(fail=True), FakeCoachClient(image_b64=None)]
)
def test_generate_meal_image_fallback(client: FakeCoachClient) -> None:
    assert asyncio.run(make_coach_service(client).generate_meal_image("Soup")) is None


def test_chat_maps_history_roles() -> None:
    client = FakeCoachClient()
    history = [
        ChatTurn(role="user", text="Hi"),
        ChatTurn(role="model", text="Hello! How can I help?"),
    ]

    reply = asyncio.run(make_coach_service(client).chat(history, "Is rice ok?"))

    assert reply == "Drink more water."
    call = client.text_calls[0]
    assert call["instructions"] == COACH_INSTRUCTIONS
    assert call["messages"] == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello! How can I help?"},
        {"role": "user", "content": "Is rice ok?"},
    ]


def test_chat_fallbacks() -> None:
    failing = make_coach_service(FakeCoachClient(fail=True))
    empty = make_coach_service(FakeCoachClient(reply="   "))

    assert asyncio.run(failing.chat([], "Hello")) == CHAT_FAILURE_REPLY
    assert asyncio.run(empty.chat([], "Hello")) == CHAT_EMPTY_REPLY


def test_suggest_adjustments() -> None:
    client = FakeCoachClient()
    meals = [
        MealLog(
            name="Bagel",
            timestamp=1_760_000_000_000,
            macros=MacroNutrients(calories=300, protein=10, carbs=55, fat=4),
            type=MealType.BREAKFAST,
        )
    ]

    adjustment = asyncio.run(
        make_coach_service(client).suggest_adjustments(make_profile(), meals)
    )

    assert adjustment == DietAdjustment(
        missing_macros="Protein", suggestion="Grilled salmon with greens"
    )
    prompt = str(client.json_calls[0]["prompt"])
    assert "Bagel" in prompt
    assert "Target Cal: 1471" in prompt


def test_suggest_adjustments_fallback() -> None:
    service = make_coach_service(FakeCoachClient(fail=True))

    adjustment = asyncio.run(service.suggest_adjustments(make_profile(), []))

    assert adjustment == FALLBACK_ADJUSTMENT
    assert adjustment.model_dump(by_alias=True) == {
        "missingMacros": "Nutrients",
        "suggestion": "Balanced meal",
    }


def test_decode_image_accepts_raw_and_data_url() -> None:
    encoded = base64.b64encode(PNG_BYTES).decode()

    assert decode_image(encoded) == PNG_BYTES
    assert decode_image(f"data:image/png;base64,{encoded}") == PNG_BYTES
    assert to_data_url(PNG_BYTES) == f"data:image/png;base64,{encoded}"


def test_decode_image_rejects_invalid_base64() -> None:
    with pytest.raises(ValueError, match="not valid base64"):
        decode_image("not base64!")


def test_meal_plan_schema_requires_non_negative_macros() -> None:
    sections = MEAL_PLAN_SCHEMA["properties"]
    recipe = sections["breakfast"]["items"]  # type: ignore[index]

    for field_name in ("calories", "protein", "carbs", "fat"):
        assert recipe["properties"][field_name]["minimum"] == 0
