"""
Models API Router - lists the registered models and the selection setup.
"""

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter
from pydantic import BaseModel

from llm_router.services.model_registry import ModelRegistry
from llm_router.services.model_selector import ModelSelector


class ModelInfo(BaseModel):
    id: str
    description: str
    weights: dict[str, float]


class ModelListResponse(BaseModel):
    models: list[ModelInfo]
    default_model: str
    strategy: str


router = APIRouter(prefix="/models", tags=["models"])


@router.get("", response_model=ModelListResponse)
@inject
async def list_models(
    registry: FromDishka[ModelRegistry],
    selector: FromDishka[ModelSelector],
):
    """Registered models in registration order (the tie-break order)."""
    return ModelListResponse(
        models=[
            ModelInfo(
                id=entry.model_id.value,
                description=entry.description,
                weights=entry.weights.as_dict(),
            )
            for entry in registry
        ],
        default_model=selector.default_model.value,
        strategy=selector.strategy.value,
    )
