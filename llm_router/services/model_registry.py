"""
Model Registry - maps each ModelId to its backend handle and static weights.

Populated once by the composition root, then frozen. Iteration follows
registration order, which the objective selector relies on for its
first-maximum tie-break.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from llm_router.domain.exceptions import DomainValidationError, UnknownModelError
from llm_router.domain.value_objects import ModelId, ModelWeights
from llm_router.services.llm_backend import ChatBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredModel:
    model_id: ModelId
    backend: ChatBackend
    weights: ModelWeights
    description: str = ""


class ModelRegistry:
    def __init__(self):
        self._models: dict[ModelId, RegisteredModel] = {}
        self._frozen = False

    def register(
        self,
        model_id: "ModelId | str",
        backend: ChatBackend,
        weights: ModelWeights,
        description: str = "",
    ) -> RegisteredModel:
        """Add a model. Only allowed before freeze(), once per id."""
        if self._frozen:
            raise DomainValidationError("Model registry is frozen")
        model_id = ModelId.parse(model_id)
        if model_id in self._models:
            raise DomainValidationError(f"Model {model_id} is already registered")

        entry = RegisteredModel(
            model_id=model_id,
            backend=backend,
            weights=weights,
            description=description,
        )
        self._models[model_id] = entry
        logger.debug("Registered model %s with weights %s", model_id, weights)
        return entry

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, model_id: "ModelId | str") -> RegisteredModel:
        """
        Look up a registered model.

        Raises:
            UnknownModelError: if model_id is not a ModelId or not registered
        """
        key = ModelId.parse(model_id)
        entry = self._models.get(key)
        if entry is None:
            raise UnknownModelError(str(model_id))
        return entry

    def list_all(self) -> list[tuple[ModelId, ModelWeights]]:
        return [(entry.model_id, entry.weights) for entry in self._models.values()]

    def __contains__(self, model_id: object) -> bool:
        if not isinstance(model_id, str) or not ModelId.is_known(model_id):
            return False
        return ModelId.parse(model_id) in self._models

    def __iter__(self) -> Iterator[RegisteredModel]:
        return iter(list(self._models.values()))

    def __len__(self) -> int:
        return len(self._models)
