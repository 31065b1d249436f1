"""Bidirectional registry between native model ids and display ids.

A display id is the native id under a namespace prefix, e.g.
``chutes/Qwen/Qwen3-32B`` for ``Qwen/Qwen3-32B``. The registry keeps two
indices in lockstep: native id to model and display id to display info.

Typical usage:

    registry = ModelRegistry(prefix="chutes")
    registry.register_all(models)
    info = registry.get_display_info("chutes/Qwen/Qwen3-32B")
    registry.get_original_id(info.id)  # "Qwen/Qwen3-32B"
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional

from .logging import LogEvent, log_debug
from .types import DEFAULT_PREFIX, ChutesModel, ModelDisplayInfo, to_display_info


class ModelRegistry:
    """Registry of models keyed by native id with a derived display index."""

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        """Initialize an empty registry.

        Args:
            prefix: Namespace used to build display ids

        Raises:
            ValueError: If ``prefix`` is empty or contains '/'
        """
        self._prefix = self._check_prefix(prefix)
        self._models: Dict[str, ChutesModel] = {}
        self._display_info: Dict[str, ModelDisplayInfo] = {}
        # Display id each native id was registered under; a prefix change
        # leaves these untouched until rebuild_display_index()
        self._display_ids: Dict[str, str] = {}

    @staticmethod
    def _check_prefix(prefix: str) -> str:
        if not prefix:
            raise ValueError("prefix must be a non-empty string")
        if "/" in prefix:
            raise ValueError("prefix must not contain '/'")
        return prefix

    @property
    def prefix(self) -> str:
        """Namespace used for display ids."""
        return self._prefix

    def set_prefix(self, prefix: str) -> None:
        """Change the namespace for subsequent registrations and lookups.

        Already registered display entries keep their old ids. Call
        :meth:`rebuild_display_index` to recompute them.
        """
        self._prefix = self._check_prefix(prefix)

    def get_prefix(self) -> str:
        """Return the current namespace prefix."""
        return self._prefix

    def rebuild_display_index(self) -> None:
        """Recompute every display entry under the current prefix."""
        self._display_info.clear()
        self._display_ids.clear()
        for model in self._models.values():
            self._store_display_info(model)
        log_debug(LogEvent.MODEL_REGISTRY, "Display index rebuilt", prefix=self._prefix, count=len(self._models))

    def _store_display_info(self, model: ChutesModel) -> None:
        info = self.to_display_info(model)
        self._display_info[info.id] = info
        self._display_ids[model.id] = info.id

    def register(self, model: ChutesModel) -> None:
        """Add or replace a model. The last registration of an id wins."""
        previous_display_id = self._display_ids.get(model.id)
        # Same display id: overwrite in place so both indices keep their order
        if previous_display_id is not None and previous_display_id != self.get_display_id(model.id):
            self._display_info.pop(previous_display_id, None)
        self._models[model.id] = model
        self._store_display_info(model)

    def register_all(self, models: Iterable[ChutesModel]) -> None:
        """Register each model in order. There is no rollback on failure."""
        count = 0
        for model in models:
            self.register(model)
            count += 1
        log_debug(LogEvent.MODEL_REGISTRY, "Registered models", count=count, total=len(self._models))

    def unregister(self, model_id: str) -> bool:
        """Remove a model and its display entry.

        Returns:
            True if the model was registered
        """
        if self._models.pop(model_id, None) is None:
            return False
        display_id = self._display_ids.pop(model_id, None)
        if display_id is not None:
            self._display_info.pop(display_id, None)
        return True

    def clear(self) -> None:
        """Remove all models."""
        self._models.clear()
        self._display_info.clear()
        self._display_ids.clear()

    def get(self, model_id: str) -> Optional[ChutesModel]:
        """Look up a model by native id."""
        return self._models.get(model_id)

    def get_display_info(self, display_id: str) -> Optional[ModelDisplayInfo]:
        """Look up display info by display id."""
        return self._display_info.get(display_id)

    def get_display_id(self, original_id: str) -> str:
        """Build the display id for a native id under the current prefix."""
        return f"{self._prefix}/{original_id}"

    def get_original_id(self, display_id: str) -> Optional[str]:
        """Strip the prefix from a display id.

        Returns:
            The native id, or None if ``display_id`` is not under the prefix.
            The result is not checked against registered models.
        """
        prefix_with_slash = f"{self._prefix}/"
        if not display_id.startswith(prefix_with_slash):
            return None
        return display_id[len(prefix_with_slash) :]

    def is_chutes_model(self, model_id: str) -> bool:
        """Check whether ``model_id`` is a display id under the current prefix."""
        return model_id.startswith(f"{self._prefix}/")

    def to_display_info(self, model: ChutesModel) -> ModelDisplayInfo:
        """Project a model under the current prefix."""
        return to_display_info(model, self._prefix)

    def get_all(self) -> List[ChutesModel]:
        """All registered models in insertion order."""
        return list(self._models.values())

    def get_all_display_info(self) -> List[ModelDisplayInfo]:
        """All display entries in insertion order."""
        return list(self._display_info.values())

    def size(self) -> int:
        """Number of registered models."""
        return len(self._models)

    def filter(self, predicate: Callable[[ChutesModel], bool]) -> List[ChutesModel]:
        """Models for which ``predicate`` returns True."""
        return [model for model in self.get_all() if predicate(model)]

    def find_by_feature(self, feature: str) -> List[ChutesModel]:
        """Models advertising ``feature``. A missing feature list matches nothing."""
        return self.filter(lambda model: feature in model.features)

    def find_by_owner(self, owner: str) -> List[ChutesModel]:
        """Models whose ``owned_by`` equals ``owner``."""
        return self.filter(lambda model: model.owned_by == owner)

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._models

    def __iter__(self) -> Iterator[ChutesModel]:
        return iter(self.get_all())
