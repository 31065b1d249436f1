"""Data structures for Chutes models and their display projection."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import FetchErrorKind, ModelFetchError

DEFAULT_PREFIX = "chutes"

# Used when the API reports neither max_model_len nor context_length
DEFAULT_CONTEXT_LENGTH = 32768


@dataclass(frozen=True)
class ModelPricing:
    """Per-million-token prices as reported by the API."""

    prompt: float
    completion: float


@dataclass(frozen=True)
class DisplayPricing:
    """Pricing in the display projection."""

    prompt_per_1m: float
    completion_per_1m: float


@dataclass(frozen=True)
class ChutesModel:
    """A model entry from the ``/v1/models`` list response.

    Instances are replaced wholesale on every successful fetch and never
    patched in place.
    """

    id: str
    owned_by: str
    pricing: ModelPricing
    input_modalities: Tuple[str, ...] = ()
    output_modalities: Tuple[str, ...] = ()
    confidential_compute: bool = False
    supported_features: Optional[Tuple[str, ...]] = None
    max_model_len: Optional[int] = None
    context_length: Optional[int] = None
    quantization: Optional[str] = None
    root: Optional[str] = None
    parent: Optional[str] = None
    created: Optional[int] = None
    chute_id: Optional[str] = None
    max_output_length: Optional[int] = None
    supported_sampling_parameters: Optional[Tuple[str, ...]] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChutesModel":
        """Parse one entry of the list response.

        Args:
            data: Raw JSON object for a single model

        Returns:
            Parsed model

        Raises:
            ModelFetchError: If the entry is not an object, has no usable ``id``
                or carries non-numeric pricing or token counts
        """
        if not isinstance(data, Mapping):
            raise ModelFetchError(
                f"Invalid model entry: expected object, got {type(data).__name__}",
                FetchErrorKind.INVALID_RESPONSE,
            )
        model_id = data.get("id")
        if not isinstance(model_id, str) or not model_id:
            raise ModelFetchError("Invalid model entry: missing 'id'", FetchErrorKind.INVALID_RESPONSE)

        pricing_data = data.get("pricing")
        if not isinstance(pricing_data, Mapping):
            pricing_data = {}

        known = {f for f in cls.__dataclass_fields__ if f != "extra"}

        try:
            pricing = ModelPricing(
                prompt=_as_price(pricing_data.get("prompt")),
                completion=_as_price(pricing_data.get("completion")),
            )
            max_model_len = _as_token_count(data.get("max_model_len"))
            context_length = _as_token_count(data.get("context_length"))
            max_output_length = _as_token_count(data.get("max_output_length"))
        except (TypeError, ValueError) as e:
            raise ModelFetchError(
                f"Invalid model entry '{model_id}': {e}", FetchErrorKind.INVALID_RESPONSE, cause=e
            ) from e

        return cls(
            id=model_id,
            owned_by=str(data.get("owned_by") or ""),
            pricing=pricing,
            input_modalities=_as_tuple(data.get("input_modalities")) or (),
            output_modalities=_as_tuple(data.get("output_modalities")) or (),
            confidential_compute=bool(data.get("confidential_compute", False)),
            supported_features=_as_tuple(data.get("supported_features")),
            max_model_len=max_model_len,
            context_length=context_length,
            quantization=data.get("quantization"),
            root=data.get("root"),
            parent=data.get("parent"),
            created=data.get("created"),
            chute_id=data.get("chute_id"),
            max_output_length=max_output_length,
            supported_sampling_parameters=_as_tuple(data.get("supported_sampling_parameters")),
            extra={k: v for k, v in data.items() if k not in known},
        )

    @property
    def features(self) -> Tuple[str, ...]:
        """Supported features, empty when the API omitted the list."""
        return self.supported_features or ()

    def to_dict(self) -> Dict[str, Any]:
        """Return the model in the API's JSON shape."""
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "object": "model",
                "owned_by": self.owned_by,
                "pricing": {"prompt": self.pricing.prompt, "completion": self.pricing.completion},
                "input_modalities": list(self.input_modalities),
                "output_modalities": list(self.output_modalities),
                "confidential_compute": self.confidential_compute,
            }
        )
        optional = {
            "supported_features": list(self.supported_features) if self.supported_features is not None else None,
            "max_model_len": self.max_model_len,
            "context_length": self.context_length,
            "quantization": self.quantization,
            "root": self.root,
            "parent": self.parent,
            "created": self.created,
            "chute_id": self.chute_id,
            "max_output_length": self.max_output_length,
            "supported_sampling_parameters": (
                list(self.supported_sampling_parameters) if self.supported_sampling_parameters is not None else None
            ),
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class ModelDisplayInfo:
    """Host-facing projection of a model under a display identifier."""

    id: str
    original_id: str
    display_name: str
    owned_by: str
    pricing: DisplayPricing
    context_length: int
    features: Tuple[str, ...]
    supports_confidential_compute: bool
    input_modalities: Tuple[str, ...]
    output_modalities: Tuple[str, ...]
    quantization: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase shape consumed by the host application."""
        data: Dict[str, Any] = {
            "id": self.id,
            "originalId": self.original_id,
            "displayName": self.display_name,
            "ownedBy": self.owned_by,
            "pricing": {
                "promptPer1M": self.pricing.prompt_per_1m,
                "completionPer1M": self.pricing.completion_per_1m,
            },
            "contextLength": self.context_length,
            "features": list(self.features),
            "supportsConfidentialCompute": self.supports_confidential_compute,
            "inputModalities": list(self.input_modalities),
            "outputModalities": list(self.output_modalities),
        }
        if self.quantization is not None:
            data["quantization"] = self.quantization
        return data


def to_display_info(model: ChutesModel, prefix: str = DEFAULT_PREFIX) -> ModelDisplayInfo:
    """Project a model into its display form under ``prefix``.

    Args:
        model: Model to project
        prefix: Namespace used for the display identifier

    Returns:
        Display projection
    """
    return ModelDisplayInfo(
        id=f"{prefix}/{model.id}",
        original_id=model.id,
        display_name=model.id,
        owned_by=model.owned_by,
        # The API already reports prices per million tokens
        pricing=DisplayPricing(
            prompt_per_1m=model.pricing.prompt,
            completion_per_1m=model.pricing.completion,
        ),
        quantization=model.quantization,
        context_length=model.max_model_len or model.context_length or DEFAULT_CONTEXT_LENGTH,
        features=model.features,
        supports_confidential_compute=model.confidential_compute,
        input_modalities=model.input_modalities,
        output_modalities=model.output_modalities,
    )


@dataclass(frozen=True)
class CachedModelData:
    """An immutable cache snapshot. Timestamps are epoch milliseconds."""

    models: Tuple[ChutesModel, ...]
    fetched_at: float
    expires_at: float


def _as_tuple(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return None


def _as_price(value: Any) -> float:
    if value is None:
        return 0.0
    # bool is an int subclass and must not pass as a number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"price must be a number, got {value!r}")
    return float(value)


def _as_token_count(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"token count must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"token count must be an integer, got {value!r}")
    return int(value)
