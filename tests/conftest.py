"""Shared fixtures for the Chutes model registry tests."""

import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from chutes_model_registry.types import ChutesModel


class FakeClock:
    """Manually advanced time source returning seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    text: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    url: str = "https://llm.chutes.ai/v1/models",
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = {
        200: "OK",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        429: "Too Many Requests",
        500: "Internal Server Error",
        502: "Bad Gateway",
        503: "Service Unavailable",
    }.get(status_code, "Unknown")
    response.url = url
    response.encoding = "utf-8"
    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
    else:
        response._content = (text or "").encode("utf-8")
    response.headers.update(headers or {})
    return response


def model_dict(model_id: str, **overrides: Any) -> Dict[str, Any]:
    """Return a list-response entry shaped like the Chutes API."""
    data: Dict[str, Any] = {
        "id": model_id,
        "object": "model",
        "root": model_id,
        "parent": None,
        "created": 1_750_000_000,
        "chute_id": "00000000-0000-0000-0000-000000000000",
        "owned_by": "sglang",
        "pricing": {"prompt": 0.2, "completion": 0.8},
        "max_model_len": 40960,
        "input_modalities": ["text"],
        "output_modalities": ["text"],
        "supported_features": ["json_mode", "tools"],
        "confidential_compute": False,
    }
    data.update(overrides)
    return data


@pytest.fixture
def clock() -> FakeClock:
    """Manually advanced clock."""
    return FakeClock()


@pytest.fixture
def api_models() -> List[Dict[str, Any]]:
    """Raw entries of a models list response."""
    return [
        model_dict("Qwen/Qwen3-32B", quantization="bf16"),
        model_dict(
            "deepseek-ai/DeepSeek-R1",
            owned_by="vllm",
            pricing={"prompt": 0.5, "completion": 2.0},
            supported_features=["json_mode", "reasoning"],
            confidential_compute=True,
        ),
        model_dict(
            "unsloth/gemma-3-27b-it",
            owned_by="vllm",
            max_model_len=None,
            context_length=131072,
            input_modalities=["text", "image"],
            supported_features=["tools"],
        ),
    ]


@pytest.fixture
def models(api_models: List[Dict[str, Any]]) -> List[ChutesModel]:
    """Parsed models."""
    return [ChutesModel.from_dict(entry) for entry in api_models]


@pytest.fixture
def response_factory() -> Any:
    """Factory building fake HTTP responses."""
    return make_response


@pytest.fixture
def model_factory() -> Any:
    """Factory building raw model entries."""
    return model_dict
