"""Unit tests for non-streaming reply normalization."""

import pytest
from pydantic import ValidationError

from studio_chat.client.response import normalize_response
from studio_chat.models.schemas import (
    DEFAULT_THOUGHT_TITLE,
    OrchestratorRequest,
    ReasoningLayer,
    Role,
)


class TestNormalizeResponse:
    """Tests for normalize_response."""

    def test_legacy_thought_becomes_one_layer(self) -> None:
        entry = normalize_response({"response": "ok", "thought": "reasoning"})

        assert entry.role is Role.AGENT
        assert entry.content == "ok"
        assert len(entry.reasoning_layers) == 1
        assert entry.reasoning_layers[0].content == "reasoning"
        assert entry.reasoning_layers[0].title == DEFAULT_THOUGHT_TITLE

    def test_thoughts_take_precedence_over_thought(self) -> None:
        document = {
            "response": "ok",
            "thought": "ignored",
            "thoughts": [
                {"id": "1", "title": "Planner", "content": "plan", "expanded": True},
                {"id": "2", "title": "Memory", "content": "recall"},
            ],
        }

        entry = normalize_response(document)

        assert [layer.title for layer in entry.reasoning_layers] == ["Planner", "Memory"]

    def test_no_reasoning(self) -> None:
        entry = normalize_response({"response": "plain"})

        assert entry.reasoning_layers is None
        assert entry.is_error is False

    def test_empty_thought_adds_no_layer(self) -> None:
        assert normalize_response({"response": "x", "thought": ""}).reasoning_layers is None

    def test_missing_response_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            normalize_response({"thought": "only"})

    def test_non_object_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            normalize_response(["not", "an", "object"])

    def test_reasoning_layers_are_immutable(self) -> None:
        layer = normalize_response({"response": "x", "thought": "t"}).reasoning_layers[0]

        with pytest.raises(ValidationError):
            layer.content = "changed"
        assert isinstance(layer, ReasoningLayer)


class TestOrchestratorRequest:
    """Tests for the outbound request body."""

    def test_unset_fields_are_omitted(self) -> None:
        body = OrchestratorRequest(prompt="hi", stream=True).model_dump(exclude_none=True)

        assert body == {"prompt": "hi", "stream": True}

    def test_empty_prompt_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OrchestratorRequest(prompt="", stream=False)
