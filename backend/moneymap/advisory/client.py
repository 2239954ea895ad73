"""Chat-completions wrapper that runs tool calls and returns schema-checked output."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel

from moneymap.config import get_settings
from moneymap.core.errors import AdvisoryError, ConfigurationError
from moneymap.schemas.validation import validate_record

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

NOT_CONFIGURED_MESSAGE = "OpenAI API key is not configured"

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass
class AdvisorTool:
    """A function the model may call; ``handler`` receives the decoded arguments."""

    name: str
    description: str
    handler: ToolHandler
    parameters: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "additionalProperties": False}
    )

    def definition(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


def _serialize_tool_result(result: Any) -> str:
    if isinstance(result, BaseModel):
        return result.model_dump_json(by_alias=True)
    if isinstance(result, str):
        return result
    return json.dumps(result, ensure_ascii=False, default=str)


def extract_json_object(content: str | None) -> Any:
    """Parse the model's reply, tolerating prose or code fences around one JSON object."""

    if not content or not content.strip():
        raise AdvisoryError("model returned no output")
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass
    match = _JSON_OBJECT_RE.search(content)
    if match is None:
        raise AdvisoryError("model output contains no JSON object")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise AdvisoryError(f"model output is not valid JSON: {exc.msg}") from exc


class AdvisorClient:
    """Runs one prompt against the chat-completions API, looping through tool calls."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_tool_rounds: int | None = None,
        client: Optional[Any] = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._model = model or settings.openai_model
        self._timeout = timeout or settings.openai_timeout_seconds
        self._max_tool_rounds = max_tool_rounds or settings.openai_max_tool_rounds
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _openai(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    async def _run_tool(self, call: Any, tools: dict[str, AdvisorTool]) -> str:
        name = call.function.name
        tool = tools.get(name)
        if tool is None:
            logger.warning("Model requested unknown tool %s", name)
            return json.dumps({"error": f"unknown tool {name}"})
        try:
            arguments = json.loads(call.function.arguments or "{}")
            if not isinstance(arguments, dict):
                arguments = {}
            result = await tool.handler(arguments)
        except Exception as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return json.dumps({"error": str(exc) or type(exc).__name__})
        logger.info("Tool %s completed", name)
        return _serialize_tool_result(result)

    async def generate(
        self,
        *,
        name: str,
        prompt: str,
        output_model: type[ModelT],
        system: str | None = None,
        tools: Sequence[AdvisorTool] = (),
    ) -> ModelT:
        """Send ``prompt`` and return the reply validated as ``output_model``."""

        client = self._openai()
        messages: list[dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": name, "schema": output_model.model_json_schema(), "strict": False},
        }
        tools_by_name = {tool.name: tool for tool in tools}
        logger.info("Advisor prompt %s (%d tools)", name, len(tools_by_name))
        logger.debug("Advisor prompt %s body: %s", name, prompt)

        for round_number in range(self._max_tool_rounds + 1):
            request: dict[str, Any] = {
                "model": self._model,
                "messages": messages,
                "response_format": response_format,
            }
            # The last round withholds tools so the model has to answer.
            if tools_by_name and round_number < self._max_tool_rounds:
                request["tools"] = [tool.definition() for tool in tools_by_name.values()]
            try:
                completion = await client.chat.completions.create(**request)
            except Exception as exc:
                logger.exception("Advisor call %s failed", name)
                raise AdvisoryError(f"model request failed: {exc}") from exc
            if not completion.choices:
                raise AdvisoryError("model returned no choices")
            message = completion.choices[0].message
            tool_calls = getattr(message, "tool_calls", None) or []
            if not tool_calls:
                data = extract_json_object(message.content)
                return validate_record(f"advice.{name}", output_model, data)

            messages.append(
                {
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {"name": call.function.name, "arguments": call.function.arguments},
                        }
                        for call in tool_calls
                    ],
                }
            )
            for call in tool_calls:
                messages.append(
                    {"role": "tool", "tool_call_id": call.id, "content": await self._run_tool(call, tools_by_name)}
                )
        raise AdvisoryError(f"model kept calling tools after {self._max_tool_rounds} rounds")


@lru_cache(maxsize=1)
def get_advisor_client() -> AdvisorClient:
    return AdvisorClient()


__all__ = [
    "AdvisorClient",
    "AdvisorTool",
    "NOT_CONFIGURED_MESSAGE",
    "extract_json_object",
    "get_advisor_client",
]
