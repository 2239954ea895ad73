"""Advisor client tests with a fake chat-completions client."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from moneymap.advisory.client import AdvisorClient, AdvisorTool, extract_json_object
from moneymap.core.errors import AdvisoryError, ConfigurationError, SchemaValidationError
from moneymap.schemas.advisory import FinancialAdvice

ADVICE = {"recommendations": ["Build an emergency fund"], "idealAssetTypes": ["Index funds"], "humor": "Budget first."}


def _message(content=None, tool_calls=None):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content, tool_calls=tool_calls))])


def _tool_call(call_id: str, name: str, arguments: str = "{}"):
    return SimpleNamespace(id=call_id, function=SimpleNamespace(name=name, arguments=arguments))


class FakeCompletions:
    def __init__(self, replies):
        self._replies = list(replies)
        self.requests: list[dict] = []

    async def create(self, **request):
        self.requests.append(request)
        return self._replies.pop(0)


def _advisor(replies, **kwargs):
    completions = FakeCompletions(replies)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return AdvisorClient(api_key="sk-test", model="test-model", client=fake, **kwargs), completions


@pytest.mark.asyncio
async def test_runs_tool_calls_then_validates_answer():
    calls: list[dict] = []

    async def net_worth(arguments):
        calls.append(arguments)
        return {"totalNetWorth": "290753"}

    tool = AdvisorTool(name="fetchNetWorth", description="net worth", handler=net_worth)
    advisor, completions = _advisor([_message(tool_calls=[_tool_call("call_1", "fetchNetWorth")]), _message(json.dumps(ADVICE))])

    advice = await advisor.generate(name="financial_advice", prompt="Advise me", output_model=FinancialAdvice, tools=[tool])

    assert advice.ideal_asset_types == ["Index funds"]
    assert calls == [{}]
    first, second = completions.requests
    assert first["tools"][0]["function"]["name"] == "fetchNetWorth"
    assert first["response_format"]["json_schema"]["name"] == "financial_advice"
    tool_message = second["messages"][-1]
    assert tool_message["role"] == "tool"
    assert tool_message["tool_call_id"] == "call_1"
    assert json.loads(tool_message["content"]) == {"totalNetWorth": "290753"}


@pytest.mark.asyncio
async def test_tool_failure_is_reported_to_the_model():
    async def broken(arguments):
        raise RuntimeError("aggregator down")

    tool = AdvisorTool(name="fetchCreditReport", description="credit", handler=broken)
    advisor, completions = _advisor([_message(tool_calls=[_tool_call("c1", "fetchCreditReport")]), _message(json.dumps(ADVICE))])

    await advisor.generate(name="financial_advice", prompt="Advise me", output_model=FinancialAdvice, tools=[tool])

    assert json.loads(completions.requests[1]["messages"][-1]["content"]) == {"error": "aggregator down"}


@pytest.mark.asyncio
async def test_last_round_withholds_tools():
    async def handler(arguments):
        return "ok"

    tool = AdvisorTool(name="fetchNetWorth", description="net worth", handler=handler)
    advisor, completions = _advisor(
        [_message(tool_calls=[_tool_call("c1", "fetchNetWorth")]), _message(json.dumps(ADVICE))],
        max_tool_rounds=1,
    )

    await advisor.generate(name="financial_advice", prompt="Advise me", output_model=FinancialAdvice, tools=[tool])

    assert "tools" in completions.requests[0]
    assert "tools" not in completions.requests[1]


@pytest.mark.asyncio
async def test_output_violating_schema_is_rejected():
    advisor, _ = _advisor([_message(json.dumps({"recommendations": "not a list"}))])

    with pytest.raises(SchemaValidationError) as excinfo:
        await advisor.generate(name="financial_advice", prompt="Advise me", output_model=FinancialAdvice)

    assert excinfo.value.domain == "advice.financial_advice"


@pytest.mark.asyncio
async def test_empty_output_is_an_advisory_error():
    advisor, _ = _advisor([_message("")])

    with pytest.raises(AdvisoryError):
        await advisor.generate(name="financial_advice", prompt="Advise me", output_model=FinancialAdvice)


@pytest.mark.asyncio
async def test_missing_key_is_a_configuration_error():
    advisor = AdvisorClient(api_key="")

    assert advisor.is_configured is False
    with pytest.raises(ConfigurationError):
        await advisor.generate(name="financial_advice", prompt="Advise me", output_model=FinancialAdvice)


def test_extract_json_object_tolerates_code_fences():
    assert extract_json_object('```json\n{"humor": "ok"}\n```') == {"humor": "ok"}
    with pytest.raises(AdvisoryError):
        extract_json_object("no json here")
