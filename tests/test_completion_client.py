"""Tests for the Anthropic completion wrapper."""

import anthropic
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from bridgeyou.config import CompletionConfig
from bridgeyou.error_handling import CompletionError
from bridgeyou.services.llm import CompletionClient, extract_json_block


def make_sdk(text=None, error=None, content=None):
    sdk = MagicMock()
    if error is not None:
        sdk.messages.create = AsyncMock(side_effect=error)
    else:
        blocks = content if content is not None else [MagicMock(text=text)]
        sdk.messages.create = AsyncMock(return_value=MagicMock(content=blocks))
    return sdk


def test_from_config_without_key_returns_none():
    assert CompletionClient.from_config(CompletionConfig(api_key=None)) is None


def test_constructor_requires_key_or_client():
    with pytest.raises(CompletionError):
        CompletionClient(CompletionConfig(api_key=None))


@pytest.mark.asyncio
async def test_complete_returns_stripped_text():
    sdk = make_sdk(text="  {\"searchTerms\": []}\n")
    client = CompletionClient(CompletionConfig(api_key="k", model="claude-test", max_tokens=500), client=sdk)

    text = await client.complete(system="sys", prompt="hello", temperature=0.3)

    assert text == "{\"searchTerms\": []}"
    kwargs = sdk.messages.create.await_args.kwargs
    assert kwargs["model"] == "claude-test"
    assert kwargs["max_tokens"] == 500
    assert kwargs["system"] == "sys"
    assert kwargs["messages"] == [{"role": "user", "content": "hello"}]


@pytest.mark.asyncio
async def test_api_errors_become_completion_errors():
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    sdk = make_sdk(error=anthropic.APIConnectionError(request=request))
    client = CompletionClient(CompletionConfig(api_key="k"), client=sdk)

    with pytest.raises(CompletionError):
        await client.complete(system="sys", prompt="hello", temperature=0.3)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [[], [MagicMock(text="   ")]])
async def test_empty_responses_are_errors(content):
    client = CompletionClient(CompletionConfig(api_key="k"), client=make_sdk(content=content))

    with pytest.raises(CompletionError):
        await client.complete(system="sys", prompt="hello", temperature=0.3, max_tokens=50)


@pytest.mark.parametrize("text, expected", [
    ("```json\n{\"a\": 1}\n```", "{\"a\": 1}"),
    ("```\n[\"x\"]\n```", "[\"x\"]"),
    ("  {\"a\": 1}  ", "{\"a\": 1}"),
])
def test_extract_json_block(text, expected):
    assert extract_json_block(text) == expected
