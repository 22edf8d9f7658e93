"""Tests for the prettify orchestration service."""

import asyncio
from contextlib import aclosing

import pytest

from prettify.application.prettify_service import EMPTY_JSON, PrettifyService
from prettify.domain.exceptions import UpstreamAuthError, UpstreamError
from tests._helpers.fakes import TEST_MODEL, FakeModelClient

pytestmark = pytest.mark.asyncio


async def collect(stream):
    return [chunk async for chunk in stream]


class TestPrettify:
    async def test_returns_model_response_verbatim(self, service, fake_client):
        fake_client.response = '{"type": "code", "output": "x = 1"}'

        result = await service.prettify("x=1")

        assert result == '{"type": "code", "output": "x = 1"}'

    async def test_substitutes_input_and_passes_model(self, service, fake_client):
        await service.prettify("some text")

        prompt, model = fake_client.calls[0]
        assert prompt.endswith("\nsome text")
        assert '{"output": ...}' in prompt
        assert model == TEST_MODEL

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    async def test_blank_input_returns_empty_object(self, service, fake_client, text):
        assert await service.prettify(text) == EMPTY_JSON
        assert fake_client.calls == []

    @pytest.mark.parametrize(
        "error",
        [
            UpstreamAuthError("bad key", 401),
            UpstreamError("boom"),
            RuntimeError("unexpected"),
            ValueError("odd"),
        ],
    )
    async def test_client_failure_returns_empty_object(self, template, error):
        service = PrettifyService(FakeModelClient(error=error), template)

        assert await service.prettify("hello") == "{}"

    async def test_concurrent_calls_do_not_interfere(self, template):
        client = FakeModelClient(echo=True)
        service = PrettifyService(client, template)
        inputs = [f"input-{i}" for i in range(20)]

        results = await asyncio.gather(*(service.prettify(text) for text in inputs))

        for text, result in zip(inputs, results):
            assert result == template.render(text)
        assert template.text.endswith("{input}")


class TestPrettifyStream:
    async def test_yields_chunks_in_order(self, service, fake_client):
        fake_client.chunks = ['{"out', 'put": "a', "b", 'c"}']

        chunks = await collect(service.prettify_stream("abc"))

        assert chunks == ['{"out', 'put": "a', "b", 'c"}']
        assert fake_client.stream_calls[0][0].endswith("\nabc")

    async def test_empty_chunks_are_suppressed(self, service, fake_client):
        fake_client.chunks = ["", "a", "", "b", ""]

        assert await collect(service.prettify_stream("x")) == ["a", "b"]

    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_blank_input_yields_nothing(self, service, fake_client, text):
        assert await collect(service.prettify_stream(text)) == []
        assert fake_client.stream_calls == []

    async def test_each_call_opens_a_fresh_stream(self, service, fake_client):
        await collect(service.prettify_stream("one"))
        await collect(service.prettify_stream("two"))

        assert len(fake_client.stream_calls) == 2

    async def test_upstream_error_propagates_after_chunks(self, template):
        client = FakeModelClient(chunks=["a", "b"], stream_error=UpstreamError("reset"))
        service = PrettifyService(client, template)
        received = []

        with pytest.raises(UpstreamError):
            async for chunk in service.prettify_stream("x"):
                received.append(chunk)

        assert received == ["a", "b"]

    async def test_closing_consumer_closes_upstream(self, service, fake_client):
        fake_client.chunks = ["a", "b", "c", "d"]
        stream = service.prettify_stream("x")

        assert await stream.__anext__() == "a"
        await stream.aclose()

        assert fake_client.stream_closed
        assert fake_client.chunks_sent == 1

    async def test_cancellation_stops_upstream_consumption(self, service, fake_client):
        fake_client.chunks = [str(i) for i in range(1000)]
        first_chunk = asyncio.Event()

        async def consume():
            async with aclosing(service.prettify_stream("x")) as stream:
                async for _ in stream:
                    first_chunk.set()
                    await asyncio.sleep(0)

        task = asyncio.create_task(consume())
        await first_chunk.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert fake_client.stream_closed
        assert fake_client.chunks_sent < 1000


class TestLifecycle:
    async def test_aclose_closes_client_once(self, service, fake_client):
        await service.aclose()
        await service.aclose()

        assert fake_client.close_count == 1

    async def test_context_manager_closes_client(self, fake_client, template):
        async with PrettifyService(fake_client, template) as service:
            assert await service.prettify("hi") == fake_client.response

        assert fake_client.close_count == 1
