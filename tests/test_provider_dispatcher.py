"""
Tests for the provider dispatcher. Providers are in-process fakes.
"""

from agents.provider_dispatcher import build_error_response, dispatch_prompts, query_provider
from models.schemas import Sentiment

from fakes import FailingProvider, FakeProvider

PROMPTS = [f"prompt {i}" for i in range(1, 9)]


class TestQueryProvider:

    def test_success_is_analyzed(self, fake_provider, competitors):
        response = query_provider(fake_provider, "prompt", "acme.com", competitors, max_tokens=1000)

        assert response.provider == "FakeGPT"
        assert response.model == "fake-model-1"
        assert response.prompt == "prompt"
        assert response.response == "1. acme.com leads the market"
        assert response.brand_mentioned is True
        assert response.confidence >= 50
        assert fake_provider.calls == [("prompt", 1000)]

    def test_failure_is_degraded(self, failing_provider, competitors):
        response = query_provider(failing_provider, "prompt", "acme.com", competitors)

        assert response.response == "Error: Unable to get response from BrokenAI"
        assert response.brand_mentioned is False
        assert response.brand_position is None
        assert response.sentiment == Sentiment.NEUTRAL
        assert response.confidence == 0
        assert [cm.name for cm in response.competitor_mentions] == competitors
        assert not any(cm.mentioned for cm in response.competitor_mentions)

    def test_unexpected_exception_is_degraded(self, competitors):
        provider = FailingProvider(error=RuntimeError("boom"))

        response = query_provider(provider, "prompt", "acme.com", competitors)

        assert response.confidence == 0

    def test_error_response_shape(self, fake_provider):
        response = build_error_response(fake_provider, "p", ["beta.io"])

        assert response.provider == "FakeGPT"
        assert response.competitor_mentions[0].position is None


class TestDispatchPrompts:

    def test_count_and_order(self, brand, competitors):
        first = FakeProvider("one", "One", "m1", reply="acme.com")
        second = FakeProvider("two", "Two", "m2", reply="nothing")

        responses = dispatch_prompts([first, second], PROMPTS, brand, competitors)

        assert len(responses) == 2 * 3
        assert [r.provider for r in responses] == ["One"] * 3 + ["Two"] * 3
        assert [r.prompt for r in responses] == PROMPTS[:3] * 2
        assert [call[0] for call in first.calls] == PROMPTS[:3]

    def test_fewer_prompts_than_cap(self, brand, competitors):
        provider = FakeProvider()

        responses = dispatch_prompts([provider], PROMPTS[:2], brand, competitors)

        assert len(responses) == 2

    def test_custom_cap_and_token_limit(self, brand):
        provider = FakeProvider()

        responses = dispatch_prompts([provider], PROMPTS, brand, [], max_tokens=256, prompts_per_provider=5)

        assert len(responses) == 5
        assert all(max_tokens == 256 for _, max_tokens in provider.calls)

    def test_no_providers(self, brand, competitors):
        assert dispatch_prompts([], PROMPTS, brand, competitors) == []

    def test_failure_on_first_prompt_does_not_stop_the_rest(self, brand, competitors):
        flaky = FailingProvider("flaky", "Flaky", "m", fail_on=[1], reply="1. acme.com is great")
        healthy = FakeProvider("ok", "Healthy", "m", reply="acme.com")

        responses = dispatch_prompts([flaky, healthy], PROMPTS, brand, competitors)

        assert len(responses) == 6
        degraded = [r for r in responses if r.confidence == 0]
        assert len(degraded) == 1
        assert degraded[0] is responses[0]
        assert degraded[0].sentiment == Sentiment.NEUTRAL
        assert responses[1].brand_mentioned is True
        assert responses[1].brand_position == 1
        assert responses[2].brand_mentioned is True
        assert all(r.provider == "Healthy" for r in responses[3:])
