"""
Tests for the brand analysis LangGraph workflow with fake providers.
"""

import logging

from agents.brand_analysis_agent import run_brand_analysis_workflow
from agents.brand_analysis_agent.graph import get_brand_analysis_graph
from src.controllers.brand_analysis_controller import run_analysis

from fakes import FailingProvider, FakeProvider


def ranking_reply(prompt):
    return "Top picks:\n1. Acme - the best option\n2. Beta - limited features\n3. Delta"


class TestBrandAnalysisWorkflow:

    def test_graph_is_cached(self):
        assert get_brand_analysis_graph() is get_brand_analysis_graph()

    def test_end_to_end(self, brand, competitors):
        chatgpt = FakeProvider("openai", "ChatGPT", "gpt-4o-mini", reply_fn=ranking_reply)
        claude = FakeProvider("anthropic", "Claude", "claude-3-haiku", reply="No opinion.")

        result = run_brand_analysis_workflow(brand, competitors, [chatgpt, claude])

        assert result.brand == brand
        assert len(result.ai_provider_responses) == 6
        assert result.analysis_metadata.providers_queried == ["ChatGPT", "Claude"]
        assert result.analysis_metadata.total_prompts_analyzed == 6
        assert result.overall_visibility_score == 50

        first = result.ai_provider_responses[0]
        assert first.brand_position == 1
        assert first.prompt.startswith("What are the top 5 companies")

        beta, gamma, delta = result.competitor_comparison
        assert (beta.mention_count, beta.visibility_score, beta.average_position) == (3, 50, 2)
        assert (gamma.mention_count, gamma.visibility_score, gamma.average_position) == (0, 0, 0)
        assert delta.average_position == 3

    def test_token_cap_and_prompt_cap_are_forwarded(self, brand):
        provider = FakeProvider(reply="acme")

        result = run_brand_analysis_workflow(brand, [], [provider], max_tokens=321, prompts_per_provider=2)

        assert len(result.ai_provider_responses) == 2
        assert provider.calls[0][1] == 321

    def test_progress_callback(self, brand, competitors):
        events = []

        run_brand_analysis_workflow(
            brand,
            competitors,
            [FakeProvider()],
            progress_callback=lambda step, status, message: events.append((step, status))
        )

        assert events == [
            ("prompts", "completed"),
            ("providers", "completed"),
            ("aggregate", "completed"),
        ]

    def test_one_provider_failing_everywhere(self, brand, competitors):
        broken = FailingProvider()
        healthy = FakeProvider(reply="acme.com")

        result = run_brand_analysis_workflow(brand, competitors, [broken, healthy])

        assert [r.confidence for r in result.ai_provider_responses[:3]] == [0, 0, 0]
        assert result.overall_visibility_score == 50


class TestRunAnalysis:

    def test_progress_is_logged(self, brand, competitors, caplog):
        provider = FakeProvider("openai", "ChatGPT", "gpt-4o-mini", reply="acme.com is great")

        with caplog.at_level(logging.INFO, logger="src.controllers.brand_analysis_controller"):
            result = run_analysis(brand, competitors, [provider])

        assert result.demo is False
        messages = [r.getMessage() for r in caplog.records if r.name == "src.controllers.brand_analysis_controller"]
        assert "[prompts] completed: Generated 8 prompts" in messages
        assert "[providers] completed: Collected 3 responses" in messages
        assert "[aggregate] completed: Analysis complete" in messages

    def test_demo_without_providers(self, brand, competitors):
        assert run_analysis(brand, competitors, []).demo is True
