"""
LangGraph workflow definition for brand analysis.

START → generate_prompts → query_providers → aggregate → END
"""

from typing import Callable, List, Optional, Sequence

from langgraph.graph import StateGraph, START, END

from agents.brand_analysis_agent.models import BrandAnalysisState
from agents.brand_analysis_agent.nodes import (
    generate_prompts,
    query_providers,
    aggregate
)
from agents.provider_dispatcher import MAX_TOKENS, PROMPTS_PER_PROVIDER
from models.schemas import BrandAnalysisResult


# Singleton graph instance
_graph = None


def create_brand_analysis_graph():
    """Create the LangGraph workflow for brand analysis."""
    workflow = StateGraph(BrandAnalysisState)

    # Add nodes
    workflow.add_node("generate_prompts", generate_prompts)
    workflow.add_node("query_providers", query_providers)
    workflow.add_node("aggregate", aggregate)

    # Define edges (workflow)
    workflow.add_edge(START, "generate_prompts")
    workflow.add_edge("generate_prompts", "query_providers")
    workflow.add_edge("query_providers", "aggregate")
    workflow.add_edge("aggregate", END)

    return workflow.compile()


def get_brand_analysis_graph():
    """Get or create the brand analysis graph."""
    global _graph
    if _graph is None:
        _graph = create_brand_analysis_graph()
    return _graph


def run_brand_analysis_workflow(
    brand: str,
    competitors: List[str],
    providers: Sequence,
    max_tokens: int = MAX_TOKENS,
    prompts_per_provider: int = PROMPTS_PER_PROVIDER,
    progress_callback: Optional[Callable[[str, str, str], None]] = None
) -> BrandAnalysisResult:
    """
    Run the brand analysis workflow.

    Entry point for the brand analysis agent.

    Args:
        brand: Normalized brand domain
        competitors: Normalized competitor domains
        providers: Enabled TextGenerationProvider instances
        max_tokens: Output length cap for every call
        prompts_per_provider: Leading prompts sent to each provider
        progress_callback: Optional callback(step, status, message)

    Returns:
        BrandAnalysisResult
    """
    graph = get_brand_analysis_graph()

    initial_state: BrandAnalysisState = {
        "brand": brand,
        "competitors": list(competitors),
        "providers": list(providers),
        "max_tokens": max_tokens,
        "prompts_per_provider": prompts_per_provider,
        "prompts": [],
        "responses": [],
        "result": None
    }

    result = None

    for step_output in graph.stream(initial_state):
        node_name = list(step_output.keys())[0]
        update = step_output[node_name] or {}

        if node_name == "aggregate":
            result = update.get("result")

        if progress_callback:
            if node_name == "generate_prompts":
                progress_callback("prompts", "completed", f"Generated {len(update.get('prompts', []))} prompts")
            elif node_name == "query_providers":
                progress_callback("providers", "completed", f"Collected {len(update.get('responses', []))} responses")
            elif node_name == "aggregate":
                progress_callback("aggregate", "completed", "Analysis complete")

    return result
