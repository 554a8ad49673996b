"""
Brand Analysis Agent

A LangGraph workflow running the visibility pipeline:
prompt generation -> provider dispatch -> aggregation.
"""

from agents.brand_analysis_agent.graph import run_brand_analysis_workflow


__all__ = ["run_brand_analysis_workflow"]
