"""
Collaboration pipeline graph.

Sequences the fixed phases over one collaboration:
    decompose -> planning -> execution (fan-out/fan-in) -> integration -> done
"""

from agentcollab.graph.build import create_pipeline_graph, run_pipeline
from agentcollab.graph.config import PipelineConfig, get_config
from agentcollab.graph.runtime import PipelineRuntime

__all__ = [
    "create_pipeline_graph",
    "run_pipeline",
    "PipelineConfig",
    "get_config",
    "PipelineRuntime",
]
