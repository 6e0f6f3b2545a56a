"""
Multi-agent collaboration service.

This package contains:
- shared/: Common infrastructure (completion service, logging, contracts, schemas)
- roster/: Agent personas, roster assembly and agent generation
- decomposition/: Task decomposer turning a request into per-agent assignments
- collaboration/: Collaboration aggregate, context windowing and run service
- graph/: LangGraph pipeline (decompose -> planning -> execution -> integration)
- events/: Progress events, the emitter channel and SSE framing
- storage/: Keyed state stores (in-memory and JSON files)
"""

from agentcollab.graph.build import create_pipeline_graph, run_pipeline

__all__ = ["create_pipeline_graph", "run_pipeline"]
