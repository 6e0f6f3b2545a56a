"""Node functions for the collaboration graph."""

from agentcollab.graph.nodes.planning import decompose_node, planning_node
from agentcollab.graph.nodes.execution import execution_node
from agentcollab.graph.nodes.integration import integration_node

__all__ = ["decompose_node", "planning_node", "execution_node", "integration_node"]
