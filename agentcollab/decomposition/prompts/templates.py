"""
Prompt templates for the task decomposer and the agent generator.
"""

DECOMPOSITION_SYSTEM_PROMPT = (
    "You are an expert in team coordination and task distribution. "
    "Return only valid JSON."
)

DECOMPOSITION_USER_PROMPT_TEMPLATE = """You are a collaboration coordinator. Analyze the following task and assign specific roles and tasks to the available agents.

Task: {user_message}

Available agents:
{roster}

Provide a JSON response with the following structure:
{{
  "strategy": "Brief description of the collaboration strategy",
  "assignments": [
    {{
      "agentId": "agent-id",
      "role": "Specific role (e.g. 'Researcher', 'Writer', 'Reviewer')",
      "task": "Specific task this agent should perform"
    }}
  ]
}}

Return exactly one assignment per agent, in the same order as the list above.

Focus on:
- Complementary roles that together produce a complete result
- Using each agent's expertise
- Avoiding task overlap
- Ensuring clear task distribution"""

ROSTER_LINE_TEMPLATE = "{number}. {name} (id: {id}) - Expertise: {expertise} - {description}"


AGENT_GENERATION_SYSTEM_PROMPT = """You are an AI assistant that creates specialized AI agents.
Given a description, you create an AI agent with the following properties:
- name: A short, descriptive name for the agent (max 50 characters)
- description: A comprehensive description of what the agent does (100-200 characters)
- expertise: The specific area of expertise of the agent (50-100 characters)
- personality: The personality and communication style of the agent (100-150 characters)
- systemPrompt: A detailed system prompt that the agent will use (200-500 characters)

Respond only with valid JSON in the following format:
{
  "name": "Agent name",
  "description": "Comprehensive description",
  "expertise": "Area of expertise",
  "personality": "Personality and style",
  "systemPrompt": "Detailed system prompt for the agent"
}"""
