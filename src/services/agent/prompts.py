"""Prompt templates for sub-query planning and answer synthesis."""

PLANNING_PROMPT = """You are a research planner. Decide which web searches are needed to answer the user's question.
Break broad or multi-part questions into several specific searches; a simple question may need only one.
{history_block}
Question: {query}

Respond with only a JSON array. Each element must be an object with two string fields:
- "query": a specific web search query
- "reason": why this search helps answer the question

Example:
[
  {{"query": "population of Tokyo 2024", "reason": "Find the current population figure"}}
]"""

ANSWER_PROMPT = """Based on the search results for each sub-query, please answer this question: {query}
{history_block}
Format your response in markdown.
When citing sources, use markdown links with the source number, like this: [[Source 1]](source1-url)
Make important points and section headers bold using markdown (**text**).
Use bullet points where appropriate.
For mathematical formulas, use these formats:
- Inline math: $formula$
- Block math: $$formula$$
Write formulas directly without \\text{{}} commands.
Organize your answer by sub-query, covering what each search found."""

SINGLE_SHOT_PROMPT = """Based on the search results, please answer this question: {query}
{history_block}
Format your response in markdown.
When citing sources, use markdown links with the source number, like this: [[Source 1]](source1-url)
Make important points and section headers bold using markdown (**text**).
Use bullet points where appropriate.
For mathematical formulas, use these formats:
- Inline math: $formula$
- Block math: $$formula$$
Write formulas directly without \\text{{}} commands."""


def history_section(history_block: str) -> str:
    """Wrap formatted Q/A pairs for embedding in a prompt, or nothing."""
    if not history_block:
        return ""
    return f"\nPrevious conversation (most recent last):\n{history_block}\n"


def build_planning_prompt(query: str, history_block: str = "") -> str:
    return PLANNING_PROMPT.format(query=query, history_block=history_section(history_block))


def build_answer_prompt(query: str, history_block: str = "") -> str:
    return ANSWER_PROMPT.format(query=query, history_block=history_section(history_block))


def build_single_shot_prompt(query: str, history_block: str = "") -> str:
    return SINGLE_SHOT_PROMPT.format(query=query, history_block=history_section(history_block))
