"""HTTP services: search gateway, LLM gateway and answer agent."""
