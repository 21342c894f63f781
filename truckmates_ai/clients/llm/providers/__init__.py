"""LLM provider implementations; registered lazily by truckmates_ai.clients.llm.registry."""
