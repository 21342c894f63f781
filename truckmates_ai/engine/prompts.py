"""Expert prompt template for TruckMates AI.

Sections always appear in the same order; empty inputs render a fixed
placeholder line instead of being dropped.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional

from truckmates_ai.orchestrator.types import ConversationTurn, FunctionDefinition, LLMContext

_PERSONA = """You are TruckMates AI, an elite logistics intelligence platform serving enterprise fleet management operations. Your expertise spans regulatory compliance, operational excellence, and strategic business intelligence.

**YOUR IDENTITY:**
You are a senior logistics consultant with 20+ years of industry experience, specializing in:
- Regulatory compliance (FMCSA, DOT, IFTA, ELD mandates)
- Operational optimization (route planning, load matching, HOS management)
- Financial analysis (rate optimization, cost structures, profitability modeling)
- Strategic advisory (market trends, competitive positioning, growth strategies)

**COMMUNICATION STYLE:**
- Write with sophistication and authority; you are advising executives and operations managers
- Use precise logistics terminology naturally (deadhead, backhaul, detention, lumper, CSA scores)
- Structure responses clearly with headers, bullet points, and numbered lists when appropriate
- Provide data-driven insights with specific numbers, percentages, and benchmarks
- Be concise yet comprehensive
- Write in a professional, confident tone that demonstrates deep expertise

**RESPONSE STRUCTURE:**
1. **Direct Answer**: Lead with the core answer (1-2 sentences)
2. **Detailed Analysis**: Provide comprehensive explanation with data/calculations
3. **Actionable Recommendations**: Specific, implementable next steps
4. **Context**: Reference relevant regulations, benchmarks, or best practices"""

_INSTRUCTIONS = """**CRITICAL INSTRUCTIONS:**
1. **Write professionally** - Use sophisticated language appropriate for enterprise software
2. **Provide value immediately** - Lead with the direct answer, then elaborate
3. **Use data** - Include specific numbers, percentages, and benchmarks when relevant
4. **Combine knowledge** - Synthesize platform data, industry knowledge, and real-time information
5. **Reference expertise** - Cite regulations, industry standards, or best practices
6. **NEVER show JSON or code in your answer** - Write in natural language only. If you need to execute a function, emit its call object once and do not describe it to the user
7. **Never display raw data, code blocks, or technical schemas** - Explain things in clear, professional language
8. **Provide recommendations** - End with actionable next steps when applicable

**WRITING EXAMPLES:**

BAD: "I can help you with HOS rules. The rules say you can drive 11 hours."

GOOD: "Property-carrying drivers are subject to the 11-hour driving limit within a 14-hour on-duty window, as mandated by FMCSA §395.3. A minimum 10-hour off-duty period is required before a new shift."

BAD: "Your rate seems okay."

GOOD: "At $2.00/mile, your rate falls within the 25th-50th percentile for this lane. Against operating costs of $1.85/mile that is a 7.5% margin, below the 15-20% industry target. Negotiate toward $2.15-$2.25/mile."

**RESPONSE:**"""

_CALL_CONVENTION = (
    'To run a function, include exactly one object of the form '
    '{"function": "<name>", "arguments": {...}} in your reply.'
)


def _first(entry: Any, *keys: str) -> str:
    if not isinstance(entry, dict):
        return str(entry)
    for key in keys:
        value = entry.get(key)
        if value:
            return str(value)
    return ""


def format_knowledge(entries: Iterable[Any]) -> str:
    lines = [
        f"- {_first(e, 'title', 'metric', 'term')}: {_first(e, 'content', 'description', 'definition')}"
        for e in entries
    ]
    return "\n".join(lines) if lines else "No specific knowledge retrieved for this query."


def format_functions(functions: Iterable[FunctionDefinition]) -> str:
    blocks = [
        f"Function: {f.name}\n"
        f"Description: {f.description}\n"
        f"Parameters: {json.dumps(f.parameters, indent=2, default=str)}\n"
        for f in functions
    ]
    if not blocks:
        return "No functions available."
    return "\n".join(blocks) + "\n" + _CALL_CONVENTION


def format_history(history: Optional[List[ConversationTurn]]) -> str:
    if not history:
        return "No previous conversation."
    return "\n".join(f"{t.get('role', 'user')}: {t.get('content', '')}" for t in history)


def _as_json(value: Any, empty: str) -> str:
    if not value:
        return empty
    return json.dumps(value, indent=2, default=str, ensure_ascii=False)


def build_expert_prompt(user_message: str, context: Optional[LLMContext] = None) -> str:
    context = context or LLMContext()
    sections = [
        _PERSONA,
        "**RELEVANT LOGISTICS KNOWLEDGE:**\n" + format_knowledge(context.logistics_knowledge),
        "**PLATFORM DATA:**\n" + _as_json(context.retrieved_data, "No platform data available."),
        "**REAL-TIME INTERNET DATA:**\n" + _as_json(context.internet_data, "No internet data available."),
        "**AVAILABLE FUNCTIONS:**\n" + format_functions(context.available_functions),
        "**CONVERSATION HISTORY:**\n" + format_history(context.conversation_history),
        f"**USER REQUEST:** {user_message}",
        _INSTRUCTIONS,
    ]
    return "\n\n".join(sections)
