"""Prompt templates for the advisory client. Inputs are rendered as JSON at call time."""

import json
from typing import Optional

ANALYSIS_SYSTEM = (
    "You are a disaster management expert AI. "
    "Provide precise, actionable insights for emergency response coordination."
)

PREDICTION_SYSTEM = "You are a disaster prediction specialist. Provide accurate, data-driven predictions."

ANALYSIS_TEMPLATE = """
You are an expert disaster management AI assistant. Analyze the following real-time disaster data and provide comprehensive insights:

INCIDENTS DATA:
{incidents}

RESOURCES DATA:
{resources}

WEATHER DATA:
{weather}

Please provide a structured analysis in the following JSON format:
{{
  "riskAssessment": {{
    "overallRisk": "low|medium|high|critical",
    "score": 0-100,
    "factors": ["factor1", "factor2", ...]
  }},
  "recommendations": {{
    "immediate": ["action1", "action2", ...],
    "shortTerm": ["action1", "action2", ...],
    "longTerm": ["action1", "action2", ...]
  }},
  "resourceAllocation": {{
    "priority": ["resource1", "resource2", ...],
    "suggestions": ["suggestion1", "suggestion2", ...]
  }},
  "summary": "Comprehensive summary of the situation and key insights"
}}

Focus on:
1. Risk level assessment based on incident severity and patterns
2. Resource deployment efficiency
3. Preventive measures
4. Emergency response optimization
5. Geographic distribution of incidents

Respond with only the JSON object. No markdown code fences.
"""

PREDICTION_TEMPLATE = """
Based on historical disaster data and current conditions, predict potential disaster scenarios:

Historical Data: {history}
Current Conditions: {conditions}

Provide a detailed prediction report focusing on:
1. Likelihood of specific disaster types
2. Geographical areas at risk
3. Timeline for potential events
4. Preventive measures
"""


def _render(value) -> str:
    return json.dumps(value, indent=2, default=str)


def build_analysis_prompt(incidents: list[dict], resources: list[dict], weather: Optional[dict]) -> str:
    return ANALYSIS_TEMPLATE.format(
        incidents=_render(incidents),
        resources=_render(resources),
        weather=_render(weather) if weather else "Not available",
    )


def build_prediction_prompt(history, conditions) -> str:
    return PREDICTION_TEMPLATE.format(history=_render(history), conditions=_render(conditions))
