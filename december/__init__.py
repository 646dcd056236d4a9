"""
December - Coding Assistant Persona
===================================

A chat-based coding assistant that decides, for every incoming request,
whether to implement it, ask for clarification, or explain.

This package provides:
- Request classifier with a static requirement taxonomy
- Output-tag grammar for aggregated change-sets and its validator
- Example catalog loaded into context by keyword match
- Agent that routes requests and talks to the LLM
- Slack surface for conversations
"""

__version__ = "1.0.0"
