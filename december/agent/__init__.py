"""
Agent System
============

The agent turns a user message into a reply:
1. Classifies the request (implement, clarify, explain)
2. Assembles context (persona, instructions, assumptions, examples)
3. Calls the LLM when the disposition needs it
4. Checks the reply against the output conventions

This module provides:
- Agent: Main agent class for processing requests
- ContextAssembler: Builds context for the LLM
- render_clarification / render_assumptions: Replies built without the LLM
"""

from december.agent.core import Agent
from december.agent.context import ContextAssembler, render_assumptions, render_clarification

__all__ = ["Agent", "ContextAssembler", "render_assumptions", "render_clarification"]
