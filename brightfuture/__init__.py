"""Bright Future Planner: youth drug-prevention survey with an LLM-written future report."""

__version__ = "0.1.0"
