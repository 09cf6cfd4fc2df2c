"""LLM tooling: prompt templates, lexical retrieval and composable step chains."""

__version__ = "1.0.0"
