"""codecritic – LLM code review with sectioned report rendering."""

__version__ = "0.1.0"
