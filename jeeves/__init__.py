"""Ask OpenAI a question from the command line."""

__version__ = "0.1.0"
