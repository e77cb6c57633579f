"""
Llama Gateway

Serves a single locally hosted language model behind OpenAI-compatible
and Claude-compatible HTTP endpoints.
"""

__version__ = "1.0.0"
