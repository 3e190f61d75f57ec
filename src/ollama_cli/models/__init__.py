"""
Data models for the Ollama terminal client.
"""
from .conversation import Conversation
from .turn import Turn

__all__ = ["Conversation", "Turn"]
