"""
Terminal client for an Ollama inference server.
"""

__version__ = "0.1.0"
