"""Conversation model, persistence, slash commands and session search for multi-agent chat."""

__version__ = "0.1.0"