"""Builder Chat Server: session-scoped chat endpoint for the AI app builder assistant."""

__version__ = "0.1.0"
