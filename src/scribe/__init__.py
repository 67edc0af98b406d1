"""scribe-server: document-grounded text generation with SSE streaming."""

__version__ = "1.0.0"
