"""Vocabulary lookup and review backend for Langotron."""

from .environment import load_environment

# Load environment variables from .env-style files as soon as the package is
# imported so the FastAPI app and ad-hoc scripts see the same configuration.
load_environment()

__all__ = ["load_environment"]
