"""Murmur - a chat widget with a typewriter reply."""

from .conversation import Conversation, Phase, RenderState, Speaker, Turn
from .formatter import format_reply
from .typewriter import Typewriter

__version__ = "0.1.0"

__all__ = ["Conversation", "Phase", "RenderState", "Speaker", "Turn", "Typewriter", "format_reply"]
