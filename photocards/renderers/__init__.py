"""Image renderers: card compositor, corner rounding and text drawing."""
from .card_renderer import compose_card, render_card
from .corners import Corner, round_corners
from .text import TextRenderer

__all__ = ["Corner", "TextRenderer", "compose_card", "render_card", "round_corners"]
