"""StyleChat: natural-language editing of MapLibre map styles."""

__version__ = "0.1.0"
