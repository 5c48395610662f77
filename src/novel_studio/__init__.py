"""Novel Studio - chapters, characters and plot points for long-form fiction."""

__version__ = "0.1.0"
