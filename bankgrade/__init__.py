"""Bank Grade Security: scan bank websites, score them and build a static report site."""

__version__ = "1.0.0"
