"""AI study partner: study chat and quiz generation backed by Gemini."""

__version__ = "0.1.0"
