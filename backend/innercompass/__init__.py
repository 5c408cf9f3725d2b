"""InnerCompass AI: guided self-reflection with an AI coach."""

__version__ = "0.1.0"
