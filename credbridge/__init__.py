"""Local credential bridge serving instance-metadata style tokens."""

__version__ = "0.1.0"
