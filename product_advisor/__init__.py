"""Product Advisor - topic-scoped chat front-end for a remote completion service."""

__version__ = "0.1.0"
