"""HTTP gateway for the nissy command-line solver."""

__version__ = "0.1.0"
