"""Ship the delta between two git branches as a pull or merge request."""

__version__ = "0.1.0"
