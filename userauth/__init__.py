"""userauth - user accounts, email activation and session authentication over HTTP."""

__version__ = "0.1.0"
