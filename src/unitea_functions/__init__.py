"""UniTea serverless functions: moderated content creation and admin actions."""

__version__ = "0.1.0"
