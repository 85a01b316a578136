"""Adapters for the external collaborators: processes and HTTP targets."""

from .http import make_timed_request
from .process import describe_command, run_command

__all__ = ["describe_command", "make_timed_request", "run_command"]
