"""Use cases for the email digest pipeline."""

from .dispatcher import DigestDispatcher, DigestSendError, SweepResult

__all__ = ["DigestDispatcher", "DigestSendError", "SweepResult"]
