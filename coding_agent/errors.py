"""Failures raised by the agent's tools.

Expected outcomes (an unparseable model reply, a user declining a write or a
plan) are not exceptions; see ``actions.ParseFailure`` and the return values
of the tools.
"""
from __future__ import annotations


class AgentError(Exception):
    """Base class for every failure the agent reports to the user."""


class MalformedAction(AgentError):
    """An action is missing a field its kind requires."""


class FileAccessError(AgentError):
    """A file could not be read or written."""


class CommandRejected(AgentError):
    """A shell command matched the denylist and was never started."""


class CommandFailed(AgentError):
    """A shell command exited non-zero or produced too much output."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class CommandTimeout(CommandFailed):
    """A shell command ran past the configured timeout and was killed."""


class BackupMissing(AgentError):
    """Rollback was requested with no backup recorded."""


class BackupArtifactMissing(AgentError):
    """The most recent backup entry points at a file that no longer exists."""
