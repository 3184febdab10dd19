"""Verify that a pull request references a linked issue-tracker ticket."""

__version__ = "0.1.0"
