"""toolview: tool-call reconciliation and presentation engine."""

__version__ = "0.1.0"
