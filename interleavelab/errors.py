from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid task set, run options or workload document.

    Raised before any simulation step runs; no partial Timeline is produced.
    """
