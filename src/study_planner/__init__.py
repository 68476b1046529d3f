"""Study planner: local task store with an AI study assistant."""

__version__ = "0.1.0"
