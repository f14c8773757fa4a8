"""Local health twin: timeline, medication adherence and rule-based risk scoring.

This package contains the business logic and domain models,
isolated from storage and notification backends for easy testing and reasoning.
"""

__version__ = "0.1.0"
