# meal_recommender/errors.py
"""
Exception types raised by the recommendation engine.

Safety and dietary rejections are never exceptions; they are counted
outcomes. Only structurally invalid requests and storage failures
surface as errors.
"""


class RecommenderError(Exception):
    """Base class for recommendation engine errors."""


class InvalidRequestError(RecommenderError, ValueError):
    """A required request input is missing or malformed."""


class StoreError(RecommenderError):
    """A bandit or history store could not be read or written."""
