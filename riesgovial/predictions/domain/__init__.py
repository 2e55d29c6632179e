"""
Domain module initialization.
"""
from .filters import matches_filters, hour_component
from .protocols import PredictionFeed, EventPublisher
