"""Simulated feed: seed data, weather source and the tick-driven generator."""

from feed.generator import (
    AssignmentError,
    FeedGenerator,
    GeneratorState,
    ResourceUnavailableError,
    UnknownEntityError,
)
from feed.weather import simulated_weather

__all__ = [
    "AssignmentError",
    "FeedGenerator",
    "GeneratorState",
    "ResourceUnavailableError",
    "UnknownEntityError",
    "simulated_weather",
]
