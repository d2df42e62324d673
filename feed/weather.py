"""Simulated weather source. Values are random but stay within plausible fixed bounds."""

from core.models import WeatherSample

CONDITIONS = ["Clear", "Cloudy", "Rainy", "Stormy"]

# (low, high) per field
BOUNDS = {
    "temperature": (15.0, 25.0),
    "humidity": (60.0, 90.0),
    "wind_speed": (10.0, 30.0),
    "visibility": (8.0, 15.0),
    "pressure": (1010.0, 1030.0),
}


def simulated_weather(rng) -> WeatherSample:
    values = {name: rng.uniform(lo, hi) for name, (lo, hi) in BOUNDS.items()}
    return WeatherSample(condition=rng.choice(CONDITIONS), **values)
