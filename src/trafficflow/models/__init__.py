"""trafficflow data models."""

from trafficflow.models.route import ComputeRoutesResponse, Route, TravelAdvisory, parse_duration_seconds
from trafficflow.models.sample import (
    FlowConfidence,
    FlowEstimationModel,
    FlowMetrics,
    TrafficSample,
    WeatherSnapshot,
)
from trafficflow.models.segment import (
    DIRECTIONS,
    BPRCoefficients,
    Coordinate,
    Direction,
    Segment,
    SegmentMetadata,
)
from trafficflow.models.weather import CurrentWeather, describe_weather_code

__all__ = [
    "BPRCoefficients",
    "ComputeRoutesResponse",
    "Coordinate",
    "CurrentWeather",
    "DIRECTIONS",
    "Direction",
    "FlowConfidence",
    "FlowEstimationModel",
    "FlowMetrics",
    "Route",
    "Segment",
    "SegmentMetadata",
    "TrafficSample",
    "TravelAdvisory",
    "WeatherSnapshot",
    "describe_weather_code",
    "parse_duration_seconds",
]
