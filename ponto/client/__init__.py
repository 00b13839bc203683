from .capture import (
    Position, LocationProvider, Photo, PhotoSource, PointIntent, GeofenceAdvice,
    CaptureClient, retry_bounded,
)

__all__ = [
    "Position", "LocationProvider", "Photo", "PhotoSource", "PointIntent", "GeofenceAdvice",
    "CaptureClient", "retry_bounded",
]
