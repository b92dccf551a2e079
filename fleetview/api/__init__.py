from .client import FetchFailure, MonitorApiClient

__all__ = [
    "FetchFailure",
    "MonitorApiClient",
]
