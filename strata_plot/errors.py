from __future__ import annotations


class ChartError(Exception):
    """Base class for errors that abort a render before anything is drawn."""


class NotEnoughData(ChartError):
    pass


class ContainerTooSmall(ChartError):
    def __init__(self, message: str = "This container is too small to render the visualization") -> None:
        super().__init__(message)


class PlotDataError(ChartError, ValueError):
    """Malformed input handed to a pipeline stage or to the payload adapter."""
