from .normalize import normalize_chart_data, normalize_ordered, series_from_frame

__all__ = ["normalize_chart_data", "normalize_ordered", "series_from_frame"]
