from .engine import ComparableFilter, ComparableFilterConfig, FilterResult

__all__ = ["ComparableFilter", "ComparableFilterConfig", "FilterResult"]
