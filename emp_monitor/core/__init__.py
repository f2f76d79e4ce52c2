from .fixed_point import FIXED_POINT_SCALE, is_undercollateralized, to_fixed_point

__all__ = ["FIXED_POINT_SCALE", "is_undercollateralized", "to_fixed_point"]
