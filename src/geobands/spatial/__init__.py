"""
Spatial operations for geobands.

This module groups the grid-space geometry code:

1. **marching_squares**: contour extraction over a Grid
   - isolines, threshold regions (value >= threshold) and isobands
   - one documented saddle rule shared by all three

2. **projection**: the affine mapping between grid space and longitude/latitude
   - exact for fractional crossing points
   - meter to degree step conversion on the WGS84 ellipsoid

For direct access, import from the specific module:
    from geobands.spatial.marching_squares import extract_contours
    from geobands.spatial.projection import project, project_geometry
"""

__all__ = []
