"""
Line grid configuration settings.
"""

from pydantic_settings import BaseSettings


class GridSettings(BaseSettings):
    """Geometry and timing settings for the line grid."""

    # Grid settings
    line_height_px: int = 30
    surface_width_px: float = 800.0

    # Insertion control
    anchor_affordance_height_px: int = 24

    # Row lookup
    linear_scan_threshold: int = 16

    # Alignment guides
    guide_row_minimum: int = 100

    # Deferred caret placement (0 = next event loop pass)
    caret_placement_delay_ms: int = 0

    log_level: str = "INFO"

    class Config:
        env_prefix = "LINEGRID_"
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = GridSettings()
