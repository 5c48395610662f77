"""Schema module - data model definitions"""
from .story import (
    PLOT_TYPE_ORDER,
    Chapter,
    Character,
    CharacterRole,
    EditorStats,
    PlotPoint,
    PlotPointType,
    ProjectStats,
    Settings,
    format_timestamp,
    generate_id,
    parse_timestamp,
    utc_now,
)

__all__ = [
    "PLOT_TYPE_ORDER",
    "Chapter",
    "Character",
    "CharacterRole",
    "EditorStats",
    "PlotPoint",
    "PlotPointType",
    "ProjectStats",
    "Settings",
    "format_timestamp",
    "generate_id",
    "parse_timestamp",
    "utc_now",
]
