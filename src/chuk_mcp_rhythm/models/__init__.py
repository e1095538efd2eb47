"""
Data models for the rhythm-tree system.

This module provides:
- Token union: What the tokenizer produces (string, int, float, duration, container)
- Component union: Musical events attached to leaves
- InstrumentType: The closed instrument vocabulary
- ScoreModel: The parsed score aggregate
"""

from chuk_mcp_rhythm.models.components import (
    COMPONENT,
    Articulation,
    Component,
    DynamicMarking,
    DynamicMarkingSpannerStart,
    DynamicMarkingSpannerStop,
    ExtensionStart,
    ExtensionStop,
    InstrumentType,
    Pitch,
    Rest,
    SlurStart,
    SlurStop,
)
from chuk_mcp_rhythm.models.score import Measure, RehearsalMarking, ScoreModel, TempoMarking
from chuk_mcp_rhythm.models.tokens import (
    TOKEN_STREAM,
    Token,
    TokenContainer,
    TokenDuration,
    TokenFloat,
    TokenInt,
    TokenString,
)

__all__ = [
    # Tokens
    "TOKEN_STREAM",
    "Token",
    "TokenContainer",
    "TokenDuration",
    "TokenFloat",
    "TokenInt",
    "TokenString",
    # Components
    "COMPONENT",
    "Component",
    "Articulation",
    "DynamicMarking",
    "DynamicMarkingSpannerStart",
    "DynamicMarkingSpannerStop",
    "ExtensionStart",
    "ExtensionStop",
    "InstrumentType",
    "Pitch",
    "Rest",
    "SlurStart",
    "SlurStop",
    # Score
    "Measure",
    "RehearsalMarking",
    "ScoreModel",
    "TempoMarking",
]
