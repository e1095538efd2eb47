"""
Constants and enums for the rhythm-tree system.

No magic strings - use enums for token identifiers and issue codes.
"""

from enum import Enum


class TokenIdentifier(str, Enum):
    """Identifiers the tree builder understands."""

    # Structure
    MEASURE = "Measure"
    ROOT_NODE_DURATION = "RootNodeDuration"
    INTERNAL_NODE_DURATION = "InternalNodeDuration"
    LEAF_NODE_DURATION = "LeafNodeDuration"
    STACK_MODE = "DurationNodeStackMode"
    STACK_MODE_MEASURE = "DurationNodeStackModeMeasure"
    STACK_MODE_INCREMENT = "DurationNodeStackModeIncrement"
    STACK_MODE_DECREMENT = "DurationNodeStackModeDecrement"

    # Context
    PERFORMER_ID = "PerformerID"
    INSTRUMENT_ID = "InstrumentID"
    INSTRUMENT_TYPE = "InstrumentType"
    PERFORMER_DECLARATION = "PerformerDeclaration"

    # Score-level
    TITLE = "Title"
    METADATA_KEY = "MetadataKey"
    METADATA_VALUE = "MetadataValue"
    TEMPO_MARKING = "TempoMarking"
    REHEARSAL_MARKING = "RehearsalMarking"

    # Events
    PITCH = "Pitch"
    DYNAMIC_MARKING = "DynamicMarking"
    ARTICULATION = "Articulation"
    REST = "Rest"
    SLUR_START = "SlurStart"
    SLUR_STOP = "SlurStop"
    EXTENSION_START = "ExtensionStart"
    EXTENSION_STOP = "ExtensionStop"

    # Nested inside containers
    VALUE = "Value"
    SUBDIVISION_VALUE = "SubdivisionValue"
    SPANNER_START = "SpannerStart"
    SPANNER_STOP = "SpannerStop"


class IssueCode(str, Enum):
    """Codes recorded in parse diagnostics."""

    INVALID_INSTRUMENT_TYPE = "INVALID_INSTRUMENT_TYPE"
    MISSING_CONTEXT = "MISSING_CONTEXT"
    NO_OPEN_CONTAINER = "NO_OPEN_CONTAINER"
    STACK_UNDERFLOW = "STACK_UNDERFLOW"
    NEGATIVE_ACCUMULATOR = "NEGATIVE_ACCUMULATOR"
    BEAT_WEIGHT = "BEAT_WEIGHT"
    ORPHAN_METADATA_VALUE = "ORPHAN_METADATA_VALUE"
    UNRECOGNIZED_IDENTIFIER = "UNRECOGNIZED_IDENTIFIER"


# Default tempo subdivision when a tempo marking omits one (quarter notes)
DEFAULT_TEMPO_SUBDIVISION = 4

# File extensions the token-stream loader reads
STREAM_EXTENSIONS = (".yaml", ".yml", ".json")


class ErrorMessages:
    """Standardized error messages."""

    STREAM_NOT_FOUND = "Token stream '{name}' not found."
    INVALID_STREAM = "Invalid token stream: {error}"
    INVALID_SPAN = "Invalid span: {error}"


class SuccessMessages:
    """Standardized success messages."""

    PARSED = "Parsed {roots} rhythm trees across {measures} measures."
