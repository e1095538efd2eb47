"""
Component model - musical events attached to rhythm-tree leaves.

Components form a closed union discriminated by `kind`. Every variant
records the performer and instrument that were active when it was parsed.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class InstrumentType(str, Enum):
    """
    The closed vocabulary of instrument types a performer may declare.

    Values are the names used in notation text.
    """

    VIOLIN = "Violin"
    VIOLA = "Viola"
    VIOLONCELLO = "Violoncello"
    CONTRABASS = "Contrabass"
    GUITAR = "Guitar"
    HARP = "Harp"
    FLUTE = "Flute"
    OBOE = "Oboe"
    CLARINET = "Clarinet"
    BASS_CLARINET = "BassClarinet"
    BASSOON = "Bassoon"
    SAXOPHONE = "Saxophone"
    HORN = "Horn"
    TRUMPET = "Trumpet"
    TROMBONE = "Trombone"
    TUBA = "Tuba"
    PIANO = "Piano"
    MARIMBA = "Marimba"
    VIBRAPHONE = "Vibraphone"
    PERCUSSION = "Percussion"
    VOICE = "Voice"
    NOISE = "Noise"

    @classmethod
    def parse(cls, name: str) -> InstrumentType:
        """
        Look up an instrument type by its notation name.

        Raises:
            ValueError: If the name is not in the vocabulary
        """
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown instrument type: {name!r}") from None


class ComponentBase(BaseModel):
    """Fields shared by every component."""

    performer_id: str = Field(..., description="Performer active when parsed")
    instrument_id: str = Field(..., description="Instrument active when parsed")

    model_config = {"frozen": True}


class Pitch(ComponentBase):
    """One or more pitches (a chord when more than one)."""

    kind: Literal["pitch"] = "pitch"
    values: list[float] = Field(default_factory=list, description="Pitches as MIDI-style floats")


class DynamicMarking(ComponentBase):
    """A dynamic such as 'mf' or 'ppp'."""

    kind: Literal["dynamic_marking"] = "dynamic_marking"
    value: str = Field(..., description="Dynamic marking text")


class DynamicMarkingSpannerStart(ComponentBase):
    kind: Literal["dynamic_marking_spanner_start"] = "dynamic_marking_spanner_start"


class DynamicMarkingSpannerStop(ComponentBase):
    kind: Literal["dynamic_marking_spanner_stop"] = "dynamic_marking_spanner_stop"


class Articulation(ComponentBase):
    """One or more articulation markings on the same event."""

    kind: Literal["articulation"] = "articulation"
    values: list[str] = Field(default_factory=list, description="Articulation markings")


class SlurStart(ComponentBase):
    kind: Literal["slur_start"] = "slur_start"


class SlurStop(ComponentBase):
    kind: Literal["slur_stop"] = "slur_stop"


class ExtensionStart(ComponentBase):
    kind: Literal["extension_start"] = "extension_start"


class ExtensionStop(ComponentBase):
    kind: Literal["extension_stop"] = "extension_stop"


class Rest(ComponentBase):
    kind: Literal["rest"] = "rest"


Component = Annotated[
    Pitch
    | DynamicMarking
    | DynamicMarkingSpannerStart
    | DynamicMarkingSpannerStop
    | Articulation
    | SlurStart
    | SlurStop
    | ExtensionStart
    | ExtensionStop
    | Rest,
    Field(discriminator="kind"),
]

COMPONENT = TypeAdapter(Component)
