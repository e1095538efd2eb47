"""
Tree Builder - compiles a token stream into a ScoreModel.

The builder consumes tokens once, left to right:
    tokens → NodeStack + DurationNode forest (raw beat weights)
    → close last measure
    → normalize every root (match, scale, offset)
    → ScoreModel

Indentation levels on node-duration tokens reconstruct nesting; stack
modes decide where each new root group starts in time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from chuk_mcp_rhythm.constants import DEFAULT_TEMPO_SUBDIVISION, IssueCode, TokenIdentifier
from chuk_mcp_rhythm.core.duration import DURATION_ZERO, Duration
from chuk_mcp_rhythm.models.components import (
    Articulation,
    ComponentBase,
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
from chuk_mcp_rhythm.parser.diagnostics import ParseReport
from chuk_mcp_rhythm.parser.errors import InvalidInstrumentTypeError, MalformedTokenError
from chuk_mcp_rhythm.tree.node import DurationNode
from chuk_mcp_rhythm.tree.stack import NodeStack

logger = logging.getLogger(__name__)

Handler = Callable[[Any, int], None]


class StackMode(str, Enum):
    """
    Where the next root group is placed in time.

    - MEASURE: at the start of the current measure
    - INCREMENT: immediately after the previous root group
    - DECREMENT: at the start of the innermost open container on the stack
    """

    MEASURE = "|"
    INCREMENT = "+"
    DECREMENT = "-"


class TreeBuilder:
    """
    Builds one ScoreModel from one token stream.

    All parse state lives on the instance; construct a fresh builder per
    parse. Malformed or out-of-order events are dropped rather than
    aborting the parse, and every drop is recorded in the diagnostics.
    """

    def __init__(self, strict: bool = False):
        """
        Initialize the builder.

        Args:
            strict: Raise declaration errors instead of recording them
        """
        self.strict = strict
        self.report = ParseReport()
        self._consumed = False

        self._stack = NodeStack()
        self._stack_mode = StackMode.MEASURE
        self._current_leaf: DurationNode | None = None

        # Offset of the start of the current measure from the start of the piece
        self._measure_offset: Duration = DURATION_ZERO
        # Elapsed duration within the current measure
        self._accum_in_measure: Duration = DURATION_ZERO
        # Current location from the start of the piece
        self._accum_total: Duration = DURATION_ZERO
        # Offset of the most recent root
        self._current_node_offset: Duration = DURATION_ZERO
        # Depth of the most recent internal/leaf node
        self._current_depth = 0

        self._current_performer_id: str | None = None
        self._current_instrument_id: str | None = None
        self._pending_metadata_key: str | None = None

        self._instrument_types_by_performer: dict[str, dict[str, InstrumentType]] = {}
        self._title = ""
        self._metadata: dict[str, str] = {}
        self._measures: list[Measure] = []
        self._duration_nodes: list[DurationNode] = []
        self._tempo_markings: list[TempoMarking] = []
        self._rehearsal_markings: list[RehearsalMarking] = []

        self._atomic_handlers: dict[str, Handler] = {
            TokenIdentifier.MEASURE: self._manage_measure,
            TokenIdentifier.STACK_MODE: self._manage_stack_mode,
            TokenIdentifier.STACK_MODE_MEASURE: self._stack_mode_handler(StackMode.MEASURE),
            TokenIdentifier.STACK_MODE_INCREMENT: self._stack_mode_handler(StackMode.INCREMENT),
            TokenIdentifier.STACK_MODE_DECREMENT: self._stack_mode_handler(StackMode.DECREMENT),
            TokenIdentifier.ROOT_NODE_DURATION: self._manage_root_duration,
            TokenIdentifier.INTERNAL_NODE_DURATION: self._manage_internal_duration,
            TokenIdentifier.LEAF_NODE_DURATION: self._manage_leaf_duration,
            TokenIdentifier.PERFORMER_ID: self._manage_performer_id,
            TokenIdentifier.INSTRUMENT_ID: self._manage_instrument_id,
            TokenIdentifier.TITLE: self._manage_title,
            TokenIdentifier.METADATA_KEY: self._manage_metadata_key,
            TokenIdentifier.METADATA_VALUE: self._manage_metadata_value,
            TokenIdentifier.REHEARSAL_MARKING: self._manage_rehearsal_marking,
        }
        self._container_handlers: dict[str, Handler] = {
            TokenIdentifier.PERFORMER_DECLARATION: self._manage_performer_declaration,
            TokenIdentifier.PITCH: self._manage_pitch,
            TokenIdentifier.DYNAMIC_MARKING: self._manage_dynamic_marking,
            TokenIdentifier.ARTICULATION: self._manage_articulation,
            TokenIdentifier.TEMPO_MARKING: self._manage_tempo_marking,
        }

        # Marker events and stack-mode switches arrive either bare or as
        # empty containers depending on the tokenizer
        simple_events: dict[str, type[ComponentBase]] = {
            TokenIdentifier.REST: Rest,
            TokenIdentifier.SLUR_START: SlurStart,
            TokenIdentifier.SLUR_STOP: SlurStop,
            TokenIdentifier.EXTENSION_START: ExtensionStart,
            TokenIdentifier.EXTENSION_STOP: ExtensionStop,
        }
        for identifier, component_type in simple_events.items():
            handler = self._event_handler(component_type)
            self._atomic_handlers[identifier] = handler
            self._container_handlers[identifier] = handler
        for identifier in (
            TokenIdentifier.MEASURE,
            TokenIdentifier.STACK_MODE_MEASURE,
            TokenIdentifier.STACK_MODE_INCREMENT,
            TokenIdentifier.STACK_MODE_DECREMENT,
        ):
            self._container_handlers[identifier] = self._atomic_handlers[identifier]

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def parse(self, tokens: Iterable[Token | dict[str, Any]]) -> ScoreModel:
        """
        Parse a token stream into a ScoreModel.

        Args:
            tokens: Token models, or plain data validated into tokens

        Returns:
            The normalized ScoreModel

        Raises:
            MalformedTokenError: A handled token carries the wrong payload
            InvalidInstrumentTypeError: Only in strict mode
            pydantic.ValidationError: Plain data does not describe tokens
        """
        if self._consumed:
            raise RuntimeError("TreeBuilder instances parse exactly one stream")
        self._consumed = True

        stream = TOKEN_STREAM.validate_python(list(tokens))
        for index, token in enumerate(stream):
            self._dispatch(token, index)

        self._set_duration_of_last_measure()
        self._finalize_duration_nodes()

        score = self._make_score_model()
        logger.info(
            f"Parsed {len(stream)} tokens into {len(score.duration_nodes)} rhythm trees "
            f"across {len(score.measures)} measures ({len(self.report)} issues)"
        )
        return score

    def _dispatch(self, token: Token, index: int) -> None:
        if isinstance(token, TokenContainer):
            handler = self._container_handlers.get(token.identifier)
        else:
            handler = self._atomic_handlers.get(token.identifier)

        if handler is None:
            self.report.add_info(
                IssueCode.UNRECOGNIZED_IDENTIFIER,
                f"Ignored {token.kind} token {token.identifier!r}",
                _location(index),
            )
            return

        logger.debug(f"token[{index}] {token.identifier}")
        handler(token, index)

    # ------------------------------------------------------------------
    # Measures and stack modes
    # ------------------------------------------------------------------

    def _manage_measure(self, token: Token, index: int) -> None:
        self._set_duration_of_last_measure()
        self._measures.append(
            Measure(number=len(self._measures) + 1, offset=self._measure_offset)
        )
        self._accum_in_measure = DURATION_ZERO
        self._stack_mode = StackMode.MEASURE

    def _set_duration_of_last_measure(self) -> None:
        if not self._measures:
            return
        last_measure = self._measures[-1]
        last_measure.duration = self._accum_in_measure
        self._measure_offset = self._measure_offset + last_measure.duration

    def _manage_stack_mode(self, token: Token, index: int) -> None:
        value = _string_value(token, index)
        try:
            mode = StackMode(value)
        except ValueError:
            raise MalformedTokenError(
                index, token.identifier, f"unknown stack mode {value!r}"
            ) from None
        self._set_stack_mode(mode)

    def _stack_mode_handler(self, mode: StackMode) -> Handler:
        def handler(token: Token, index: int) -> None:
            self._set_stack_mode(mode)

        return handler

    def _set_stack_mode(self, mode: StackMode) -> None:
        self._stack_mode = mode
        if mode == StackMode.MEASURE:
            self._accum_in_measure = DURATION_ZERO

    # ------------------------------------------------------------------
    # Rhythm trees
    # ------------------------------------------------------------------

    def _manage_root_duration(self, token: Token, index: int) -> None:
        if not isinstance(token, TokenDuration):
            raise MalformedTokenError(index, token.identifier, "expected a duration payload")

        root = DurationNode.root_with_duration(token.value)
        root.offset = self._offset_for_new_root(index)

        self._duration_nodes.append(root)
        self._stack.reseed(root)

        self._accum_total = self._accum_total + root.duration
        self._accum_in_measure = self._accum_in_measure + root.duration
        self._current_node_offset = root.offset
        self._current_depth = 0

    def _offset_for_new_root(self, index: int) -> Duration:
        """Apply the active stack mode's placement rule."""
        if self._stack_mode == StackMode.MEASURE:
            self._accum_total = self._measure_offset
            return self._measure_offset

        if self._stack_mode == StackMode.INCREMENT:
            return self._accum_total

        # Decrement: stack the new group on top of the innermost open container
        reused = self._stack.top
        if reused is None:
            return DURATION_ZERO
        self._accum_total = reused.offset
        if self._accum_in_measure < reused.duration:
            self.report.add_warning(
                IssueCode.NEGATIVE_ACCUMULATOR,
                f"Decrement by {reused.duration} exceeds {self._accum_in_measure} "
                "elapsed in measure; clamped to zero",
                _location(index),
            )
            self._accum_in_measure = DURATION_ZERO
        else:
            self._accum_in_measure = self._accum_in_measure - reused.duration
        return reused.offset

    def _manage_internal_duration(self, token: Token, index: int) -> None:
        node = self._attach_node(token, index)
        if node is not None:
            self._stack.push(node)

    def _manage_leaf_duration(self, token: Token, index: int) -> None:
        node = self._attach_node(token, index)
        if node is not None:
            self._current_leaf = node

    def _attach_node(self, token: Token, index: int) -> DurationNode | None:
        """
        Close any nesting levels the indentation has left, then add a child
        with the token's beat weight under the innermost open container.
        """
        if not isinstance(token, TokenInt) or token.indentation_level is None:
            raise MalformedTokenError(
                index, token.identifier, "expected an integer payload with an indentation level"
            )

        depth = token.indentation_level - 1
        if depth < self._current_depth:
            amount = self._current_depth - depth
            popped = self._stack.pop(amount)
            if popped < amount:
                self.report.add_warning(
                    IssueCode.STACK_UNDERFLOW,
                    f"Needed to close {amount} nesting levels, only {popped} open",
                    _location(index),
                )

        container = self._stack.top
        if container is None:
            logger.warning(f"Dropped {token.identifier} at token[{index}]: no open container")
            self.report.add_warning(
                IssueCode.NO_OPEN_CONTAINER,
                f"Dropped {token.identifier} with {token.value} beats: no open container",
                _location(index),
            )
            return None

        node = container.add_child(token.value)
        self._current_depth = depth
        return node

    def _finalize_duration_nodes(self) -> None:
        for root in self._duration_nodes:
            for problem in root.normalize():
                self.report.add_warning(IssueCode.BEAT_WEIGHT, problem)

    # ------------------------------------------------------------------
    # Context and score-level values
    # ------------------------------------------------------------------

    def _manage_performer_id(self, token: Token, index: int) -> None:
        self._current_performer_id = _string_value(token, index)

    def _manage_instrument_id(self, token: Token, index: int) -> None:
        self._current_instrument_id = _string_value(token, index)

    def _manage_title(self, token: Token, index: int) -> None:
        self._title = _string_value(token, index)

    def _manage_metadata_key(self, token: Token, index: int) -> None:
        self._pending_metadata_key = _string_value(token, index)

    def _manage_metadata_value(self, token: Token, index: int) -> None:
        value = _string_value(token, index)
        key = self._pending_metadata_key
        if key is None:
            self.report.add_info(
                IssueCode.ORPHAN_METADATA_VALUE,
                f"Dropped metadata value {value!r}: no pending key",
                _location(index),
            )
            return
        self._metadata[key] = value
        if key == TokenIdentifier.TITLE:
            self._title = value
        self._pending_metadata_key = None

    def _manage_rehearsal_marking(self, token: Token, index: int) -> None:
        self._rehearsal_markings.append(
            RehearsalMarking(
                index=len(self._rehearsal_markings),
                type=_string_value(token, index),
                offset=self._measure_offset,
            )
        )

    def _manage_tempo_marking(self, container: TokenContainer, index: int) -> None:
        value: int | None = None
        subdivision_value = DEFAULT_TEMPO_SUBDIVISION
        for token in container.tokens:
            if token.identifier == TokenIdentifier.VALUE:
                value = _int_value(token, index)
            elif token.identifier == TokenIdentifier.SUBDIVISION_VALUE:
                subdivision_value = _int_value(token, index)

        if value is None:
            raise MalformedTokenError(index, container.identifier, "missing tempo Value")
        self._tempo_markings.append(
            TempoMarking(
                value=value,
                subdivision_value=subdivision_value,
                offset=self._measure_offset,
            )
        )

    def _manage_performer_declaration(self, container: TokenContainer, index: int) -> None:
        try:
            self._declare_performer(container, index)
        except InvalidInstrumentTypeError as e:
            logger.warning(f"Skipped performer declaration at token[{index}]: {e}")
            self.report.add_error(
                IssueCode.INVALID_INSTRUMENT_TYPE, str(e), _location(index), error=e
            )
            if self.strict:
                raise

    def _declare_performer(self, container: TokenContainer, index: int) -> None:
        """
        Record a performer's instruments in declaration order.

        A performer keeps the position of its first declaration; a later
        declaration replaces its instruments. Nothing from a declaration
        is committed if any instrument type is invalid.
        """
        performer_id = container.opening_value
        for token in container.tokens:
            if token.identifier == TokenIdentifier.PERFORMER_ID:
                performer_id = _string_value(token, index)
                break
        if not performer_id:
            raise MalformedTokenError(index, container.identifier, "missing performer id")

        self._instrument_types_by_performer.setdefault(performer_id, {})

        instruments: dict[str, InstrumentType] = {}
        instrument_id: str | None = None
        for token in container.tokens:
            if token.identifier == TokenIdentifier.INSTRUMENT_ID:
                instrument_id = _string_value(token, index)
            elif token.identifier == TokenIdentifier.INSTRUMENT_TYPE:
                type_name = _string_value(token, index)
                try:
                    instrument_type = InstrumentType.parse(type_name)
                except ValueError:
                    raise InvalidInstrumentTypeError(performer_id, type_name) from None
                if instrument_id is not None:
                    instruments[instrument_id] = instrument_type

        self._instrument_types_by_performer[performer_id] = instruments

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def _manage_pitch(self, container: TokenContainer, index: int) -> None:
        values: list[float] = []
        for token in container.tokens:
            if (
                isinstance(token, TokenContainer)
                and token.identifier == TokenIdentifier.SPANNER_START
            ):
                # TODO: glissando component once glissandi are modelled
                continue
            if isinstance(token, TokenFloat):
                values.append(token.value)
        self._add_component(Pitch, container.identifier, index, values=values)

    def _manage_dynamic_marking(self, container: TokenContainer, index: int) -> None:
        for token in container.tokens:
            if token.identifier == TokenIdentifier.VALUE:
                self._add_component(
                    DynamicMarking, container.identifier, index, value=_string_value(token, index)
                )
            elif token.identifier == TokenIdentifier.SPANNER_START:
                self._add_component(DynamicMarkingSpannerStart, container.identifier, index)
            elif token.identifier == TokenIdentifier.SPANNER_STOP:
                self._add_component(DynamicMarkingSpannerStop, container.identifier, index)

    def _manage_articulation(self, container: TokenContainer, index: int) -> None:
        values = [token.value for token in container.tokens if isinstance(token, TokenString)]
        self._add_component(Articulation, container.identifier, index, values=values)

    def _event_handler(self, component_type: type[ComponentBase]) -> Handler:
        def handler(token: Token, index: int) -> None:
            self._add_component(component_type, token.identifier, index)

        return handler

    def _add_component(
        self,
        component_type: type[ComponentBase],
        identifier: str,
        index: int,
        **fields: Any,
    ) -> None:
        """Attach a component to the current leaf, or record why it was dropped."""
        leaf = self._current_leaf
        missing = []
        if leaf is None:
            missing.append("leaf")
        if self._current_performer_id is None:
            missing.append("performer id")
        if self._current_instrument_id is None:
            missing.append("instrument id")
        if leaf is None or missing:
            message = f"Dropped {identifier}: no current {', '.join(missing)}"
            logger.warning(f"{message} (token[{index}])")
            self.report.add_warning(IssueCode.MISSING_CONTEXT, message, _location(index))
            return

        component = component_type(
            performer_id=self._current_performer_id,
            instrument_id=self._current_instrument_id,
            **fields,
        )
        leaf.add_component(component)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def _make_score_model(self) -> ScoreModel:
        return ScoreModel(
            title=self._title,
            metadata=self._metadata,
            measures=self._measures,
            duration_nodes=self._duration_nodes,
            tempo_markings=self._tempo_markings,
            rehearsal_markings=self._rehearsal_markings,
            instrument_types_by_performer=self._instrument_types_by_performer,
            diagnostics=self.report,
        )


def _location(index: int) -> str:
    return f"token[{index}]"


def _string_value(token: Token, index: int) -> str:
    if not isinstance(token, TokenString):
        raise MalformedTokenError(index, token.identifier, "expected a string payload")
    return token.value


def _int_value(token: Token, index: int) -> int:
    if not isinstance(token, TokenInt):
        raise MalformedTokenError(index, token.identifier, "expected an integer payload")
    return token.value


def parse(tokens: Iterable[Token | dict[str, Any]], strict: bool = False) -> ScoreModel:
    """
    Convenience function to parse a token stream.

    Args:
        tokens: Token models or plain token data
        strict: Raise declaration errors instead of recording them

    Returns:
        The normalized ScoreModel
    """
    builder = TreeBuilder(strict=strict)
    return builder.parse(tokens)
