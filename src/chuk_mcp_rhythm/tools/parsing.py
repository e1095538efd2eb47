"""
Parsing tools - MCP tools for building rhythm trees.

Tools for parsing token streams into scores and querying span relationships.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from chuk_mcp_rhythm.constants import ErrorMessages, SuccessMessages
from chuk_mcp_rhythm.core import Duration, DurationSpan
from chuk_mcp_rhythm.models.score import ScoreModel
from chuk_mcp_rhythm.parser import ParserError, parse
from chuk_mcp_rhythm.streams import TokenStreamLoader

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _score_payload(score: ScoreModel, include_trees: bool) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "status": "success",
        "summary": score.summary(),
        "measures": [m.to_dict() for m in score.measures],
        "diagnostics": score.diagnostics.to_dict(),
        "message": SuccessMessages.PARSED.format(
            roots=len(score.duration_nodes), measures=len(score.measures)
        ),
    }
    if include_trees:
        payload["duration_nodes"] = [node.to_dict() for node in score.duration_nodes]
    return payload


def register_parsing_tools(
    mcp: ChukMCPServer,
    loader: TokenStreamLoader,
) -> dict[str, Any]:
    """
    Register parsing tools with the MCP server.

    Args:
        mcp: The MCP server instance
        loader: The token stream loader

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def rhythm_parse_tokens(
        tokens_json: str,
        include_trees: bool = True,
        strict: bool = False,
    ) -> str:
        """
        Parse a token stream into a normalized score.

        Args:
            tokens_json: JSON array of tokens (each with kind and identifier)
            include_trees: Include the full rhythm trees in the result
            strict: Fail on invalid instrument declarations

        Returns:
            JSON string with score summary, measures, trees and diagnostics

        Example:
            rhythm_parse_tokens(tokens_json='[{"kind": "duration", '
                '"identifier": "RootNodeDuration", "value": "4"}]')
        """
        try:
            score = parse(json.loads(tokens_json), strict=strict)
            return json.dumps(_score_payload(score, include_trees))
        except (json.JSONDecodeError, ValidationError, ParserError) as e:
            return json.dumps(
                {"status": "error", "message": ErrorMessages.INVALID_STREAM.format(error=e)}
            )
        except Exception as e:
            logger.exception("Failed to parse tokens")
            return json.dumps({"status": "error", "message": str(e)})

    tools["rhythm_parse_tokens"] = rhythm_parse_tokens

    @mcp.tool  # type: ignore[arg-type]
    async def rhythm_parse_stream(
        name: str,
        include_trees: bool = True,
        strict: bool = False,
    ) -> str:
        """
        Parse a named token stream from the library or project.

        Args:
            name: Stream name (file name without extension)
            include_trees: Include the full rhythm trees in the result
            strict: Fail on invalid instrument declarations

        Returns:
            JSON string with score summary, measures, trees and diagnostics

        Example:
            rhythm_parse_stream(name="nested-triplet")
        """
        try:
            stream = loader.get_stream(name)
            if stream is None:
                message = ErrorMessages.STREAM_NOT_FOUND.format(name=name)
                return json.dumps({"status": "error", "message": message})
            score = parse(stream.tokens, strict=strict)
            payload = _score_payload(score, include_trees)
            payload["stream"] = stream.name
            return json.dumps(payload)
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to parse stream")
            return json.dumps({"status": "error", "message": str(e)})

    tools["rhythm_parse_stream"] = rhythm_parse_stream

    @mcp.tool  # type: ignore[arg-type]
    async def rhythm_list_streams() -> str:
        """
        List available token streams.

        Returns:
            JSON string with stream names, descriptions and token counts
        """
        try:
            streams = loader.list_streams()
            return json.dumps(
                {
                    "status": "success",
                    "streams": [
                        {
                            "name": s.name,
                            "description": s.description,
                            "token_count": s.token_count,
                        }
                        for s in streams
                    ],
                    "count": len(streams),
                }
            )
        except Exception as e:
            logger.exception("Failed to list streams")
            return json.dumps({"status": "error", "message": str(e)})

    tools["rhythm_list_streams"] = rhythm_list_streams

    @mcp.tool  # type: ignore[arg-type]
    async def rhythm_span_relationship(
        a_start: str,
        a_stop: str,
        b_start: str,
        b_stop: str,
    ) -> str:
        """
        Classify how two time spans relate.

        Args:
            a_start: Start of the first span (e.g. '0', '3/4')
            a_stop: Stop of the first span
            b_start: Start of the second span
            b_stop: Stop of the second span

        Returns:
            JSON string with relationship: none, adjacent or overlapping

        Example:
            rhythm_span_relationship(a_start="0", a_stop="1", b_start="1", b_stop="2")
        """
        try:
            a = DurationSpan(Duration.parse(a_start), Duration.parse(a_stop))
            b = DurationSpan(Duration.parse(b_start), Duration.parse(b_stop))
        except ValueError as e:
            return json.dumps(
                {"status": "error", "message": ErrorMessages.INVALID_SPAN.format(error=e)}
            )

        return json.dumps(
            {
                "status": "success",
                "a": a.to_dict(),
                "b": b.to_dict(),
                "relationship": a.relationship(b).value,
            }
        )

    tools["rhythm_span_relationship"] = rhythm_span_relationship

    return tools
