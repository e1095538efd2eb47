"""
Token stream loader - discovers and loads materialized token streams.

Token streams can come from:
1. Built-in library (shipped with package)
2. Project streams (user's project/streams directory)

A stream file is YAML or JSON holding either a list of tokens or a
mapping with `name`, `description` and `tokens` keys.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_mcp_rhythm.constants import STREAM_EXTENSIONS
from chuk_mcp_rhythm.models.tokens import TOKEN_STREAM, Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenStream:
    """A named, validated token stream."""

    name: str
    tokens: list[Token]
    description: str = ""
    path: Path | None = None


@dataclass(frozen=True)
class TokenStreamMetadata:
    """Lightweight stream metadata for listing/discovery."""

    name: str
    description: str
    token_count: int
    path: str | None = None

    @classmethod
    def from_stream(cls, stream: TokenStream) -> TokenStreamMetadata:
        """Create metadata from a full stream."""
        return cls(
            name=stream.name,
            description=stream.description,
            token_count=len(stream.tokens),
            path=str(stream.path) if stream.path else None,
        )


class TokenStreamLoader:
    """
    Discovers and loads token streams.

    Streams are loaded from YAML/JSON files in the library and project
    directories. Project streams override library streams with the same name.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the loader.

        Args:
            library_path: Path to built-in stream library
            project_path: Path to project streams directory
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._cache: dict[str, TokenStream] = {}

    def list_streams(self) -> list[TokenStreamMetadata]:
        """
        List all available streams.

        Files that fail to load are logged and left out.
        """
        streams: dict[str, TokenStreamMetadata] = {}
        for directory in (self.library_path, self.project_path):
            for path in self._stream_files(directory):
                try:
                    stream = self._load_stream_file(path)
                except ValueError as e:
                    logger.warning(f"Skipping token stream {path}: {e}")
                    continue
                streams[stream.name] = TokenStreamMetadata.from_stream(stream)
        return list(streams.values())

    def get_stream(self, name: str) -> TokenStream | None:
        """
        Get a stream by name.

        Project streams take precedence over library streams.

        Args:
            name: Stream name (file stem)

        Returns:
            TokenStream if found, None otherwise

        Raises:
            ValueError: If the file exists but does not hold a valid stream
        """
        if name in self._cache:
            return self._cache[name]

        for directory in (self.project_path, self.library_path):
            path = self._find_file(directory, name)
            if path is not None:
                stream = self._load_stream_file(path)
                self._cache[name] = stream
                return stream

        return None

    def load_file(self, path: Path) -> TokenStream:
        """
        Load a stream from an explicit file path, bypassing name lookup.

        Raises:
            ValueError: If the file cannot be read or holds no valid stream
        """
        return self._load_stream_file(path)

    def clear_cache(self) -> None:
        """Clear the stream cache."""
        self._cache.clear()

    def _stream_files(self, directory: Path | None) -> list[Path]:
        if directory is None or not directory.exists():
            return []
        return sorted(p for p in directory.iterdir() if p.suffix in STREAM_EXTENSIONS)

    def _find_file(self, directory: Path | None, name: str) -> Path | None:
        if directory is None:
            return None
        for extension in STREAM_EXTENSIONS:
            candidate = directory / f"{name}{extension}"
            if candidate.exists():
                return candidate
        return None

    def _load_stream_file(self, path: Path) -> TokenStream:
        """Load and validate a stream from a YAML or JSON file."""
        try:
            with open(path) as f:
                data = json.load(f) if path.suffix == ".json" else yaml.safe_load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Cannot read {path.name}: {e}") from e

        return self._parse_stream(data, path)

    def _parse_stream(self, data: Any, path: Path) -> TokenStream:
        """Parse stream data from a loaded file."""
        if isinstance(data, list):
            raw_tokens, name, description = data, path.stem, ""
        elif isinstance(data, dict) and isinstance(data.get("tokens"), list):
            raw_tokens = data["tokens"]
            name = data.get("name", path.stem)
            description = data.get("description", "")
        else:
            raise ValueError(f"{path.name} holds no token list")

        try:
            tokens = TOKEN_STREAM.validate_python(raw_tokens)
        except ValidationError as e:
            raise ValueError(f"{path.name} holds invalid tokens: {e}") from e

        return TokenStream(name=name, tokens=tokens, description=description, path=path)
