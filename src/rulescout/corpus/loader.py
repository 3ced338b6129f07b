"""
Corpus loading: resolves user patterns to files and parses every file into a
SourceUnit that rules can inspect.

The loader is all-or-nothing. A single file that cannot be decoded, tokenized
or parsed aborts the whole load with ParseError, and a pattern set that
resolves to nothing raises EmptyCorpusError.
"""

import ast
import glob
import io
import os
import tokenize
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pathspec

from rulescout.cancellation import CancellationToken
from rulescout.exceptions import EmptyCorpusError, ParseError
from rulescout.logging_config import logger
from rulescout.progress import NullProgressSink, ProgressSink
from rulescout.schemas import LintConfig
from rulescout.tracing import trace
from .config import (
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_MAX_BYTES,
    validate_extensions,
    validate_feature_version,
    validate_max_bytes,
)

Patterns = Union[str, Iterable[str]]


@dataclass(frozen=True, eq=False)
class SourceUnit:
    """
    One parsed corpus file.

    ``lines`` holds the physical lines without their terminators, ``text`` the
    exact decoded content (line endings preserved).
    """
    path: str
    text: str
    lines: Tuple[str, ...]
    tokens: Tuple[tokenize.TokenInfo, ...]
    tree: ast.Module

    @property
    def line_count(self) -> int:
        return len(self.lines)


def split_patterns(patterns: Patterns) -> List[str]:
    """
    Normalise patterns to a list.

    A string is split on whitespace; an iterable keeps each non-blank item.
    """
    if isinstance(patterns, str):
        return patterns.split()
    return [str(p).strip() for p in patterns if str(p).strip()]


def _build_ignore_spec(directory: Optional[Path], respect_gitignore: bool) -> pathspec.PathSpec:
    all_patterns = list(DEFAULT_IGNORE_PATTERNS)
    if respect_gitignore and directory is not None:
        gitignore_path = directory / ".gitignore"
        if gitignore_path.is_file():
            try:
                gitignore_patterns = gitignore_path.read_text(encoding="utf-8").splitlines()
                all_patterns.extend(gitignore_patterns)
                logger.debug(f"Loaded {len(gitignore_patterns)} patterns from '{gitignore_path}'")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not read .gitignore at '{gitignore_path}'. Error: {e}")
    return pathspec.PathSpec.from_lines("gitwildmatch", all_patterns)


def _walk_directory(directory: Path, extensions: Sequence[str], respect_gitignore: bool) -> List[Path]:
    spec = _build_ignore_spec(directory, respect_gitignore)
    found: List[Path] = []

    for root, dirs, files in os.walk(directory):
        root_path = Path(root)

        # Prune ignored directories so os.walk never descends into them
        original_dirs = sorted(dirs)
        dirs[:] = []
        for d in original_dirs:
            dir_path_to_check = (root_path.relative_to(directory) / d).as_posix() + "/"
            if spec.match_file(dir_path_to_check):
                logger.debug(f"Ignoring directory '{dir_path_to_check}' due to ignore rules")
            else:
                dirs.append(d)

        for file_name in sorted(files):
            file_path = root_path / file_name
            relative_path = file_path.relative_to(directory).as_posix()
            if spec.match_file(relative_path):
                logger.debug(f"Ignoring '{relative_path}' due to ignore rules")
                continue
            if file_path.suffix not in extensions:
                continue
            found.append(file_path)

    return found


def _glob_root(pattern: str) -> Path:
    """The literal directory prefix of a glob, up to its first magic component."""
    parts = Path(pattern).parts
    literal: List[str] = []
    for part in parts:
        if glob.has_magic(part):
            break
        literal.append(part)
    return Path(*literal) if literal else Path(".")


def _expand_glob(pattern: str, extensions: Sequence[str]) -> List[Path]:
    spec = _build_ignore_spec(None, respect_gitignore=False)
    root = _glob_root(pattern)
    found: List[Path] = []
    for match in sorted(glob.glob(pattern, recursive=True)):
        path = Path(match)
        if not path.is_file() or path.suffix not in extensions:
            continue
        # Ignore rules apply below the literal prefix only, as for directory walks
        try:
            relative = path.relative_to(root).as_posix()
        except ValueError:
            relative = path.as_posix().lstrip("/")
        if spec.match_file(relative):
            logger.debug(f"Ignoring '{match}' due to ignore rules")
            continue
        found.append(path)
    return found


def resolve_patterns(
    patterns: Patterns,
    extensions: Optional[Sequence[str]] = None,
    respect_gitignore: bool = True,
) -> List[Path]:
    """
    Resolve patterns to an ordered, duplicate-free list of files.

    Args:
        patterns: Whitespace-separated string or iterable of paths/globs.
        extensions: Suffixes kept when walking directories or expanding globs.
        respect_gitignore: Honour the .gitignore of walked directories.

    Returns:
        Files in pattern order, sorted within each pattern.
    """
    extensions = list(extensions) if extensions is not None else list(DEFAULT_EXTENSIONS)
    seen = set()
    resolved: List[Path] = []

    for pattern in split_patterns(patterns):
        path = Path(pattern)
        if path.is_dir():
            matches = _walk_directory(path, extensions, respect_gitignore)
        elif path.is_file():
            # Explicitly named files are taken regardless of extension
            matches = [path]
        else:
            matches = _expand_glob(pattern, extensions)

        if not matches:
            logger.warning(f"No files matched pattern '{pattern}'")

        for match in matches:
            key = os.path.normpath(str(match))
            if key in seen:
                continue
            seen.add(key)
            resolved.append(Path(key))

    return resolved


def _split_lines(text: str) -> Tuple[str, ...]:
    raw = text.split("\n")
    if text.endswith("\n"):
        raw.pop()
    return tuple(line[:-1] if line.endswith("\r") else line for line in raw)


def parse_source(path: str, text: str, feature_version: Optional[Sequence[int]] = None) -> SourceUnit:
    """
    Tokenize and parse source text into a SourceUnit.

    Raises:
        ParseError: If the text cannot be tokenized or parsed.
    """
    try:
        tokens = tuple(tokenize.generate_tokens(io.StringIO(text).readline))
    except (tokenize.TokenError, SyntaxError) as e:
        raise ParseError(path, f"tokenize failed: {e}") from e

    try:
        tree = ast.parse(
            text,
            filename=path,
            feature_version=tuple(feature_version) if feature_version else None,
        )
    except SyntaxError as e:
        raise ParseError(path, f"line {e.lineno}: {e.msg}") from e
    except ValueError as e:
        # e.g. source containing null bytes
        raise ParseError(path, str(e)) from e

    return SourceUnit(path=path, text=text, lines=_split_lines(text), tokens=tokens, tree=tree)


def _feature_version(base_config: Optional[LintConfig]) -> Optional[Sequence[int]]:
    if base_config is None or not base_config.parser_options:
        return None
    feature_version = base_config.parser_options.get("feature_version")
    validate_feature_version(feature_version)
    return feature_version


@trace
def load_corpus(
    patterns: Patterns,
    base_config: Optional[LintConfig] = None,
    progress: Optional[ProgressSink] = None,
    weight: float = 1.0,
    *,
    extensions: Optional[Sequence[str]] = None,
    respect_gitignore: bool = True,
    max_bytes: Optional[int] = DEFAULT_MAX_BYTES,
    cancellation: Optional[CancellationToken] = None,
) -> Mapping[str, SourceUnit]:
    """
    Resolve and parse every file named by ``patterns``.

    Args:
        patterns: Whitespace-separated string or iterable of paths/globs.
        base_config: Supplies parserOptions (``feature_version``).
        progress: Receives ``weight / file_count`` after each parsed file.
        weight: Total progress this load reports.
        extensions: Suffixes kept for directories and globs.
        respect_gitignore: Honour .gitignore files of walked directories.
        max_bytes: Skip files larger than this (None = no limit).
        cancellation: Checked before each file.

    Returns:
        Read-only mapping of file path to SourceUnit, in resolution order.

    Raises:
        EmptyCorpusError: If no file matched.
        ParseError: If any file could not be read or parsed.
        ConfigError: If loader settings or parserOptions are invalid.
    """
    extensions = list(extensions) if extensions is not None else list(DEFAULT_EXTENSIONS)
    validate_extensions(extensions)
    validate_max_bytes(max_bytes)
    feature_version = _feature_version(base_config)
    progress = progress if progress is not None else NullProgressSink()

    pattern_list = split_patterns(patterns)
    logger.info(f"Resolving corpus from {len(pattern_list)} pattern(s)")

    files: List[Path] = []
    for file_path in resolve_patterns(pattern_list, extensions, respect_gitignore):
        try:
            size = file_path.stat().st_size
        except OSError as e:
            raise ParseError(str(file_path), f"could not stat file: {e}") from e
        if max_bytes is not None and size > max_bytes:
            logger.debug(f"Skipping '{file_path}' due to size filter ({size} > {max_bytes})")
            continue
        files.append(file_path)

    if not files:
        raise EmptyCorpusError(pattern_list)

    increment = weight / len(files)
    corpus = {}
    for file_path in files:
        if cancellation is not None:
            cancellation.raise_if_cancelled()

        key = file_path.as_posix()
        try:
            text = file_path.read_bytes().decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(key, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise ParseError(key, f"could not read file: {e}") from e

        corpus[key] = parse_source(key, text, feature_version)
        progress.report(increment)

    logger.info(f"Parsed {len(corpus)} file(s) into the corpus")
    return MappingProxyType(corpus)
