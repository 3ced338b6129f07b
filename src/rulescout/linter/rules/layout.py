"""
Layout rules: token- and line-based checks on how source is written.

These mirror the formatting concerns of a style guide (statement
terminators, quoting, indentation, line length, line endings, whitespace)
and are the rules with the richest option schemas.
"""

import tokenize
from typing import Any, Dict, Iterator, Optional, Tuple

from .base import EnumOption, Finding, ObjectOption, Rule

# f-strings (3.12+) and t-strings (3.14+) are split into start, middle and end tokens
INTERPOLATED_START = {getattr(tokenize, n) for n in ("FSTRING_START", "TSTRING_START") if hasattr(tokenize, n)}
INTERPOLATED_MIDDLE = {getattr(tokenize, n) for n in ("FSTRING_MIDDLE", "TSTRING_MIDDLE") if hasattr(tokenize, n)}
INTERPOLATED_END = {getattr(tokenize, n) for n in ("FSTRING_END", "TSTRING_END") if hasattr(tokenize, n)}

# Tokens that never end or start a statement
NON_CODE_TOKENS = {
    tokenize.NL,
    tokenize.COMMENT,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENCODING,
    tokenize.ENDMARKER,
}


def _object_option(options: Tuple[Any, ...], index: int) -> Dict[str, Any]:
    if len(options) > index and isinstance(options[index], dict):
        return options[index]
    return {}


def _split_string_prefix(literal: str) -> Tuple[str, str]:
    """Split 'rb"..."' into ('rb', '"..."')."""
    i = 0
    while i < len(literal) and literal[i] not in "'\"":
        i += 1
    return literal[:i], literal[i:]


class SemiRule(Rule):
    rule_id = "semi"
    description = "Require or forbid semicolons terminating simple statements"
    schema = (EnumOption("always", "never"),)
    defaults = ("never",)

    def check(self, unit, options) -> Iterator[Finding]:
        mode = options[0]
        first: Optional[tokenize.TokenInfo] = None
        last: Optional[tokenize.TokenInfo] = None

        for tok in unit.tokens:
            if tok.type in NON_CODE_TOKENS:
                continue
            if tok.type == tokenize.NEWLINE:
                if last is not None:
                    yield from self._check_statement(mode, first, last)
                first = last = None
                continue
            if first is None:
                first = tok
            last = tok

    def _check_statement(self, mode, first, last) -> Iterator[Finding]:
        ends_with_semi = last.type == tokenize.OP and last.string == ";"
        if mode == "never":
            if ends_with_semi:
                yield Finding(last.start[0], last.start[1], "Extra semicolon.")
            return

        # Block headers and decorators cannot take a terminator
        if ends_with_semi or last.string == ":" or first.string == "@":
            return
        yield Finding(last.end[0], last.end[1], "Missing semicolon.")


class QuotesRule(Rule):
    rule_id = "quotes"
    description = "Enforce a consistent quote character for single-line string literals"
    schema = (EnumOption("double", "single"), ObjectOption(avoidEscape=[True]))
    defaults = ("double", {})

    QUOTE_CHARS = {"double": '"', "single": "'"}

    def check(self, unit, options) -> Iterator[Finding]:
        preferred = self.QUOTE_CHARS[options[0]]
        avoid_escape = bool(_object_option(options, 1).get("avoidEscape", False))
        label = "doublequote" if preferred == '"' else "singlequote"

        tokens = unit.tokens
        # Strings inside f-string replacement fields are part of the outer literal
        depth = 0
        for i, tok in enumerate(tokens):
            if tok.type in INTERPOLATED_START:
                depth += 1
                if depth > 1:
                    continue
                _, body = _split_string_prefix(tok.string)
                content = self._interpolated_text(tokens, i)
            elif tok.type in INTERPOLATED_END:
                depth -= 1
                continue
            elif tok.type == tokenize.STRING and depth == 0:
                _, body = _split_string_prefix(tok.string)
                content = body[1:-1]
            else:
                continue

            # Triple-quoted strings (docstrings, blocks of text) are exempt
            if body[:3] in ('"""', "'''"):
                continue
            if body[:1] == preferred:
                continue
            if avoid_escape and preferred in content:
                continue
            yield Finding(tok.start[0], tok.start[1], f"Strings must use {label}.")

    @staticmethod
    def _interpolated_text(tokens, start: int) -> str:
        """Literal text of the f-string opened at ``start``, nested ones excluded."""
        parts = []
        level = 0
        for tok in tokens[start:]:
            if tok.type in INTERPOLATED_START:
                level += 1
            elif tok.type in INTERPOLATED_END:
                level -= 1
                if level == 0:
                    break
            elif tok.type in INTERPOLATED_MIDDLE and level == 1:
                parts.append(tok.string)
        return "".join(parts)


class IndentRule(Rule):
    rule_id = "indent"
    description = "Enforce a consistent indentation unit"
    schema = (EnumOption("tab", 2, 4),)
    defaults = (4,)

    def check(self, unit, options) -> Iterator[Finding]:
        style = options[0]
        stack = [""]

        for tok in unit.tokens:
            if tok.type == tokenize.DEDENT:
                if len(stack) > 1:
                    stack.pop()
                continue
            if tok.type != tokenize.INDENT:
                continue

            current = tok.string
            previous = stack[-1]
            stack.append(current)
            line = tok.start[0]

            if style == "tab":
                if current.strip("\t"):
                    yield Finding(line, 0, "Expected indentation with tabs but found spaces.")
                elif len(current) - len(previous) != 1:
                    yield Finding(line, 0, f"Expected indentation of {len(previous) + 1} tab(s) but found {len(current)}.")
                continue

            if "\t" in current:
                yield Finding(line, 0, "Expected indentation with spaces but found tabs.")
            elif len(current) - len(previous) != style:
                expected = len(previous) + style
                yield Finding(line, 0, f"Expected indentation of {expected} spaces but found {len(current)}.")


class MaxLenRule(Rule):
    rule_id = "max-len"
    description = "Enforce a maximum line length"
    schema = (EnumOption(79, 88, 100, 120),)
    defaults = (79,)

    def check(self, unit, options) -> Iterator[Finding]:
        limit = options[0]
        for lineno, line in enumerate(unit.lines, start=1):
            if len(line) > limit:
                yield Finding(lineno, limit, f"Line is {len(line)} characters long (maximum {limit}).")


class LinebreakStyleRule(Rule):
    rule_id = "linebreak-style"
    description = "Enforce consistent line endings"
    schema = (EnumOption("unix", "windows"),)
    defaults = ("unix",)

    def check(self, unit, options) -> Iterator[Finding]:
        windows = options[0] == "windows"
        physical = unit.text.split("\n")
        # The last piece has no terminator
        for lineno, line in enumerate(physical[:-1], start=1):
            has_cr = line.endswith("\r")
            if windows and not has_cr:
                yield Finding(lineno, len(line), "Expected linebreaks to be 'CRLF' but found 'LF'.")
            elif not windows and has_cr:
                yield Finding(lineno, len(line) - 1, "Expected linebreaks to be 'LF' but found 'CRLF'.")


class EolLastRule(Rule):
    rule_id = "eol-last"
    description = "Require or forbid a newline at the end of files"
    schema = (EnumOption("always", "never"),)
    defaults = ("always",)

    def check(self, unit, options) -> Iterator[Finding]:
        if not unit.text:
            return
        ends_with_newline = unit.text.endswith("\n")
        last_line = max(unit.line_count, 1)
        if options[0] == "always" and not ends_with_newline:
            yield Finding(last_line, len(unit.lines[-1]), "Newline required at end of file but not found.")
        elif options[0] == "never" and ends_with_newline:
            yield Finding(last_line, len(unit.lines[-1]), "Newline not allowed at end of file.")


class NoTrailingSpacesRule(Rule):
    rule_id = "no-trailing-spaces"
    description = "Disallow trailing whitespace at the end of lines"
    schema = (ObjectOption(skipBlankLines=[True], ignoreComments=[True]),)
    defaults = ({},)

    def check(self, unit, options) -> Iterator[Finding]:
        settings = _object_option(options, 0)
        skip_blank = bool(settings.get("skipBlankLines", False))
        ignore_comments = bool(settings.get("ignoreComments", False))
        comment_lines = {tok.start[0] for tok in unit.tokens if tok.type == tokenize.COMMENT}

        for lineno, line in enumerate(unit.lines, start=1):
            stripped = line.rstrip(" \t\f")
            if stripped == line:
                continue
            if skip_blank and not stripped:
                continue
            if ignore_comments and lineno in comment_lines:
                continue
            yield Finding(lineno, len(stripped), "Trailing spaces not allowed.")


class NoMultipleEmptyLinesRule(Rule):
    rule_id = "no-multiple-empty-lines"
    description = "Disallow runs of consecutive blank lines"
    schema = (ObjectOption(max=[1, 2]),)
    defaults = ({},)

    def check(self, unit, options) -> Iterator[Finding]:
        maximum = _object_option(options, 0).get("max", 2)
        blank_run = 0
        for lineno, line in enumerate(unit.lines, start=1):
            if line.strip():
                blank_run = 0
                continue
            blank_run += 1
            if blank_run == maximum + 1:
                yield Finding(lineno, 0, f"More than {maximum} blank line(s) not allowed.")
