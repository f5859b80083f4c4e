"""Browser feature detection backed by the doiuse CLI."""

import asyncio
import json
import logging
import re
from collections.abc import AsyncIterator, Sequence
from typing import Any, Protocol, runtime_checkable

from compatbot.config.settings import Settings, settings as default_settings
from compatbot.models.outputs import Finding
from compatbot.utils.filters import StylesheetKind

logger = logging.getLogger(__name__)

# Emitted by `stylus --line-numbers` before each compiled rule
STYLUS_LINE_COMMENT = re.compile(r"/\* line (\d+) : .* \*/")

# Fallback when a JSON record lacks a structured source position,
# e.g. "main.css:8:3: CSS3 Box-sizing not supported by: IE (7)"
MESSAGE_POSITION = re.compile(r":(\d+):\d+: ")


class DetectorError(Exception):
    """Raised when an external detection or compilation tool fails."""


@runtime_checkable
class FeatureDetector(Protocol):
    """Anything that can report unsupported features in a stylesheet."""

    def detect(
        self,
        contents: str,
        targets: Sequence[str],
        *,
        filename: str,
        syntax: StylesheetKind,
    ) -> AsyncIterator[Finding]:
        """Yield findings for the given stylesheet contents.

        Args:
            contents: Post-change file contents
            targets: Browser targets to check against
            filename: Path of the file, used in messages
            syntax: "css" or "stylus"

        Returns:
            Async iterator of findings with post-change line numbers
        """
        ...


async def run_tool(command: Sequence[str], stdin: str) -> str:
    """Run an external tool, feeding it text on stdin.

    Args:
        command: Executable and arguments
        stdin: Text to write to the tool's standard input

    Returns:
        The tool's standard output

    Raises:
        DetectorError: If the executable is missing or exits non-zero
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise DetectorError(f"Could not start {command[0]}: {e}") from e

    stdout, stderr = await process.communicate(stdin.encode("utf-8"))
    if process.returncode != 0:
        raise DetectorError(
            f"{command[0]} exited with status {process.returncode}: "
            f"{stderr.decode('utf-8', errors='replace').strip()}"
        )
    return stdout.decode("utf-8", errors="replace")


def stylus_line_map(css: str) -> dict[int, int]:
    """Map compiled CSS lines back to Stylus source lines.

    Every CSS line after a ``/* line N : file */`` comment belongs to
    Stylus line N until the next such comment.

    Args:
        css: Output of ``stylus --line-numbers``

    Returns:
        CSS line number -> Stylus line number
    """
    mapping: dict[int, int] = {}
    current: int | None = None
    for css_line, text in enumerate(css.splitlines(), start=1):
        match = STYLUS_LINE_COMMENT.search(text)
        if match:
            current = int(match.group(1))
        elif current is not None:
            mapping[css_line] = current
    return mapping


def parse_usage(record: dict[str, Any]) -> Finding | None:
    """Convert one doiuse JSON usage record into a Finding.

    Args:
        record: Decoded JSON object printed by ``doiuse --json``

    Returns:
        Finding, or None if the record carries no line number
    """
    feature_data = record.get("featureData") or {}
    title = feature_data.get("title") or record.get("feature") or "Unknown feature"
    missing = feature_data.get("missing") or []
    if isinstance(missing, str):
        missing = [missing]

    line = (
        ((record.get("usage") or {}).get("source") or {}).get("start") or {}
    ).get("line")
    if line is None:
        match = MESSAGE_POSITION.search(record.get("message", ""))
        if match is None:
            return None
        line = int(match.group(1))

    return Finding(line=int(line), title=title, missing=list(missing))


class DoiuseDetector:
    """Run ``doiuse --json`` on stylesheet contents.

    Stylus sources are first compiled with ``stylus --print --line-numbers``
    and findings are mapped back to the Stylus line they came from.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    async def detect(
        self,
        contents: str,
        targets: Sequence[str],
        *,
        filename: str,
        syntax: StylesheetKind,
    ) -> AsyncIterator[Finding]:
        line_map: dict[int, int] | None = None
        css = contents
        if syntax == "stylus":
            css = await run_tool(
                [*self.settings.stylus_command, "--print", "--line-numbers"], contents
            )
            line_map = stylus_line_map(css)

        command = [
            *self.settings.doiuse_command,
            "--json",
            "--browsers",
            ", ".join(targets),
        ]
        output = await run_tool(command, css)

        for raw in output.splitlines():
            raw = raw.strip()
            if not raw:
                continue
            try:
                record = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug(f"Ignoring non-JSON doiuse output for {filename}: {raw}")
                continue

            finding = parse_usage(record)
            if finding is None:
                continue
            if line_map is not None:
                source_line = line_map.get(finding.line)
                if source_line is None:
                    logger.debug(
                        f"Dropping {finding.title} in {filename}: "
                        f"compiled line {finding.line} has no Stylus source line"
                    )
                    continue
                finding = finding.model_copy(update={"line": source_line})
            yield finding
