"""Unit tests for the doiuse-backed feature detector."""

import json

import pytest

from compatbot.config.settings import Settings
from compatbot.models.outputs import Finding
from compatbot.services import feature_detector
from compatbot.services.feature_detector import (
    DetectorError,
    DoiuseDetector,
    FeatureDetector,
    parse_usage,
    run_tool,
    stylus_line_map,
)

COMPILED_STYLUS = "\n".join(
    [
        "/* line 1 : stdin */",
        ".a {",
        "  display: flex;",
        "}",
        "/* line 4 : stdin */",
        ".b {",
        "  user-select: none;",
        "}",
    ]
)


def _usage(line: int, title: str, missing) -> str:
    return json.dumps(
        {
            "message": f"<streaming css input>:{line}:3: {title} not supported by: {missing}",
            "feature": "feature-id",
            "featureData": {"title": title, "missing": missing, "partial": ""},
            "usage": {"source": {"start": {"line": line, "column": 3}}},
        }
    )


class TestStylusLineMap:
    """Tests for stylus_line_map()."""

    def test_maps_rules_to_source_lines(self) -> None:
        mapping = stylus_line_map(COMPILED_STYLUS)
        assert mapping[2] == 1
        assert mapping[3] == 1
        assert mapping[6] == 4
        assert mapping[7] == 4

    def test_comment_lines_and_preamble_are_unmapped(self) -> None:
        mapping = stylus_line_map("@charset 'utf-8';\n" + COMPILED_STYLUS)
        assert 1 not in mapping
        assert 2 not in mapping


class TestParseUsage:
    """Tests for parse_usage()."""

    def test_structured_record(self) -> None:
        record = json.loads(_usage(8, "CSS3 Box-sizing", "IE (7)"))
        assert parse_usage(record) == Finding(
            line=8, title="CSS3 Box-sizing", missing=["IE (7)"]
        )

    def test_missing_as_list(self) -> None:
        record = json.loads(_usage(2, "Flexbox", ["IE (9)", "Opera Mini (all)"]))
        assert parse_usage(record).missing == ["IE (9)", "Opera Mini (all)"]

    def test_falls_back_to_message_position(self) -> None:
        record = {
            "message": "main.css:12:5: CSS Filter Effects not supported by: IE (11)",
            "featureData": {"title": "CSS Filter Effects", "missing": "IE (11)"},
        }
        assert parse_usage(record).line == 12

    def test_no_position_at_all(self) -> None:
        assert parse_usage({"featureData": {"title": "x"}}) is None


class TestRunTool:
    """Tests for run_tool() against real processes."""

    @pytest.mark.asyncio
    async def test_returns_stdout(self) -> None:
        assert await run_tool(["cat"], "a { }") == "a { }"

    @pytest.mark.asyncio
    async def test_missing_executable(self) -> None:
        with pytest.raises(DetectorError, match="Could not start"):
            await run_tool(["compatbot-no-such-binary"], "")

    @pytest.mark.asyncio
    async def test_non_zero_exit(self) -> None:
        with pytest.raises(DetectorError, match="status 3"):
            await run_tool(["sh", "-c", "echo broken >&2; exit 3"], "")


class TestDoiuseDetector:
    """Tests for DoiuseDetector.detect()."""

    def test_satisfies_protocol(self, test_settings: Settings) -> None:
        assert isinstance(DoiuseDetector(test_settings), FeatureDetector)

    @pytest.mark.asyncio
    async def test_css(self, monkeypatch, test_settings: Settings) -> None:
        calls = []

        async def fake_run_tool(command, stdin):
            calls.append((command, stdin))
            return "\n".join(
                [_usage(3, "Flexbox", "IE (9)"), "", "not json", _usage(7, "Grid", "IE (10)")]
            )

        monkeypatch.setattr(feature_detector, "run_tool", fake_run_tool)
        detector = DoiuseDetector(test_settings)

        findings = [
            finding
            async for finding in detector.detect(
                ".a{}", ("last 2 versions", "ie >= 9"), filename="a.css", syntax="css"
            )
        ]

        assert [(f.line, f.title) for f in findings] == [(3, "Flexbox"), (7, "Grid")]
        assert calls == [
            (
                ["doiuse", "--json", "--browsers", "last 2 versions, ie >= 9"],
                ".a{}",
            )
        ]

    @pytest.mark.asyncio
    async def test_stylus_lines_are_mapped_back(
        self, monkeypatch, test_settings: Settings
    ) -> None:
        commands = []

        async def fake_run_tool(command, stdin):
            commands.append(command)
            if command[0] == "stylus":
                return COMPILED_STYLUS
            assert stdin == COMPILED_STYLUS
            return "\n".join(
                [_usage(7, "CSS user-select: none", "IE (9)"), _usage(5, "Orphan", "x")]
            )

        monkeypatch.setattr(feature_detector, "run_tool", fake_run_tool)
        detector = DoiuseDetector(test_settings)

        findings = [
            finding
            async for finding in detector.detect(
                ".a\n  display flex\n\n.b\n  user-select none\n",
                ("last 2 versions",),
                filename="button.styl",
                syntax="stylus",
            )
        ]

        assert commands[0] == ["stylus", "--print", "--line-numbers"]
        assert findings == [
            Finding(line=4, title="CSS user-select: none", missing=["IE (9)"])
        ]

    @pytest.mark.asyncio
    async def test_configured_command(self, monkeypatch) -> None:
        settings = Settings(_env_file=None, doiuse_command=["npx", "doiuse"])
        seen = []

        async def fake_run_tool(command, stdin):
            seen.append(command)
            return ""

        monkeypatch.setattr(feature_detector, "run_tool", fake_run_tool)

        findings = [
            f
            async for f in DoiuseDetector(settings).detect(
                "", ("> 1%",), filename="a.css", syntax="css"
            )
        ]

        assert findings == []
        assert seen[0][:3] == ["npx", "doiuse", "--json"]
