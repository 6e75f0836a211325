"""Tests for origin resolution — search sets, matching and the ambiguity policy."""

from __future__ import annotations

from pathlib import Path

import pytest

from extctl.extensions.base import Extension
from extctl.extensions.diagnostics import DiagnosticKind, DiagnosticLog
from extctl.extensions.origin import OriginPolicy, resolve_origin, search_roots
from tests.conftest import write_source


class _Unit(Extension):
    pass


def _unit(name: str, *, builtin: bool = False) -> Extension:
    unit = _Unit()
    unit.name = name
    unit.is_builtin = builtin
    return unit


@pytest.fixture
def second_root(tmp_path: Path) -> Path:
    root = tmp_path / "more-extensions"
    root.mkdir()
    return root


class TestSearchRoots:
    def test_builtin_searches_only_index_zero(self, tmp_path: Path) -> None:
        paths = [tmp_path / "a", tmp_path / "b", tmp_path / "c"]
        assert search_roots(_unit("Weather", builtin=True), paths) == [paths[0]]

    def test_non_builtin_skips_index_zero(self, tmp_path: Path) -> None:
        paths = [tmp_path / "a", tmp_path / "b", tmp_path / "c"]
        assert search_roots(_unit("Chat"), paths) == paths[1:]

    def test_non_builtin_with_only_builtin_root(self, tmp_path: Path) -> None:
        assert search_roots(_unit("Chat"), [tmp_path]) == []


class TestResolveOrigin:
    def test_builtin_found_in_root_zero(self, builtin_root: Path) -> None:
        expected = write_source(builtin_root, "weatherdir", "Weather")
        unit = _unit("Weather", builtin=True)

        result = resolve_origin(unit, [builtin_root])

        assert unit.origin_directory == expected
        assert result.origin == expected
        assert not result.ambiguous

    def test_builtin_ignores_extension_roots(
        self, builtin_root: Path, extension_root: Path
    ) -> None:
        write_source(extension_root, "weatherdir", "Weather")
        diagnostics = DiagnosticLog()
        unit = _unit("Weather", builtin=True)

        resolve_origin(unit, [builtin_root, extension_root], diagnostics=diagnostics)

        assert unit.origin_directory is None
        assert len(diagnostics.of_kind(DiagnosticKind.ORIGIN_NOT_FOUND)) == 1

    def test_non_builtin_ignores_builtin_root(
        self, builtin_root: Path, extension_root: Path
    ) -> None:
        write_source(builtin_root, "chat", "Chat")
        unit = _unit("Chat")
        resolve_origin(unit, [builtin_root, extension_root])
        assert unit.origin_directory is None

    def test_non_builtin_found_in_later_root(
        self, builtin_root: Path, extension_root: Path, second_root: Path
    ) -> None:
        (extension_root / "unrelated").mkdir()
        expected = write_source(second_root, "chat", "Chat")
        unit = _unit("Chat")

        result = resolve_origin(unit, [builtin_root, extension_root, second_root])

        assert unit.origin_directory == expected
        assert result.searched == (extension_root / "unrelated", expected)

    def test_not_found_keeps_origin_unset(self, builtin_root: Path, extension_root: Path) -> None:
        (extension_root / "other").mkdir()
        diagnostics = DiagnosticLog()
        unit = _unit("Chat")

        result = resolve_origin(unit, [builtin_root, extension_root], diagnostics=diagnostics)

        assert result.origin is None
        assert unit.origin_directory is None
        [diagnostic] = diagnostics
        assert diagnostic.kind == DiagnosticKind.ORIGIN_NOT_FOUND
        assert diagnostic.extension == "Chat"
        assert "Chat.py" in diagnostic.message

    def test_does_not_recurse_beyond_one_level(
        self, builtin_root: Path, extension_root: Path
    ) -> None:
        write_source(extension_root, "outer/inner", "Chat")
        unit = _unit("Chat")
        resolve_origin(unit, [builtin_root, extension_root])
        assert unit.origin_directory is None

    def test_files_directly_in_root_do_not_match(
        self, builtin_root: Path, extension_root: Path
    ) -> None:
        (extension_root / "Chat.py").write_text("")
        unit = _unit("Chat")
        resolve_origin(unit, [builtin_root, extension_root])
        assert unit.origin_directory is None

    def test_name_must_match_exactly(self, builtin_root: Path, extension_root: Path) -> None:
        write_source(extension_root, "chat", "ChatBot")
        (extension_root / "chat" / "Chat.txt").write_text("")
        unit = _unit("Chat")
        resolve_origin(unit, [builtin_root, extension_root])
        assert unit.origin_directory is None

    def test_custom_source_suffix(self, builtin_root: Path, extension_root: Path) -> None:
        directory = extension_root / "chat"
        directory.mkdir()
        (directory / "Chat.cs").write_text("")
        unit = _unit("Chat")

        resolve_origin(unit, [builtin_root, extension_root], source_suffix=".cs")

        assert unit.origin_directory == directory

    def test_unlistable_root_counts_as_empty(self, builtin_root: Path, tmp_path: Path) -> None:
        diagnostics = DiagnosticLog()
        unit = _unit("Chat")
        resolve_origin(unit, [builtin_root, tmp_path / "vanished"], diagnostics=diagnostics)
        assert unit.origin_directory is None
        assert len(diagnostics.of_kind(DiagnosticKind.ORIGIN_NOT_FOUND)) == 1


class TestAmbiguityPolicy:
    @pytest.fixture
    def two_matches(self, builtin_root: Path, extension_root: Path) -> tuple[Path, Path]:
        first = write_source(extension_root, "a-chat", "Chat")
        second = write_source(extension_root, "b-chat", "Chat")
        return first, second

    def test_first_match_wins_by_default(
        self, builtin_root: Path, extension_root: Path, two_matches: tuple[Path, Path]
    ) -> None:
        first, second = two_matches
        diagnostics = DiagnosticLog()
        unit = _unit("Chat")

        result = resolve_origin(unit, [builtin_root, extension_root], diagnostics=diagnostics)

        assert unit.origin_directory == first
        assert result.matches == (first, second)
        assert result.ambiguous
        [diagnostic] = diagnostics.of_kind(DiagnosticKind.AMBIGUOUS_ORIGIN)
        assert diagnostic.path == str(second)

    def test_last_match_policy_overwrites(
        self, builtin_root: Path, extension_root: Path, two_matches: tuple[Path, Path]
    ) -> None:
        _first, second = two_matches
        diagnostics = DiagnosticLog()
        unit = _unit("Chat")

        resolve_origin(
            unit,
            [builtin_root, extension_root],
            policy=OriginPolicy.LAST,
            diagnostics=diagnostics,
        )

        assert unit.origin_directory == second
        assert len(diagnostics.of_kind(DiagnosticKind.AMBIGUOUS_ORIGIN)) == 1

    def test_matches_across_roots(
        self, builtin_root: Path, extension_root: Path, second_root: Path
    ) -> None:
        first = write_source(extension_root, "chat", "Chat")
        write_source(second_root, "chat", "Chat")
        write_source(second_root, "chat-fork", "Chat")
        diagnostics = DiagnosticLog()
        unit = _unit("Chat")

        resolve_origin(unit, [builtin_root, extension_root, second_root], diagnostics=diagnostics)

        assert unit.origin_directory == first
        assert len(diagnostics.of_kind(DiagnosticKind.AMBIGUOUS_ORIGIN)) == 2
        assert not diagnostics.of_kind(DiagnosticKind.ORIGIN_NOT_FOUND)

    def test_policy_accepts_plain_string(
        self, builtin_root: Path, extension_root: Path, two_matches: tuple[Path, Path]
    ) -> None:
        _first, second = two_matches
        unit = _unit("Chat")
        resolve_origin(unit, [builtin_root, extension_root], policy="last")  # type: ignore[arg-type]
        assert unit.origin_directory == second
