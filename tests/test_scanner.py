"""
Tests for call-site patterns and the controller source scanner.
"""

import re

import pytest

from ack_api_extractor.analyze.patterns import (
    DEFAULT_PATTERNS,
    CallPattern,
    GenericClientPattern,
    RawClientPattern,
    RecordAPICallPattern,
)
from ack_api_extractor.analyze.scanner import (
    find_operation,
    find_operation_in_controller,
    iter_source_files,
)
from ack_api_extractor.models import SourceLocation


def matches(pattern: CallPattern, operation: str, line: str) -> bool:
    return pattern.compile(operation).search(line) is not None


class TestRecordAPICallPattern:
    """Tests for the metrics recording call pattern."""

    def test_matches_second_argument(self):
        line = '\trm.metrics.RecordAPICall("CREATE", "CreateTable", err)'

        assert matches(RecordAPICallPattern(), "CreateTable", line)

    def test_matches_identifier_first_argument(self):
        assert matches(RecordAPICallPattern(), "Foo", 'RecordAPICall(ctx, "Foo", nil)')

    def test_ignores_first_argument(self):
        assert not matches(RecordAPICallPattern(), "CREATE", 'RecordAPICall("CREATE", "X", err)')

    def test_no_substring_match(self):
        line = 'rm.metrics.RecordAPICall("UPDATE", "BatchUpdateTable", err)'

        assert not matches(RecordAPICallPattern(), "UpdateTable", line)

    def test_no_prefix_match(self):
        line = 'rm.metrics.RecordAPICall("UPDATE", "UpdateTableReplica", err)'

        assert not matches(RecordAPICallPattern(), "UpdateTable", line)


class TestReceiverPatterns:
    """Tests for SDK client call patterns."""

    def test_raw_client_call(self):
        line = "resp, err = rm.sdkapi.DescribeTable(ctx, input)"

        assert matches(RawClientPattern(), "DescribeTable", line)

    def test_raw_client_with_context(self):
        line = "resp, err = rm.sdkapi.DescribeTableWithContext(ctx, input)"

        assert matches(RawClientPattern(), "DescribeTable", line)

    def test_raw_client_no_substring_match(self):
        line = "resp, err = rm.sdkapi.BatchUpdateTable(ctx, input)"

        assert not matches(RawClientPattern(), "UpdateTable", line)

    def test_raw_client_requires_call(self):
        assert not matches(RawClientPattern(), "DescribeTable", "// sdkapi.DescribeTable docs")

    def test_generic_client_call(self):
        assert matches(GenericClientPattern(), "GetItem", "out, err := rm.client.GetItem(ctx, in)")

    def test_generic_client_wrong_receiver(self):
        assert not matches(GenericClientPattern(), "GetItem", "rm.sdkclient.GetItem(ctx, in)")

    def test_plain_mention_does_not_match(self):
        line = '// UpdateTable is called from the hooks'

        for pattern in DEFAULT_PATTERNS:
            assert not matches(pattern, "UpdateTable", line)

    def test_default_pattern_order(self):
        assert [p.name for p in DEFAULT_PATTERNS] == [
            "record_api_call",
            "raw_api_client",
            "generic_client",
        ]


class TestIterSourceFiles:
    """Tests for deterministic traversal."""

    def test_sorted_directories_then_files(self, tmp_path):
        for relative in ["b/z.go", "b/a.go", "a/y.go", "root.go", "notes.txt"]:
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")

        files = [p.relative_to(tmp_path).as_posix() for p in iter_source_files(tmp_path)]

        assert files == ["root.go", "a/y.go", "b/a.go", "b/z.go"]


class TestFindOperation:
    """Tests for first-match-wins scanning."""

    def test_finds_line_and_relative_path(self, make_controller):
        controller = make_controller(
            "svc",
            sources={
                "pkg/resource/table/sdk.go": (
                    "package table\n"
                    "\n"
                    'func f() { rm.metrics.RecordAPICall("CREATE", "CreateTable", err) }\n'
                )
            },
        )

        location = find_operation(controller, "CreateTable")

        assert location == SourceLocation(file="pkg/resource/table/sdk.go", line=3)

    def test_first_file_in_traversal_order_wins(self, make_controller):
        call = "resp, err := rm.sdkapi.CreateTable(ctx, input)\n"
        controller = make_controller(
            "svc",
            sources={
                "pkg/b/sdk.go": call,
                "pkg/a/hooks.go": "package a\n" + call,
            },
        )

        location = find_operation(controller, "CreateTable")

        assert location == SourceLocation(file="pkg/a/hooks.go", line=2)

    def test_first_line_wins_over_earlier_pattern_kind(self, make_controller):
        controller = make_controller(
            "svc",
            sources={
                "pkg/sdk.go": (
                    "x := rm.client.CreateTable(ctx, in)\n"
                    'rm.metrics.RecordAPICall("CREATE", "CreateTable", err)\n'
                )
            },
        )

        assert find_operation(controller, "CreateTable").line == 1

    def test_only_go_files_under_pkg(self, make_controller):
        controller = make_controller(
            "svc",
            sources={
                "cmd/main.go": "rm.sdkapi.CreateTable(ctx, in)\n",
                "pkg/notes.md": "rm.sdkapi.CreateTable(ctx, in)\n",
            },
        )

        assert find_operation(controller, "CreateTable") is None

    def test_missing_pkg_directory(self, make_controller):
        controller = make_controller("svc")

        assert find_operation(controller, "CreateTable") is None

    def test_unreadable_file_is_skipped(self, make_controller):
        controller = make_controller(
            "svc", sources={"pkg/b.go": "rm.sdkapi.CreateTable(ctx, in)\n"}
        )
        (controller / "pkg" / "a.go").write_bytes(b"\xff\xfe\x00invalid utf-8 \xc3\x28\n")

        location = find_operation(controller, "CreateTable")

        assert location == SourceLocation(file="pkg/b.go", line=1)

    def test_traversal_error_returns_not_found(self, make_controller, monkeypatch):
        controller = make_controller(
            "svc", sources={"pkg/a.go": "rm.sdkapi.CreateTable(ctx, in)\n"}
        )

        def failing_walk(root, onerror=None):
            onerror(PermissionError(13, "Permission denied", str(root)))
            yield from ()

        monkeypatch.setattr("ack_api_extractor.analyze.scanner.os.walk", failing_walk)

        assert find_operation(controller, "CreateTable") is None

    def test_custom_pattern_list(self, make_controller):
        class PaginatorPattern(CallPattern):
            @property
            def name(self) -> str:
                return "paginator"

            def compile(self, operation: str) -> re.Pattern:
                return re.compile(rf"\bNew{re.escape(operation)}Paginator\(")

        controller = make_controller(
            "svc", sources={"pkg/a.go": "p := NewListTablesPaginator(client, in)\n"}
        )

        assert find_operation(controller, "ListTables") is None
        assert find_operation(controller, "ListTables", patterns=[PaginatorPattern()]) == (
            SourceLocation(file="pkg/a.go", line=1)
        )


class TestFindOperationInController:
    """Tests for lookup by service name."""

    def test_no_controller(self, layout):
        assert find_operation_in_controller("svc", "Foo", layout.controllers_root) is None

    def test_with_controller(self, layout, make_controller):
        make_controller("svc", sources={"pkg/a.go": 'RecordAPICall(ctx, "Foo", nil)\n'})

        location = find_operation_in_controller("svc", "Foo", layout.controllers_root)

        assert location == SourceLocation(file="pkg/a.go", line=1)

    @pytest.mark.parametrize(
        "line",
        [
            'rm.metrics.RecordAPICall("READ_ONE", "Foo", err)',
            "rm.sdkapi.Foo(ctx, input)",
            "rm.client.FooWithContext(ctx, input)",
        ],
    )
    def test_each_default_pattern_detects(self, layout, make_controller, line):
        make_controller("svc", sources={"pkg/a.go": line + "\n"})

        assert find_operation_in_controller("svc", "Foo", layout.controllers_root) is not None
