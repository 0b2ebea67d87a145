import unittest

from mcp_server_linode.errors import ArgumentError, ArgumentReason, UpstreamError
from mcp_server_linode.handlers.instances import format_instance, render_instance
from mcp_server_linode.handlers.reference import format_region
from mcp_server_linode.rendering import (
    ToolResult,
    assignment,
    join,
    key_values,
    render_confirmation,
    render_detail,
    render_list,
    truncate,
    visibility,
)
from stub_linode_api import INSTANCE, REGIONS


class RenderingTests(unittest.TestCase):
    def test_empty_list_is_header_only(self) -> None:
        self.assertEqual(render_list("domains", [], lambda item: "unused"), "Found 0 domains:")

    def test_list_blocks_are_separated_by_blank_lines(self) -> None:
        text = render_list("things", [{"id": 1}, {"id": 2}], lambda item: f"ID: {item['id']}\n")

        self.assertEqual(text, "Found 2 things:\n\nID: 1\n\nID: 2")

    def test_detail_skips_empty_values_and_sections(self) -> None:
        text = render_detail(
            "Widget",
            [("ID", 4), ("Label", ""), ("Tags", []), ("Zero", 0)],
            sections=[("Empty", []), ("Parts", ["  - a", "  - b"])],
        )

        self.assertEqual(text, "Widget Details:\nID: 4\nZero: 0\n\nParts:\n  - a\n  - b")

    def test_confirmation(self) -> None:
        self.assertEqual(render_confirmation("Thing created successfully", [("ID", 3)]), "Thing created successfully:\nID: 3")
        self.assertEqual(render_confirmation("Thing 3 deleted successfully"), "Thing 3 deleted successfully")

    def test_small_helpers(self) -> None:
        self.assertEqual(visibility(True), "Public")
        self.assertEqual(visibility(None), "Private")
        self.assertEqual(assignment(None), "Unassigned")
        self.assertEqual(assignment(12), "Assigned to Linode 12")
        self.assertEqual(join(["a", "b"]), "a, b")
        self.assertEqual(join([], "none"), "none")
        self.assertEqual(key_values([("A", 1), ("B", None)], "  "), ["  A: 1"])

    def test_truncate(self) -> None:
        self.assertEqual(truncate("short"), "short")
        long_text = "x" * 150
        self.assertEqual(len(truncate(long_text)), 100)
        self.assertTrue(truncate(long_text).endswith("..."))

    def test_rendering_is_deterministic(self) -> None:
        for render in (
            lambda: render_list("instances", [INSTANCE, INSTANCE], format_instance),
            lambda: render_instance(INSTANCE),
            lambda: render_list("regions", REGIONS, format_region),
        ):
            self.assertEqual(render(), render())

    def test_error_results_carry_structured_payload(self) -> None:
        result = ToolResult.from_error(ArgumentError("instance_id", ArgumentReason.MISSING))

        self.assertTrue(result.is_error)
        self.assertEqual(result.structured["field"], "instance_id")
        self.assertEqual(result.structured["reason"], "missing")

        upstream = ToolResult.from_error(UpstreamError(404, ["Not found"])).to_call_tool_result()
        self.assertTrue(upstream.isError)
        self.assertEqual(upstream.content[0].text, "[404] Not found")
        self.assertEqual(upstream.structuredContent["httpStatus"], 404)


if __name__ == "__main__":
    unittest.main()
