import unittest

from meandering.services.ai.outline_planner import OutlinePlanner, parse_section_titles

from fakes import OUTLINE_REPLY, ScriptedGroq


class ParseSectionTitlesTests(unittest.TestCase):
    def test_reads_numbered_top_level_sections(self) -> None:
        self.assertEqual(
            parse_section_titles(OUTLINE_REPLY),
            (
                "Morning duties of the harbour clerk",
                "The long afternoon of ledgers",
                "Closing up as the tide turns",
            ),
        )

    def test_accepts_markdown_decorations(self) -> None:
        text = "## 1. Wells\n**2. Buckets**\nSection 3: Ropes\n"
        self.assertEqual(parse_section_titles(text), ("Wells", "Buckets", "Ropes"))

    def test_ignores_subsections(self) -> None:
        text = "1. Wells\n  1.1 Digging\n1.2 Lining\n2. Buckets\n"
        self.assertEqual(parse_section_titles(text), ("Wells", "Buckets"))

    def test_keeps_at_most_three(self) -> None:
        text = "\n".join(f"{n}. Part {n}" for n in range(1, 6))
        self.assertEqual(parse_section_titles(text), ("Part 1", "Part 2", "Part 3"))

    def test_no_numbered_lines(self) -> None:
        self.assertEqual(parse_section_titles("Wells, buckets and ropes."), ())


class OutlinePlannerTests(unittest.TestCase):
    def test_plan_uses_outline_call_settings(self) -> None:
        groq = ScriptedGroq()
        outline = OutlinePlanner(groq, max_tokens=1200, temperature=0.7).plan("Harbour clerks")

        self.assertEqual(len(outline.section_titles), 3)
        self.assertFalse(outline.fell_back)
        self.assertEqual(outline.text, OUTLINE_REPLY)
        call = groq.calls_of("outline")[0]
        self.assertIn('"Harbour clerks"', call["prompt"])
        self.assertEqual(call["max_tokens"], 1200)
        self.assertEqual(call["temperature"], 0.7)

    def test_falls_back_to_topic(self) -> None:
        groq = ScriptedGroq(outline="A rambling outline with no numbers at all.")
        outline = OutlinePlanner(groq).plan("Harbour clerks")
        self.assertTrue(outline.fell_back)
        self.assertEqual(outline.section_titles, ("Harbour clerks",))


if __name__ == "__main__":
    unittest.main()
