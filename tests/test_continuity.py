import unittest

from meandering.services.ai.continuity import (
    ChunkSummary,
    ContinuityState,
    ContinuityTracker,
    last_sentences,
    merge_used_elements,
    parse_summary,
)

from fakes import SUMMARY_REPLY, ScriptedGroq, lecture_text


class ParseSummaryTests(unittest.TestCase):
    def test_splits_prose_and_used_elements(self) -> None:
        parsed = parse_summary(SUMMARY_REPLY)
        self.assertTrue(parsed.summary.startswith("The passage covered"))
        self.assertNotIn("USED:", parsed.summary)
        self.assertEqual(parsed.new_used_elements, ("Ostia", "Marcus the clerk", "one hundred"))

    def test_missing_marker_keeps_everything_as_summary(self) -> None:
        parsed = parse_summary("  Just a summary with no list.  ")
        self.assertEqual(parsed, ChunkSummary(summary="Just a summary with no list."))

    def test_blank_elements_are_dropped(self) -> None:
        parsed = parse_summary("Summary.\nUSED: Rome, , Carthage,")
        self.assertEqual(parsed.new_used_elements, ("Rome", "Carthage"))


class MergeUsedElementsTests(unittest.TestCase):
    def test_merges_in_order_without_repeats(self) -> None:
        merged = merge_used_elements(("A", "B"), ("B", "C"))
        self.assertEqual(merged, ("A", "B", "C"))

    def test_matching_is_exact(self) -> None:
        merged = merge_used_elements(("Rome",), ("rome",))
        self.assertEqual(merged, ("Rome", "rome"))


class LastSentencesTests(unittest.TestCase):
    def test_returns_last_three_sentences(self) -> None:
        text = "One. Two. Three. Four. Five."
        self.assertEqual(last_sentences(text), "Three. Four. Five.")

    def test_falls_back_to_trailing_characters(self) -> None:
        text = "x" * 400 + ". Only two sentences."
        self.assertEqual(last_sentences(text), text[-300:].strip())

    def test_short_text_fallback_returns_whole_text(self) -> None:
        self.assertEqual(last_sentences("  No punctuation at all  "), "No punctuation at all")


class ContinuityStateTests(unittest.TestCase):
    def test_initial_state_is_empty(self) -> None:
        self.assertTrue(ContinuityState().is_empty)

    def test_advance_returns_new_state_and_keeps_old_one(self) -> None:
        state = ContinuityState(used_elements=("Ostia",))
        advanced = state.advance(ChunkSummary("Summary.", ("Ostia", "Portus")), "One. Two. Three.")
        self.assertEqual(state.used_elements, ("Ostia",))
        self.assertEqual(advanced.used_elements, ("Ostia", "Portus"))
        self.assertEqual(advanced.previous_summary, "Summary.")
        self.assertEqual(advanced.previous_last_sentences, "One. Two. Three.")

    def test_used_elements_only_grow(self) -> None:
        state = ContinuityState()
        for elements in [("A", "B"), ("B",), (), ("C",)]:
            before = state.used_elements
            state = state.advance(ChunkSummary("s", elements), "a. b. c.")
            self.assertEqual(state.used_elements[: len(before)], before)
        self.assertEqual(state.used_elements, ("A", "B", "C"))

    def test_render_includes_all_parts(self) -> None:
        state = ContinuityState("The summary.", ("Ostia", "Portus"), "Last words.")
        block = state.render()
        self.assertIn("The summary.", block)
        self.assertIn("Ostia, Portus", block)
        self.assertIn('"Last words."', block)


class ContinuityTrackerTests(unittest.TestCase):
    def test_track_issues_one_summary_call(self) -> None:
        groq = ScriptedGroq()
        tracker = ContinuityTracker(groq, max_tokens=400, temperature=0.3, model="small-model")
        chunk = lecture_text(100)

        state = tracker.track(ContinuityState(), chunk)

        summary_calls = groq.calls_of("summary")
        self.assertEqual(len(summary_calls), 1)
        self.assertIn(chunk, summary_calls[0]["prompt"])
        self.assertEqual(summary_calls[0]["temperature"], 0.3)
        self.assertEqual(summary_calls[0]["max_tokens"], 400)
        self.assertEqual(summary_calls[0]["model"], "small-model")
        self.assertEqual(state.used_elements, ("Ostia", "Marcus the clerk", "one hundred"))
        self.assertFalse(state.is_empty)


if __name__ == "__main__":
    unittest.main()
