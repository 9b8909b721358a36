import unittest

from meandering.services.ai.post_processor import (
    count_words,
    post_process,
    split_sentences,
    wrap_paragraph,
)

from fakes import lecture_text


class PostProcessorTests(unittest.TestCase):
    def test_removes_bracketed_meta_text(self) -> None:
        raw = "[Continued from Part One] The baker rose early. [Pause]\n\nHe lit the oven."
        cleaned = post_process(raw)
        self.assertNotIn("[", cleaned)
        self.assertNotIn("]", cleaned)
        self.assertNotIn("Continued", cleaned)
        self.assertIn("The baker rose early.", cleaned)

    def test_removes_asterisk_stage_directions(self) -> None:
        raw = "*clears throat* The baker rose early. *adjusts glasses* He lit the oven."
        cleaned = post_process(raw)
        self.assertNotIn("*", cleaned)
        self.assertNotIn("clears throat", cleaned)
        self.assertEqual(cleaned, "The baker rose early.  He lit the oven.")

    def test_replaces_exclamation_marks(self) -> None:
        cleaned = post_process("What a day it was! The flour arrived!")
        self.assertNotIn("!", cleaned)
        self.assertEqual(cleaned, "What a day it was. The flour arrived.")

    def test_short_paragraphs_are_kept_as_is(self) -> None:
        raw = "First paragraph here.\n\n\n   \nSecond paragraph here."
        self.assertEqual(post_process(raw), "First paragraph here.\n\nSecond paragraph here.")

    def test_long_paragraph_is_split_at_sentence_boundaries(self) -> None:
        cleaned = post_process(lecture_text(400), max_paragraph_words=150)
        paragraphs = cleaned.split("\n\n")
        self.assertEqual(len(paragraphs), 3)
        self.assertTrue(all(count_words(p) <= 150 for p in paragraphs))
        self.assertTrue(all(p.endswith(".") for p in paragraphs))
        self.assertEqual(count_words(cleaned), 400)

    def test_oversized_sentence_is_not_split(self) -> None:
        long_sentence = " ".join(["word"] * 200) + "."
        cleaned = post_process(f"Short one. {long_sentence} Another short one.", max_paragraph_words=150)
        paragraphs = cleaned.split("\n\n")
        self.assertEqual(paragraphs, ["Short one.", long_sentence, "Another short one."])

    def test_unpunctuated_tail_is_kept(self) -> None:
        self.assertEqual(
            split_sentences("One sentence. Two sentence? and a trailing fragment"),
            ["One sentence.", "Two sentence?", "and a trailing fragment"],
        )

    def test_wrap_paragraph_packs_greedily(self) -> None:
        paragraph = "a b c. d e. f g h i. j."
        self.assertEqual(wrap_paragraph(paragraph, 5), ["a b c. d e.", "f g h i. j."])

    def test_is_idempotent(self) -> None:
        samples = [
            "*sighs* The mill turned! [Part 2]\n\n" + lecture_text(500),
            "Unclosed [bracket runs\n\nacross paragraphs] and stops. End",
            lecture_text(160) + "\n\n" + "Trailing words without a stop",
            "",
        ]
        for raw in samples:
            once = post_process(raw)
            self.assertEqual(post_process(once), once)

    def test_everything_removed_gives_empty_text(self) -> None:
        self.assertEqual(post_process("[Introduction]\n\n*pauses*\n\n  "), "")


if __name__ == "__main__":
    unittest.main()
