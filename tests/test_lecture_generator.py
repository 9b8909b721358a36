import unittest

from meandering.services.ai.lecture_generator import (
    Chunk,
    GenerationResult,
    LectureConfig,
    LectureGenerator,
    apply_chunk,
)
from meandering.services.ai.prompts import LECTURE_SYSTEM_PROMPT
from meandering.utils.exceptions import (
    GenerationDidNotConvergeError,
    GenerationServiceError,
    ValidationError,
)

from fakes import ScriptedGroq, lecture_text

CONTINUITY_HEADER = "WHERE THE LECTURE LEFT OFF"


class ApplyChunkTests(unittest.TestCase):
    def test_appends_and_sums(self) -> None:
        result = GenerationResult(focus_areas=("A",))
        result = apply_chunk(result, Chunk("x y", 2, 1, "A"))
        result = apply_chunk(result, Chunk("z", 1, 2, "Extra"), focus_area="Extra")
        self.assertEqual(result.total_words, 3)
        self.assertEqual([p.part_number for p in result.parts], [1, 2])
        self.assertEqual(result.focus_areas, ("A", "Extra"))

    def test_rejects_out_of_order_part(self) -> None:
        with self.assertRaises(ValueError):
            apply_chunk(GenerationResult(), Chunk("x", 1, 2, "A"))

    def test_to_dict_uses_camel_case(self) -> None:
        result = apply_chunk(GenerationResult(focus_areas=("A",)), Chunk("x y", 2, 1, "A"))
        self.assertEqual(
            result.to_dict(),
            {
                "parts": [{"content": "x y", "wordCount": 2, "partNumber": 1, "focusArea": "A"}],
                "totalWords": 2,
                "focusAreas": ["A"],
            },
        )


class LectureGeneratorTests(unittest.TestCase):
    def test_reaches_target_with_overflow_chunks(self) -> None:
        groq = ScriptedGroq(content=lecture_text(1000))
        result = LectureGenerator(groq).generate("Harbour clerks of Ostia")

        self.assertGreaterEqual(result.total_words, 7500)
        self.assertEqual(len(result.parts), 8)
        self.assertEqual([p.part_number for p in result.parts], list(range(1, 9)))
        self.assertEqual(result.total_words, sum(p.word_count for p in result.parts))
        self.assertEqual(
            result.focus_areas,
            (
                "Morning duties of the harbour clerk",
                "The long afternoon of ledgers",
                "Closing up as the tide turns",
                "Additional section 1",
                "Additional section 2",
                "Additional section 3",
                "Additional section 4",
                "Additional section 5",
            ),
        )
        self.assertEqual(result.parts[0].focus_area, "Morning duties of the harbour clerk")
        self.assertEqual(result.parts[-1].focus_area, "Additional section 5")

    def test_call_sequence(self) -> None:
        groq = ScriptedGroq(content=lecture_text(1000))
        LectureGenerator(groq).generate("Harbour clerks of Ostia")

        kinds = [kind for kind, _ in groq.calls]
        self.assertEqual(kinds[0], "outline")
        self.assertEqual(kinds.count("outline"), 1)
        self.assertEqual(kinds.count("content"), 8)
        # every chunk but the last is summarized
        self.assertEqual(kinds.count("summary"), 7)
        self.assertEqual(kinds[-1], "content")

    def test_content_calls_carry_system_prompt_and_continuity(self) -> None:
        groq = ScriptedGroq(content=lecture_text(1000))
        LectureGenerator(groq).generate("Harbour clerks of Ostia")

        content_calls = groq.calls_of("content")
        self.assertTrue(all(c["system_prompt"] == LECTURE_SYSTEM_PROMPT for c in content_calls))
        self.assertTrue(all(c["temperature"] == 0.7 for c in content_calls))
        self.assertNotIn(CONTINUITY_HEADER, content_calls[0]["prompt"])
        for call in content_calls[1:]:
            self.assertIn(CONTINUITY_HEADER, call["prompt"])
            self.assertIn("Ostia, Marcus the clerk, one hundred", call["prompt"])
        self.assertIn("section 2 of the outline", content_calls[1]["prompt"])
        self.assertIn("NOT already present in the outline", content_calls[3]["prompt"])

    def test_parts_are_post_processed(self) -> None:
        raw = "[Part One] *yawns* " + lecture_text(1000).replace(".", "!")
        groq = ScriptedGroq(content=raw)
        result = LectureGenerator(groq).generate("Harbour clerks of Ostia")

        for part in result.parts:
            self.assertTrue(part.content)
            self.assertNotIn("!", part.content)
            self.assertNotIn("[", part.content)
            self.assertNotIn("*", part.content)
            for paragraph in part.content.split("\n\n"):
                self.assertLessEqual(len(paragraph.split()), 150)

    def test_target_met_by_planned_chunks_skips_overflow(self) -> None:
        groq = ScriptedGroq(content=lecture_text(1000))
        config = LectureConfig(target_words=2000, chunk_word_targets=(1000, 1000, 1000))
        result = LectureGenerator(groq, config=config).generate("Harbour clerks of Ostia")

        # all planned chunks run even after the target is reached
        self.assertEqual(len(result.parts), 3)
        self.assertEqual(result.total_words, 3000)
        self.assertEqual(len(result.focus_areas), 3)
        self.assertEqual(len(groq.calls_of("summary")), 2)

    def test_overflow_chunk_target_is_capped_by_remaining_words(self) -> None:
        groq = ScriptedGroq(content=lecture_text(1000))
        config = LectureConfig(target_words=3400, overflow_chunk_words=2500)
        LectureGenerator(groq, config=config).generate("Harbour clerks of Ostia")

        overflow_prompt = groq.calls_of("content")[3]["prompt"]
        self.assertIn("approximately 400 words", overflow_prompt)

    def test_outline_fallback_labels_planned_chunks(self) -> None:
        groq = ScriptedGroq(content=lecture_text(1000), outline="Nothing numbered here.")
        config = LectureConfig(target_words=3000)
        result = LectureGenerator(groq, config=config).generate("Harbour clerks")

        self.assertEqual(result.focus_areas, ("Harbour clerks",))
        self.assertEqual(
            [p.focus_area for p in result.parts],
            ["Harbour clerks", "Section 2", "Section 3"],
        )

    def test_blank_topic_makes_no_calls(self) -> None:
        groq = ScriptedGroq()
        generator = LectureGenerator(groq)
        for topic in ["", "   ", None]:
            with self.assertRaises(ValidationError):
                generator.generate(topic)
        self.assertEqual(groq.calls, [])

    def test_empty_generations_do_not_converge(self) -> None:
        groq = ScriptedGroq(content="[Nothing but meta text]")
        config = LectureConfig(max_chunks=6)

        with self.assertRaises(GenerationDidNotConvergeError):
            LectureGenerator(groq, config=config).generate("Harbour clerks")
        self.assertEqual(len(groq.calls_of("content")), 6)

    def test_service_failure_fails_the_run(self) -> None:
        groq = ScriptedGroq(content=GenerationServiceError(details="upstream 503"))
        with self.assertRaises(GenerationServiceError):
            LectureGenerator(groq).generate("Harbour clerks")
        self.assertEqual(len(groq.calls_of("content")), 1)

    def test_plan_focus_areas_makes_one_call(self) -> None:
        groq = ScriptedGroq()
        focus_areas = LectureGenerator(groq).plan_focus_areas("Harbour clerks")
        self.assertEqual(len(focus_areas), 3)
        self.assertEqual([kind for kind, _ in groq.calls], ["outline"])

    def test_config_from_settings(self) -> None:
        class StubSettings:
            lecture_target_words = 9000
            lecture_chunk_targets = (3000, 3000)
            lecture_overflow_chunk_words = 2000
            lecture_max_paragraph_words = 120
            lecture_max_chunks = 12
            content_temperature = 0.6
            content_max_tokens = 3500
            groq_model = "big-model"
            outline_temperature = 0.5
            outline_max_tokens = 1000
            utility_temperature = 0.2
            summary_max_tokens = 300
            groq_utility_model = "small-model"

        config = LectureConfig.from_settings(StubSettings())
        self.assertEqual(config.target_words, 9000)
        self.assertEqual(config.chunk_word_targets, (3000, 3000))
        self.assertEqual(config.content_model, "big-model")
        self.assertEqual(config.summary_model, "small-model")
        self.assertEqual(config.summary_temperature, 0.2)


if __name__ == "__main__":
    unittest.main()
