import unittest

from meandering.services.ai.topic_proposer import TopicProposer, parse_topics

from fakes import ScriptedGroq


class TopicProposerTests(unittest.TestCase):
    def test_parse_trims_and_drops_blank_lines(self) -> None:
        text = "  Lamplighters of Paris  \n\n\nTending Roman aqueducts\n   \n"
        self.assertEqual(parse_topics(text, 20), ["Lamplighters of Paris", "Tending Roman aqueducts"])

    def test_parse_caps_at_count(self) -> None:
        text = "\n".join(f"Topic {n}" for n in range(30))
        self.assertEqual(len(parse_topics(text, 20)), 20)

    def test_propose_makes_one_call(self) -> None:
        groq = ScriptedGroq(topics="Sweeping chimneys\nMending nets\nCounting sheep\n")
        proposer = TopicProposer(groq, max_tokens=1000, temperature=0.8)

        topics = proposer.propose(2)

        self.assertEqual(topics, ["Sweeping chimneys", "Mending nets"])
        self.assertEqual(len(groq.calls), 1)
        call = groq.calls_of("topics")[0]
        self.assertIn("Generate 2 boring history lecture topics", call["prompt"])
        self.assertEqual(call["temperature"], 0.8)

    def test_fewer_lines_than_requested(self) -> None:
        groq = ScriptedGroq(topics="Only one topic")
        self.assertEqual(TopicProposer(groq).propose(20), ["Only one topic"])

    def test_count_must_be_positive(self) -> None:
        groq = ScriptedGroq()
        with self.assertRaises(ValueError):
            TopicProposer(groq).propose(0)
        self.assertEqual(groq.calls, [])


if __name__ == "__main__":
    unittest.main()
