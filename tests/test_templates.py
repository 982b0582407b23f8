import unittest

from journey_api.services.generation import prompts
from journey_api.services.generation.templates import TemplateEngine


class TemplateEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = TemplateEngine()

    def test_plain_text_is_returned_unchanged(self) -> None:
        self.assertEqual(self.engine.render("Nothing to fill in.", {"word": "x"}), "Nothing to fill in.")
        self.assertEqual(self.engine.render("", {"word": "x"}), "")

    def test_mustache_interpolates_nested_and_raw_fields(self) -> None:
        rendered = self.engine.render(
            "Word: {{word.javanese}} / {{{word.dutch}}} ({{difficulty}})",
            {"word": {"javanese": "Sugeng enjing", "dutch": "Goedemorgen"}, "difficulty": "easy"},
        )
        self.assertEqual(rendered, "Word: Sugeng enjing / Goedemorgen (easy)")

    def test_missing_fields_render_as_empty_string(self) -> None:
        rendered = self.engine.render(
            "Example: [{{word.exampleSentenceJavanese}}] [{{unknown.path}}]",
            {"word": {"exampleSentenceJavanese": None}},
        )
        self.assertEqual(rendered, "Example: [] []")

    def test_mustache_if_and_each_blocks(self) -> None:
        template = "{{#if scores}}Scores:{{#each scores}} {{this.quizName}}={{this.score}}{{/each}}{{else}}none{{/if}}"

        with_scores = self.engine.render(
            template,
            {"scores": [{"quizName": "Greetings", "score": 85.0}, {"quizName": "Numbers", "score": 62.5}]},
        )
        without_scores = self.engine.render(template, {"scores": []})

        self.assertEqual(with_scores, "Scores: Greetings=85 Numbers=62.5")
        self.assertEqual(without_scores, "none")

    def test_eta_interpolation_with_and_without_it_prefix(self) -> None:
        rendered = self.engine.render(
            "EN: <%= it.titleEn %> | NL: <%= titleNl %> | raw: <%~ it.level %>",
            {"titleEn": "Greetings", "titleNl": None, "level": "Beginner"},
        )
        self.assertEqual(rendered, "EN: Greetings | NL:  | raw: Beginner")

    def test_render_is_deterministic(self) -> None:
        variables = {"learningProgress": "Knows 40 words", "recentScores": [{"quizName": "Food", "score": 90}]}
        first = self.engine.render(prompts.ADAPTIVE_LEARNING_GOALS_TEMPLATE, variables)
        second = self.engine.render(prompts.ADAPTIVE_LEARNING_GOALS_TEMPLATE, variables)
        self.assertEqual(first, second)

    def test_unclosed_block_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.engine.render("{{#if a}}open", {"a": True})
        with self.assertRaises(ValueError):
            self.engine.render("{{#each a}}x{{/if}}", {"a": [1]})

    def test_eta_code_blocks_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.engine.render("<% if (it.a) { %>yes<% } %>", {"a": True})

    def test_goals_template_lists_recent_scores_only_when_present(self) -> None:
        base = {"learningProgress": "Knows greetings", "targetLanguageName": "English"}

        with_scores = self.engine.render(
            prompts.ADAPTIVE_LEARNING_GOALS_TEMPLATE,
            {**base, "recentScores": [{"quizName": "Greetings quiz", "score": 72}]},
        )
        without_scores = self.engine.render(prompts.ADAPTIVE_LEARNING_GOALS_TEMPLATE, {**base, "recentScores": []})

        self.assertIn("- Greetings quiz: 72%", with_scores)
        self.assertNotIn("Recent quiz scores", without_scores)
        self.assertNotIn("{{", with_scores)

    def test_grammar_template_uses_eta_dialect(self) -> None:
        rendered = self.engine.render(prompts.GRAMMAR_CONTENT_ASSIST_TEMPLATE, {"titleEn": "Greetings"})
        self.assertIn("English title: Greetings", rendered)
        self.assertIn("Dutch title: \n", rendered)
        self.assertNotIn("<%", rendered)


if __name__ == "__main__":
    unittest.main()
