import os
import unittest
from types import SimpleNamespace
from unittest import mock

from docreview.llm_review import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    ConfigurationError,
    LLMReviewer,
    ReviewerConfig,
    first_text,
)


def make_response(*texts):
    parts = [SimpleNamespace(text=t) for t in texts]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class TestReviewerConfig(unittest.TestCase):
    @mock.patch("docreview.llm_review.load_dotenv")
    def test_from_env_defaults(self, _load_dotenv):
        with mock.patch.dict(os.environ, {"GOOGLE_API_KEY": "abc"}, clear=True):
            config = ReviewerConfig.from_env()
        self.assertEqual(config, ReviewerConfig(api_key="abc", model=DEFAULT_MODEL, max_tokens=DEFAULT_MAX_TOKENS))
        self.assertTrue(config.has_credentials)

    @mock.patch("docreview.llm_review.load_dotenv")
    def test_from_env_overrides(self, _load_dotenv):
        env = {"DOCREVIEW_MODEL": "gemini-2.0-flash", "DOCREVIEW_MAX_TOKENS": "2048"}
        with mock.patch.dict(os.environ, env, clear=True):
            config = ReviewerConfig.from_env()
        self.assertEqual(config.model, "gemini-2.0-flash")
        self.assertEqual(config.max_tokens, 2048)
        self.assertFalse(config.has_credentials)


class TestLLMReviewer(unittest.TestCase):
    def test_missing_key_raises(self):
        with self.assertRaises(ConfigurationError):
            LLMReviewer(ReviewerConfig(api_key=""))

    @mock.patch("docreview.llm_review.genai")
    def test_review_sends_single_user_message(self, genai):
        model = genai.GenerativeModel.return_value
        model.generate_content.return_value = make_response('{"issues": []}')

        reviewer = LLMReviewer(ReviewerConfig(api_key="k", model="m", max_tokens=500))
        text = reviewer.review("prompt text")

        self.assertEqual(text, '{"issues": []}')
        genai.configure.assert_called_once_with(api_key="k")
        genai.GenerativeModel.assert_called_once_with("m")
        genai.types.GenerationConfig.assert_called_once_with(max_output_tokens=500)
        contents = model.generate_content.call_args.args[0]
        self.assertEqual(contents, [{"role": "user", "parts": [{"text": "prompt text"}]}])


class TestFirstText(unittest.TestCase):
    def test_returns_first_text_part(self):
        self.assertEqual(first_text(make_response("first", "second")), "first")

    def test_empty_response(self):
        self.assertEqual(first_text(SimpleNamespace(candidates=[])), "")
        self.assertEqual(first_text(make_response()), "")


if __name__ == "__main__":
    unittest.main()
