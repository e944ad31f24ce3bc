"""Tests for the AI sentence matching fallback."""

from qcpack.locate.suggest import OpenAISentenceMatcher, verify_suggestion


class TestVerifySuggestion:
    """Tests for the literal-substring guard."""

    def test_literal_substring_accepted(self):
        """Suggestions found verbatim are returned trimmed."""
        assert verify_suggestion("The quick brown fox.", "  quick brown \n") == "quick brown"

    def test_invented_text_rejected(self):
        """Anything not on the page is discarded."""
        assert verify_suggestion("The quick brown fox.", "the quick brown fox") is None

    def test_empty(self):
        """Empty answers are no answer."""
        assert verify_suggestion("text", None) is None
        assert verify_suggestion("text", "   ") is None


class TestOpenAISentenceMatcher:
    """Tests for the OpenAI-backed matcher without network access."""

    def test_disabled_without_key(self, monkeypatch, caplog):
        """No key means no client and no suggestions."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        matcher = OpenAISentenceMatcher()

        assert matcher.is_available() is False
        assert matcher.suggest("page text", "phrase") is None
        assert "AI sentence matching is disabled" in caplog.text

    def test_api_errors_are_swallowed(self):
        """A failing request yields None."""

        class FailingCompletions:
            def create(self, **kwargs):
                raise RuntimeError("rate limited")

        class FakeClient:
            class chat:
                completions = FailingCompletions()

        matcher = OpenAISentenceMatcher.__new__(OpenAISentenceMatcher)
        matcher.model = "test-model"
        matcher._client = FakeClient()

        assert matcher.suggest("page text", "phrase") is None

    def test_answer_is_stripped(self):
        """The model's answer is returned without surrounding whitespace."""

        class Message:
            content = "  quick brown fox \n"

        class Choice:
            message = Message()

        class Response:
            choices = [Choice()]

        class Completions:
            def __init__(self):
                self.kwargs = None

            def create(self, **kwargs):
                self.kwargs = kwargs
                return Response()

        completions = Completions()

        class FakeClient:
            class chat:
                pass

        FakeClient.chat.completions = completions

        matcher = OpenAISentenceMatcher.__new__(OpenAISentenceMatcher)
        matcher.model = "test-model"
        matcher._client = FakeClient()

        assert matcher.suggest("The quick brown fox", "speedy fox") == "quick brown fox"
        assert completions.kwargs["model"] == "test-model"
        assert "speedy fox" in completions.kwargs["messages"][0]["content"]
