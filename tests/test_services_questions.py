"""
Unit tests for crewwell.services.questions and crewwell.services.scoring modules.
"""
import pytest
from unittest.mock import AsyncMock

from crewwell.core.exceptions import ServiceUnavailableError, ValidationError
from crewwell.services.ai import DEFAULT_QUESTIONS, FALLBACK_INSIGHT, EmployeeProfile, QAPair, ScoreResult
from crewwell.services.questions import QuestionGenerator, scale_recent_scores
from crewwell.services.scoring import ResponseScorer, score_answer, score_answers


@pytest.fixture
def profile():
    return EmployeeProfile(id="u-2", name="Ben Okafor", role="employee", department="Operations")


def _ai(**behaviour) -> AsyncMock:
    ai = AsyncMock()
    for name, value in behaviour.items():
        method = getattr(ai, name)
        if isinstance(value, BaseException) or (isinstance(value, type) and issubclass(value, BaseException)):
            method.side_effect = value
        else:
            method.return_value = value
    return ai


class TestScaleRecentScores:
    def test_keeps_seven_newest_on_five_point_scale(self):
        assert scale_recent_scores([100, 80, 60, 40, 20, 0, 50, 90, 90]) == [5.0, 4.0, 3.0, 2.0, 1.0, 0.0, 2.5]

    def test_empty(self):
        assert scale_recent_scores([]) == []


class TestQuestionGenerator:
    """Test that five questions always come back."""

    async def test_uses_generated_questions(self, profile):
        generated = ["Q1?", "Q2?", "Q3?", "Q4?", "Q5?"]
        ai = _ai(generate_questions=generated)

        questions = await QuestionGenerator(ai).generate(profile, [80, 60])

        assert questions == generated
        ai.generate_questions.assert_awaited_once_with(profile, [4.0, 3.0])

    async def test_service_error_falls_back(self, profile):
        ai = _ai(generate_questions=ServiceUnavailableError("unreachable"))

        questions = await QuestionGenerator(ai).generate(profile)

        assert questions == list(DEFAULT_QUESTIONS)

    async def test_unexpected_error_falls_back(self, profile):
        ai = _ai(generate_questions=RuntimeError("boom"))

        questions = await QuestionGenerator(ai).generate(profile)

        assert len(questions) == 5
        assert all(q.strip() for q in questions)

    @pytest.mark.parametrize("malformed", [
        ["Q1?", "Q2?"],
        ["Q1?", "Q2?", "Q3?", "Q4?", ""],
        "Q1?\nQ2?\nQ3?\nQ4?\nQ5?",
        None,
    ])
    async def test_malformed_set_falls_back(self, profile, malformed):
        ai = _ai(generate_questions=malformed)

        questions = await QuestionGenerator(ai).generate(profile)

        assert questions == list(DEFAULT_QUESTIONS)


class TestScoreAnswer:
    """Test the per-answer 1-5 breakdown."""

    def test_neutral_medium_answer(self):
        assert score_answer("The watch was uneventful") == 3

    def test_positive_words_raise_score(self):
        assert score_answer("Feeling good and happy") == 5

    def test_negative_words_lower_score(self):
        assert score_answer("I am tired and stressed out") == 1

    def test_short_answer_penalty(self):
        # 3 - 0.5 rounds half up back to 3
        assert score_answer("meh") == 3
        # 4 - 0.5 rounds half up to 4
        assert score_answer("good") == 4

    def test_long_answer_bonus(self):
        answer = "Somewhat tired after the night shift but the crew made it easier to get through"
        # one negative: 2, plus 0.5 for length rounds half up to 3
        assert score_answer(answer) == 3

    def test_score_answers_keeps_question_and_answer(self):
        scored = score_answers([QAPair("Sleep?", "Slept well, feeling great")])
        assert scored == [{"question": "Sleep?", "answer": "Slept well, feeling great", "score": 5}]


class TestResponseScorer:
    """Test overall scoring with fallback."""

    async def test_uses_backend_score(self, profile):
        ai = _ai(score_responses=ScoreResult(score=82, insights=["Rested"]))

        result = await ResponseScorer(ai).score([QAPair("Q", "A fine day at sea overall")], profile)

        assert result.score == 82
        assert result.insights == ["Rested"]
        assert result.used_fallback is False

    async def test_backend_score_clamped(self, profile):
        ai = _ai(score_responses=ScoreResult(score=130, insights=[]))

        result = await ResponseScorer(ai).score([QAPair("Q", "A")], profile)

        assert result.score == 100

    async def test_service_error_falls_back(self, profile):
        ai = _ai(score_responses=ServiceUnavailableError("down"))
        responses = [QAPair("Q1", "A long enough answer to count"), QAPair("Q2", "short")]

        result = await ResponseScorer(ai).score(responses, profile)

        assert result.score == 55
        assert result.insights == [FALLBACK_INSIGHT]
        assert result.used_fallback is True

    async def test_empty_responses_rejected(self, profile):
        ai = _ai()
        with pytest.raises(ValidationError):
            await ResponseScorer(ai).score([], profile)
        ai.score_responses.assert_not_called()
