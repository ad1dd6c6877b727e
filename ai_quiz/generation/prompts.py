"""Prompt builders for quiz and feedback generation."""

import json

from ai_quiz.models.quiz import FeedbackRequest, QuizRequest

QUIZ_JSON_SCHEMA = """{
  "topic": string,
  "questions": Array<{
    "id": string,
    "text": string,
    "options": string[4],
    "correctIndex": number // 0-3
  }>
}"""

FEEDBACK_JSON_SCHEMA = """{
  "message": string
}"""


def build_example_quiz(num_questions: int) -> str:
    """Minimal example JSON with the requested number of questions."""
    example = {
        "topic": "Example",
        "questions": [
            {
                "id": f"q{i + 1}",
                "text": f"Question {i + 1}?",
                "options": ["A", "B", "C", "D"],
                "correctIndex": i % 4,
            }
            for i in range(num_questions)
        ],
    }
    return json.dumps(example, separators=(",", ":"))


def build_quiz_prompt(request: QuizRequest) -> str:
    """
    Build the quiz generation prompt.

    Args:
        request: Topic, question count and difficulty

    Returns:
        Prompt text asking for strict JSON only
    """
    lines = [
        "You are a quiz generator that ALWAYS returns strict JSON that matches the provided schema. No preface, only JSON.",
        "Constraints:",
        f"- Exactly {request.num_questions} multiple-choice questions",
        "- Each with exactly 4 options",
        '- Include "correctIndex" as an integer (0-3)',
        '- Give every question a unique "id" (q1, q2, ...)',
        "- Keep questions clear and unambiguous",
        f"- Level: {request.difficulty.value}",
        "",
        "Schema:",
        QUIZ_JSON_SCHEMA,
        "",
        "Example minimal JSON:",
        build_example_quiz(request.num_questions),
        "",
        f'Task: Generate for topic: {request.topic}. Use "{request.topic}" as the "topic" value.',
    ]
    return "\n".join(lines)


def build_feedback_prompt(request: FeedbackRequest) -> str:
    """Build the feedback prompt for a finished quiz."""
    lines = [
        "You are a coach. Output STRICT JSON only matching this schema:",
        FEEDBACK_JSON_SCHEMA,
        "Guidelines:",
        "- Encourage the user with a short, actionable message (<= 60 words).",
        "- Tailor to the topic and score.",
        f"- Topic: {request.topic}, Score: {request.score}/{request.total}",
    ]
    return "\n".join(lines)
