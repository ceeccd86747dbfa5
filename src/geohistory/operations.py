"""
geohistory.operations — Game-facing LLM operations
===================================================

The four operations the game screens call. Each is a prompt plus, for
structured output, a JSON schema, sent through any object exposing
generate_text / generate_json (normally an InferenceService).

Recovery policy per operation:
  - generate_quiz()               → failure is raised to the caller
  - check_answer()                → failure counts as incorrect
  - extract_scope_from_content()  → failure yields "Custom File Content"
  - generate_study_advice()       → failure yields generic encouragement
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Protocol, Sequence

from .types import (
    DifficultyLevel,
    GameCategory,
    InferenceJsonRequest,
    InferenceTextRequest,
    QuestionResult,
    QuizItem,
    StudyAdvice,
)

logger = logging.getLogger("geohistory.operations")

MAX_SCOPE_CONTENT_CHARS = 50000
SCOPE_FALLBACK = "Custom File Content"

FALLBACK_ADVICE: StudyAdvice = {
    "overallFeedback": "Great effort! Keep reviewing general topics to broaden your knowledge base.",
    "weakAreas": ["General Knowledge"],
    "studyResources": [],
}

QUIZ_SYSTEM_INSTRUCTION = (
    "You are an expert question writer for National History Bee and National Geography "
    "Bee competitions. You value accuracy, precision, and gradual revelation of information."
)

ADVICE_SYSTEM_INSTRUCTION = (
    "You are a helpful study coach for academic competitions. You provide specific, "
    "actionable reading lists with valid Wikipedia URLs."
)


class Generator(Protocol):
    def generate_text(self, request: InferenceTextRequest) -> str:
        ...

    def generate_json(self, request: InferenceJsonRequest) -> Any:
        ...


# ══════════════════════════════════════════════════════════════
# SCHEMAS
# ══════════════════════════════════════════════════════════════

QUIZ_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "quizzes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "subject": {
                        "type": "string",
                        "description": "The main answer (e.g., 'Napoleon Bonaparte', 'Amazon River').",
                    },
                    "acceptedAnswers": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": (
                            "List of valid alternative names or spellings "
                            "(e.g., ['Napoleon', 'Bonaparte'])."
                        ),
                    },
                    "clues": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": (
                            "5 to 8 facts about the subject, ordered from most "
                            "obscure/difficult to most obvious."
                        ),
                    },
                    "category": {
                        "type": "string",
                        "description": "The category of the question (History or Geography).",
                    },
                    "difficulty": {
                        "type": "string",
                        "description": "Estimated difficulty level.",
                    },
                },
                "required": ["subject", "acceptedAnswers", "clues", "category"],
            },
        },
    },
    "required": ["quizzes"],
}

ADVICE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "overallFeedback": {
            "type": "string",
            "description": (
                "A brief, encouraging summary (2-3 sentences) identifying the specific "
                "historical/geographical eras or regions the user struggled with."
            ),
        },
        "weakAreas": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "A list of 3-5 specific short keywords or topics to study "
                "(e.g., 'Napoleonic Wars', 'Rivers of South America')."
            ),
        },
        "studyResources": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Title of the article or topic."},
                    "url": {
                        "type": "string",
                        "description": "A valid URL (prefer Wikipedia) to read about this topic.",
                    },
                    "description": {
                        "type": "string",
                        "description": "Very short reason why this is relevant based on their mistakes.",
                    },
                },
                "required": ["title", "url", "description"],
            },
            "description": "List of 3-5 specific reading links.",
        },
    },
    "required": ["overallFeedback", "weakAreas", "studyResources"],
}

ANSWER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {"correct": {"type": "boolean"}},
    "required": ["correct"],
}

_DIFFICULTY_FOCUS = {
    DifficultyLevel.HIGH_SCHOOL: (
        "Focus on standard curriculum topics, famous figures, major wars, "
        "and major capitals/landmarks."
    ),
    DifficultyLevel.COLLEGE: (
        "Focus on undergraduate level depth, specific battles, treaties, lesser-known "
        "monarchs, cultural geography, or regional politics."
    ),
    DifficultyLevel.PROFESSIONAL: (
        "Focus on niche academic topics, specific historiography, minor but impactful "
        "historical figures, or specific geographical features, but ensuring they are "
        "not completely obscure to a professional."
    ),
}


def get_audience_description(category: GameCategory, difficulty: DifficultyLevel) -> str:
    """Describe the target audience for a category and difficulty."""
    if difficulty == DifficultyLevel.HIGH_SCHOOL:
        return "High School Student"
    if category == GameCategory.GEOGRAPHY:
        if difficulty == DifficultyLevel.COLLEGE:
            return "College Geography Major"
        return "Professional Geographer"
    if difficulty == DifficultyLevel.COLLEGE:
        return "College History Major"
    return "Professional Historian"


def _category_label(category: Any) -> str:
    return category.value if isinstance(category, GameCategory) else str(category)


# ══════════════════════════════════════════════════════════════
# OPERATIONS
# ══════════════════════════════════════════════════════════════

def extract_scope_from_content(service: Generator, content: str, category: GameCategory) -> str:
    """Summarize uploaded study material into a comma-separated quiz scope."""
    prompt = f"""
    Analyze the following text from study materials uploaded by a user for a {_category_label(category)} quiz.

    TEXT CONTENT (truncated if too long):
    "{content[:MAX_SCOPE_CONTENT_CHARS]}"

    Task:
    Extract a concise, comma-separated list of the key specific topics, eras, regions, or themes present in this text that can serve as a "Scope" for generating a quiz.
    Ignore metadata, prefaces, or irrelevant text.
    The output should be a string of keywords (e.g., "American Revolution, French Monarchy, 19th Century Industrialization").
    Limit the summary to max 50 words.
    """

    try:
        return service.generate_text(InferenceTextRequest(prompt=prompt))
    except Exception as e:
        logger.error(f"Failed to extract scope: {e}")
        return SCOPE_FALLBACK


def generate_quiz(
    service: Generator,
    category: GameCategory,
    count: int,
    scope: str,
    difficulty: DifficultyLevel,
) -> List[QuizItem]:
    """
    Generate quiz items.

    Returns:
        Items with a local id assigned, in the order the model returned them

    Raises:
        InferenceError: If the provider call fails
    """
    scope_text = "general knowledge" if scope.strip() in ("", "*") else scope
    audience = get_audience_description(category, difficulty)

    prompt = f"""
    Generate {count} challenging quiz items for a {_category_label(category)} Bee competition.
    Target Audience Difficulty Level: "{audience}".
    Scope/Keywords: "{scope_text}".

    CRITICAL SUBJECT SELECTION RULE:
    - The Subject MUST be known by at least 50% of the intended audience ({audience}).
    - {_DIFFICULTY_FOCUS.get(difficulty, "")}

    For each item:
    1. Identify a specific subject (person, place, event, battle, treaty, landform, city, etc.).
    2. Provide 5 to 8 clues.

    CRITICAL INSTRUCTIONS FOR CLUE GENERATION:
    - **Phrasing**: NEVER use pronouns like "It", "He", "She", or "They" to refer to the subject. ALWAYS use the specific type of the subject in the text, such as "This river...", "This monarch...", "This mountain range...", "This treaty...", "This city...".
    - **Difficulty Progression**: The clues MUST be strictly ordered from MOST DIFFICULT (obscure) to EASIEST (well-known).
      - Clue 1: An obscure fact (e.g., specific dates, minor figures involved, specific dimensions) that allows a true expert to answer immediately.
      - Middle Clues: Add context, location, or related events.
      - Final Clues: Major distinguishing features or famous associations.

    3. Provide a list of 'acceptedAnswers' to handle variations (e.g., last names, common abbreviations).
    """

    try:
        data = service.generate_json(InferenceJsonRequest(
            prompt=prompt,
            schema=QUIZ_SCHEMA,
            system_instruction=QUIZ_SYSTEM_INSTRUCTION,
        ))
        stamp = int(time.time() * 1000)
        return [
            {**item, "id": f"quiz-{stamp}-{index}"}
            for index, item in enumerate(data["quizzes"])
        ]
    except Exception as e:
        logger.error(f"Failed to generate quiz: {e}")
        raise


def check_answer(
    service: Generator,
    user_answer: str,
    subject: str,
    accepted_answers: Sequence[str],
    category: str,
) -> bool:
    """
    Decide whether a free-text answer identifies the subject.

    An exact case-insensitive match returns True without calling a
    provider. Any provider failure counts as incorrect.
    """
    normalized_input = user_answer.lower().strip()
    all_valid = [s.lower().strip() for s in [subject, *accepted_answers]]
    if normalized_input in all_valid:
        return True

    prompt = f"""
    Task: Validate if the User's Answer is a correct identification of the Subject.
    Subject: "{subject}"
    Category: {_category_label(category)}
    Alternate Names: {", ".join(accepted_answers)}

    User Answer: "{user_answer}"

    Rules for Correctness:
    - Accept widely used nicknames or short forms (e.g., "TR" for "Theodore Roosevelt").
    - Accept phonetic spelling or local pronunciations.
    - Accept minor misspellings.
    - Accept translations if common.
    - Reject if the answer represents a distinct, incorrect entity.

    Output strictly JSON: {{ "correct": boolean }}
    """

    try:
        result = service.generate_json(InferenceJsonRequest(
            prompt=prompt,
            power="light",
            schema=ANSWER_SCHEMA,
        ))
    except Exception as e:
        logger.warning(f"AI verification failed, defaulting to false: {e}")
        return False

    return isinstance(result, dict) and result.get("correct") is True


def select_weak_points(results: Sequence[QuestionResult]) -> List[QuestionResult]:
    """Rounds worth coaching on; the three hardest rounds if none were weak."""
    weak = [
        r for r in results
        if not r.get("success") or r.get("incorrectAttempts", 0) > 0 or r.get("cluesUsed", 0) > 3
    ]
    if weak:
        return weak
    return sorted(results, key=lambda r: r.get("cluesUsed", 0), reverse=True)[:3]


def generate_study_advice(service: Generator, results: Sequence[QuestionResult]) -> StudyAdvice:
    """Produce post-game study advice; never raises."""
    analysis_data = [
        {
            "subject": r.get("subject"),
            "userAnswer": r.get("userAnswer") or "No Answer",
            "wasCorrect": r.get("success"),
            "incorrectGuesses": r.get("incorrectAttempts"),
            "cluesNeeded": r.get("cluesUsed"),
        }
        for r in select_weak_points(results)
    ]

    prompt = f"""
    Analyze the following quiz performance results for a Geography/History Bee student.

    Performance Data:
    {json.dumps(analysis_data, indent=2)}

    Task:
    1. Identify the specific knowledge gaps (e.g., "Weakness in 19th Century French Politics" or "Unfamiliar with African River Systems").
    2. Provide constructive feedback.
    3. Suggest specific Wikipedia articles that would fill these gaps.

    If the user performed perfectly, suggest advanced related topics to study next.
    """

    try:
        return service.generate_json(InferenceJsonRequest(
            prompt=prompt,
            schema=ADVICE_SCHEMA,
            system_instruction=ADVICE_SYSTEM_INSTRUCTION,
        ))
    except Exception as e:
        logger.error(f"Failed to generate advice: {e}")
        return {
            "overallFeedback": FALLBACK_ADVICE["overallFeedback"],
            "weakAreas": list(FALLBACK_ADVICE["weakAreas"]),
            "studyResources": [],
        }
