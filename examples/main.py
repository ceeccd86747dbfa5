"""
main.py — Play one quiz from the terminal
==========================================

Generates a short quiz through the configured providers, checks your
answers and prints study advice at the end.

    python main.py

Providers and routing come from app.config.json in this directory;
API keys from .env or the environment.
"""

import logging
from pathlib import Path

from geohistory import (
    DifficultyLevel,
    GameCategory,
    InferenceError,
    InferenceService,
    check_answer,
    generate_quiz,
    generate_study_advice,
)

# ── Setup logging (so you can see what's happening) ──
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)

HERE = Path(__file__).parent

service = InferenceService.from_files(
    config_path=str(HERE / "app.config.json"),
    env_file=str(HERE / ".env"),
)
defaults = service.app_config().gameplay_defaults

try:
    quiz = generate_quiz(
        service,
        GameCategory(defaults.category),
        min(defaults.question_count, 3),
        defaults.scope,
        DifficultyLevel(defaults.difficulty),
    )
except InferenceError as e:
    print(f"Could not generate a quiz: {e}")
    raise SystemExit(1)

results = []
for index, item in enumerate(quiz):
    clues_used = 0
    success = False
    wrong = 0
    answer = ""
    for clue in item["clues"]:
        clues_used += 1
        print(f"  Clue {clues_used}: {clue}")
        answer = input("Your answer (Enter for next clue): ").strip()
        if not answer:
            continue
        if check_answer(service, answer, item["subject"], item["acceptedAnswers"], item["category"]):
            success = True
            print("Correct!")
            break
        wrong += 1
        print("Not quite.")
    if not success:
        print(f"The answer was {item['subject']}.")
    results.append({
        "questionIndex": index,
        "subject": item["subject"],
        "cluesTotal": len(item["clues"]),
        "cluesUsed": clues_used,
        "incorrectAttempts": wrong,
        "success": success,
        "userAnswer": answer,
    })

advice = generate_study_advice(service, results)
print()
print(advice["overallFeedback"])
for resource in advice["studyResources"]:
    print(f"  - {resource['title']}: {resource['url']}")
