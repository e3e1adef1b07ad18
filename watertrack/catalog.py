"""
Default lesson catalogue loaded by ``scripts/seed_lessons.py``.
"""

from __future__ import annotations

import logging

from watertrack.db import LessonRecord
from watertrack.lessons import LessonService

logger = logging.getLogger(__name__)

DEFAULT_LESSONS: list[dict] = [
    {
        "lesson_id": "water-conservation-basics",
        "title": "Understanding Water Conservation",
        "content": (
            "Water covers 71% of the Earth's surface, but only 2.5% of it is fresh "
            "water and less than 1% is readily available for human use. Conserving "
            "it protects ecosystems and lowers household bills."
        ),
        "lesson_type": "info",
        "duration_minutes": 15,
        "order": 1,
        "category": "water_conservation",
    },
    {
        "lesson_id": "efficient-home-usage",
        "title": "Efficient Water Usage at Home",
        "content": (
            "Fix leaking taps and pipes, install water-efficient fixtures, take "
            "shorter showers and only run full loads in washing machines and "
            "dishwashers."
        ),
        "lesson_type": "info",
        "duration_minutes": 20,
        "order": 2,
        "category": "sustainable_practices",
    },
    {
        "lesson_id": "smart-garden-watering",
        "title": "Smart Garden Watering",
        "content": (
            "Water early in the morning or in the evening, use drip irrigation, "
            "choose drought-resistant plants and mulch beds to retain moisture."
        ),
        "lesson_type": "quiz",
        "duration_minutes": 25,
        "order": 3,
        "category": "sustainable_practices",
        "quiz_questions": [
            {
                "question": "When is the best time to water a garden?",
                "options": ["Midday", "Early morning", "Any time"],
                "correctAnswerIndex": 1,
            },
            {
                "question": "Which technique helps soil retain moisture?",
                "options": ["Mulching", "Sprinklers", "Frequent light watering"],
                "correctAnswerIndex": 0,
            },
        ],
    },
    {
        "lesson_id": "water-scarcity-and-sdg6",
        "title": "Water Scarcity and SDG 6",
        "content": (
            "Sustainable Development Goal 6 aims to ensure availability and "
            "sustainable management of water and sanitation for all. Household "
            "savings add up to real relief in water-stressed regions."
        ),
        "lesson_type": "video",
        "duration_minutes": 10,
        "order": 4,
        "category": "sdg_goals",
    },
]


def seed_lessons(service: LessonService, *, replace: bool = False) -> list[LessonRecord]:
    """
    Store the default lessons. Existing lessons with the same id are kept
    unless ``replace`` is set.
    """
    seeded: list[LessonRecord] = []
    for lesson in DEFAULT_LESSONS:
        if not replace and service.db.get_lesson(lesson["lesson_id"]):
            logger.info("Lesson %s already present, skipping", lesson["lesson_id"])
            continue
        seeded.append(service.create_lesson(**lesson))
    logger.info("Seeded %d lessons", len(seeded))
    return seeded
