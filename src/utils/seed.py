"""Startup seeding: admin account, default settings and a starter question bank."""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from config import (
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    QUIZ_ENABLED_DEFAULT,
    QUIZ_ENABLED_KEY,
)
from schemas.admin import QuestionCreate
from utils.question_manager import QuestionManager
from utils.setting_manager import SettingManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

STARTER_QUESTIONS: Dict[int, List[Dict]] = {
    1: [
        {
            "question": "What does HTML stand for?",
            "options": [
                "Hypertext Markup Language",
                "Hypertext Markdown Language",
                "Hyper Transfer Markup Language",
                "High-level Text Management Language",
            ],
            "correct_answer": "Hypertext Markup Language",
            "difficulty": "easy",
        },
        {
            "question": "Which CSS property is used to change the text color of an element?",
            "options": ["color", "text-color", "font-color", "foreground-color"],
            "correct_answer": "color",
            "difficulty": "easy",
        },
        {
            "question": "What is the correct HTML element for inserting a line break?",
            "options": ["<lb>", "<break>", "<br>", "<newline>"],
            "correct_answer": "<br>",
            "difficulty": "medium",
        },
        {
            "question": "How do you declare a constant variable in JavaScript?",
            "options": ["var", "let", "const", "constant"],
            "correct_answer": "const",
            "difficulty": "medium",
        },
    ],
    2: [
        {
            "question": "What is the time complexity of binary search?",
            "options": ["O(1)", "O(n)", "O(log n)", "O(n²)"],
            "correct_answer": "O(log n)",
            "difficulty": "medium",
        },
        {
            "question": "Which data structure follows the FIFO principle?",
            "options": ["Stack", "Queue", "Heap", "Tree"],
            "correct_answer": "Queue",
            "difficulty": "easy",
        },
        {
            "question": "Which of the following is NOT a valid HTTP method?",
            "options": ["GET", "POST", "DELETE", "FETCH"],
            "correct_answer": "FETCH",
            "difficulty": "medium",
        },
        {
            "question": "How many bits are in a byte?",
            "options": [],
            "correct_answer": "8",
            "difficulty": "easy",
            "question_type": "numerical",
        },
    ],
    3: [
        {
            "question": "What is a pure function in functional programming?",
            "options": [
                "A function with no side effects",
                "A function that logs to console",
                "A function that modifies DOM",
                "A function that changes global state",
            ],
            "correct_answer": "A function with no side effects",
            "difficulty": "hard",
        },
        {
            "question": "What is GraphQL?",
            "options": [
                "A query language for APIs",
                "A graph database",
                "A charting library",
                "A JavaScript framework",
            ],
            "correct_answer": "A query language for APIs",
            "difficulty": "medium",
        },
        {
            "question": "What is CORS in web development?",
            "options": [
                "A security feature restricting resource requests",
                "A CSS framework",
                "A JavaScript library",
                "A browser developer tool",
            ],
            "correct_answer": "A security feature restricting resource requests",
            "difficulty": "medium",
        },
        {
            "question": "Name the HTTP status code family used for server errors.",
            "options": [],
            "correct_answer": "5xx",
            "difficulty": "hard",
            "question_type": "string",
        },
    ],
}


def ensure_admin_user(db: Session) -> bool:
    """Create the administrator account if missing; returns True if created."""
    user_manager = UserManager(db)
    if user_manager.get_user_by_username(ADMIN_USERNAME) is not None:
        logger.info("Admin user already exists")
        return False
    user_manager.create_user(ADMIN_USERNAME, ADMIN_PASSWORD)
    logger.info("Admin user created")
    return True


def initialize_settings(db: Session) -> bool:
    """Write the quiz switch with its configured default when no settings exist."""
    setting_manager = SettingManager(db)
    if setting_manager.count() > 0:
        logger.info("Settings already exist, skipping initialization")
        return False
    setting_manager.set_value(QUIZ_ENABLED_KEY, QUIZ_ENABLED_DEFAULT)
    return True


def seed_questions(db: Session) -> int:
    """Insert the starter question bank when the table is empty."""
    question_manager = QuestionManager(db)
    if question_manager.count() > 0:
        logger.info("Questions already exist, skipping seed")
        return 0
    questions = [
        QuestionCreate(year_level=year, **item)
        for year, items in STARTER_QUESTIONS.items()
        for item in items
    ]
    question_manager.add_questions(questions)
    logger.info("Seeded %d starter questions", len(questions))
    return len(questions)


def seed_database(db: Session) -> None:
    ensure_admin_user(db)
    initialize_settings(db)
    seed_questions(db)
