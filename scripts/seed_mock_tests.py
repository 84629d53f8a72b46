#!/usr/bin/env python3
"""
Mock Test Seeder

Replaces every mock test with a small starter question bank.
Attempts are left untouched.

Usage: python scripts/seed_mock_tests.py
"""
import sys
sys.path.insert(0, '.')

from careercraft.db.mongodb import COLLECTIONS, get_mongo_db, init_mongo_indexes
from careercraft.schemas.schemas import MockTestCreate
from careercraft.services.mock_test_service import build_mock_test_document


MOCK_TESTS = [
    {
        "title": "JavaScript Fundamentals Quiz",
        "description": "Test your basic knowledge of JavaScript concepts, including variables, data types, operators, and functions.",
        "category": "Software Development",
        "topic": "JavaScript",
        "difficultyLevel": "Beginner",
        "durationMinutes": 10,
        "questions": [
            {"questionText": "Which keyword is used to declare a variable that cannot be reassigned?",
             "options": ["var", "let", "const", "static"], "correctOptionIndex": 2,
             "explanation": "'const' declares a block-scoped variable whose value cannot be reassigned.", "marks": 1},
            {"questionText": "What is the output of `typeof null`?",
             "options": ["'null'", "'object'", "'undefined'", "'function'"], "correctOptionIndex": 1,
             "explanation": "`typeof null` returning 'object' is a long-standing quirk kept for compatibility.", "marks": 1},
            {"questionText": "Which of the following is NOT a primitive data type in JavaScript?",
             "options": ["String", "Number", "Symbol", "Object"], "correctOptionIndex": 3,
             "explanation": "Object is a complex data type. String, Number, and Symbol are primitives.", "marks": 2},
        ],
    },
    {
        "title": "Python Basics Challenge",
        "description": "A quick challenge to test your understanding of Python's fundamental syntax and data structures.",
        "category": "Data Science",
        "topic": "Python",
        "difficultyLevel": "Beginner",
        "durationMinutes": 15,
        "questions": [
            {"questionText": "What is the output of `print(2 ** 3)` in Python?",
             "options": ["6", "8", "9", "12"], "correctOptionIndex": 1,
             "explanation": "`**` is exponentiation, so 2 raised to the power of 3 is 8.", "marks": 1},
            {"questionText": "Which data type is immutable in Python?",
             "options": ["List", "Dictionary", "Set", "Tuple"], "correctOptionIndex": 3,
             "explanation": "Tuples cannot be changed after creation. Lists, dictionaries and sets are mutable.", "marks": 1},
        ],
    },
    {
        "title": "General Aptitude - Speed & Distance",
        "description": "Solve problems related to speed, distance, and time.",
        "category": "General Aptitude",
        "topic": "Speed, Distance, Time",
        "difficultyLevel": "Intermediate",
        "durationMinutes": 20,
        "questions": [
            {"questionText": "A train travels at 60 km/h. How far will it travel in 45 minutes?",
             "options": ["30 km", "45 km", "50 km", "60 km"], "correctOptionIndex": 1,
             "explanation": "Distance = Speed x Time = 60 x 0.75 = 45 km.", "marks": 1},
            {"questionText": "If a car covers 120 km in 2 hours, what is its speed in m/s?",
             "options": ["16.67 m/s", "30 m/s", "60 m/s", "120 m/s"], "correctOptionIndex": 0,
             "explanation": "120 km / 2 h = 60 km/h, and 60 x 5/18 = 16.67 m/s.", "marks": 2},
        ],
    },
]


def main():
    db = get_mongo_db()
    init_mongo_indexes(db)
    collection = db[COLLECTIONS["mock_tests"]]

    print("Deleting existing mock tests...")
    deleted = collection.delete_many({}).deleted_count
    print(f"    {deleted} deleted")

    docs = [build_mock_test_document(MockTestCreate.model_validate(data)) for data in MOCK_TESTS]
    collection.insert_many(docs)
    for doc in docs:
        print(f"    + {doc['title']} ({len(doc['questions'])} questions, {doc['total_marks']} marks)")
    print("Mock tests seeded successfully!")


if __name__ == "__main__":
    main()
