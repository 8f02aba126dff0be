from typing import Dict, List

ALL_MAJORS = "All"

MAJORS: List[str] = [
    "Biology",
    "Chemistry",
    "Economics",
    "Computer Science & Engineering",
]

# Course options by major, in display order
COURSES_BY_MAJOR: Dict[str, List[str]] = {
    "Biology": ["BIS 2A", "BIS 2B", "BIS 2C", "NPB 101", "MCB 121L"],
    "Chemistry": ["CHE 2A", "CHE 2B", "CHE 2C", "CHE 118A", "CHE 128A"],
    "Economics": ["ECN 1A", "ECN 1B", "ECN 100", "ECN 122", "ECN 140"],
    "Computer Science & Engineering": [
        "ECS 36A",
        "ECS 36B",
        "ECS 36C",
        "ECS 122A",
        "ECS 154A",
    ],
}

DEFAULT_UPLOAD_MAJOR = "Biology"


def filter_options() -> List[str]:
    """Majors offered by the browse sidebar, "All" first."""
    return [ALL_MAJORS] + MAJORS


def courses_for(major: str) -> List[str]:
    return list(COURSES_BY_MAJOR.get(major, []))


def is_valid_course(major: str, course: str) -> bool:
    return course in COURSES_BY_MAJOR.get(major, [])
