"""
Shared fixtures: sample catalog documents and files on disk.
"""

import json

import pytest


@pytest.fixture
def os_catalog_data():
    """Two courses; OS requires CS101 and one of CS201/CS202."""
    return {
        "classes": [
            {"course number": "CS101", "course name": "Intro", "prerequisite": None},
            {
                "course number": "CS301",
                "course name": "OS",
                "prerequisite": {
                    "and": [
                        {"course number": "CS101"},
                        {"or": [{"course number": "CS201"}, {"course number": "CS202"}]},
                    ]
                },
            },
        ]
    }


@pytest.fixture
def full_catalog_data():
    """A catalog using every optional field."""
    return {
        "classes": [
            {"course number": "CSCI1010", "course name": "Programming I",
             "prerequisite": None, "semesters": ["fall", "spring"]},
            {"course number": "CSCI1020", "course name": "Programming II",
             "prerequisite": {"course number": "CSCI1010"}, "semesters": ["spring"]},
            {"course number": "MATH1231", "course name": "Calculus I",
             "semesters": ["fall"]},
            {"course number": "CSCI2113", "course name": "Software Engineering",
             "prerequisite": {"and": [{"course number": "CSCI1020"},
                                      {"or": [{"course number": "MATH1231"},
                                              {"course number": "MATH1220"}]}]},
             "semesters": None},
            {"course number": "CSCI3411", "course name": "Operating Systems",
             "prerequisite": {"and": [{"course number": "CSCI2113"},
                                      {"course number": "CSCI2461"}]}},
        ]
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a temporary file and return its path."""
    def _write(data, name="courses.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
