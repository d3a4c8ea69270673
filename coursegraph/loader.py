"""
Catalog loaders.

load_json_catalog() reads the structured catalog format:

    {"classes": [
        {"course number": "CS301",
         "course name": "OS",
         "prerequisite": {"and": [{"course number": "CS101"}, ...]},
         "semesters": ["spring", "fall"]}
    ]}

"prerequisite" and "semesters" may be null or missing. Unknown keys are
ignored. Any failure aborts the whole load; no partial catalog is returned.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from coursegraph.catalog import CourseCatalog, CourseCatalogBuilder, CourseRecord, Semester
from coursegraph.errors import CatalogDecodeError, CatalogIOError, UnsupportedInputError
from coursegraph.prerequisites import COURSE_TAG, prerequisite_from_dict

logger = logging.getLogger(__name__)

CLASSES_KEY = "classes"
NAME_KEY = "course name"
PREREQUISITE_KEY = "prerequisite"
SEMESTERS_KEY = "semesters"


def _required_string(data: Dict[str, Any], key: str, location: str) -> str:
    if key not in data:
        raise CatalogDecodeError(f"{location}: missing required field '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise CatalogDecodeError(
            f"{location}: '{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _decode_semesters(value: Any, location: str) -> Optional[Tuple[Semester, ...]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise CatalogDecodeError(
            f"{location}.{SEMESTERS_KEY}: expected a list, got {type(value).__name__}"
        )
    semesters = []
    for i, item in enumerate(value):
        try:
            semesters.append(Semester(item))
        except ValueError:
            raise CatalogDecodeError(
                f"{location}.{SEMESTERS_KEY}[{i}]: unknown semester {item!r}"
            ) from None
    return tuple(semesters)


def course_record_from_dict(data: Any, index: int = 0) -> CourseRecord:
    """Decode one entry of the ``classes`` list."""
    location = f"{CLASSES_KEY}[{index}]"
    if not isinstance(data, dict):
        raise CatalogDecodeError(f"{location}: expected an object, got {type(data).__name__}")

    prerequisite = data.get(PREREQUISITE_KEY)
    return CourseRecord(
        course_number=_required_string(data, COURSE_TAG, location),
        course_name=_required_string(data, NAME_KEY, location),
        prerequisite=(
            prerequisite_from_dict(prerequisite, f"{location}.{PREREQUISITE_KEY}")
            if prerequisite is not None else None
        ),
        semesters=_decode_semesters(data.get(SEMESTERS_KEY), location),
    )


def catalog_from_dict(data: Any) -> CourseCatalog:
    """Decode a whole catalog document and build it, records in input order."""
    if not isinstance(data, dict):
        raise CatalogDecodeError(f"Top level must be an object, got {type(data).__name__}")
    if CLASSES_KEY not in data:
        raise CatalogDecodeError(f"Top level is missing the '{CLASSES_KEY}' field")
    classes = data[CLASSES_KEY]
    if not isinstance(classes, list):
        raise CatalogDecodeError(f"'{CLASSES_KEY}' must be a list, got {type(classes).__name__}")

    records = [course_record_from_dict(item, i) for i, item in enumerate(classes)]

    builder = CourseCatalogBuilder()
    for record in records:
        builder.add(record)
    return builder.build()


def load_json_catalog(path: Union[str, Path]) -> CourseCatalog:
    """
    Load a catalog from a JSON file.

    Raises:
        CatalogIOError: the file cannot be opened or read
        CatalogDecodeError: the content is not valid JSON or does not match
            the catalog grammar
    """
    path = Path(path)
    logger.info(f"Loading JSON catalog from {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogDecodeError(f"Invalid JSON in {path}: {e}") from e
    except RecursionError as e:
        raise CatalogDecodeError(f"JSON in {path} is nested too deeply to decode") from e
    except UnicodeDecodeError as e:
        raise CatalogDecodeError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise CatalogIOError(path, e.strerror or str(e)) from e

    catalog = catalog_from_dict(data)
    logger.info(f"Loaded {len(catalog)} courses from {path}")
    return catalog


def load_english_catalog(path: Union[str, Path]) -> CourseCatalog:
    """Free-text course lists are not supported yet."""
    raise UnsupportedInputError(
        f"Reading plain-English course lists ({path}) is not supported yet; "
        f"provide a JSON catalog instead."
    )
