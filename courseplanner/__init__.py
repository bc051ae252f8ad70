"""
courseplanner: course search and weekly schedule conflict checking.

The pure core:

    classify(query)                  -> ParsedQuery
    match(courses, query)            -> ranked list of CourseRecord
    has_conflict(candidate, sched)   -> bool
"""

from courseplanner.conflicts import has_conflict
from courseplanner.query import classify
from courseplanner.search import match

__all__ = ["classify", "match", "has_conflict"]
