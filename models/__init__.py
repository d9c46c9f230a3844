from models.person import Person
from models.evaluation import EvaluationPolicy, ScoreCard, ScoreStatus
from models.course import Course
from models.student import Student, StudentKind
from models.professor import Professor
from models.course_class import CourseClass
from models.academic_data import AcademicData

__all__ = [
    "Person",
    "EvaluationPolicy",
    "ScoreCard",
    "ScoreStatus",
    "Course",
    "Student",
    "StudentKind",
    "Professor",
    "CourseClass",
    "AcademicData",
]
