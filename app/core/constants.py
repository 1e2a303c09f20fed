from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"

class CourseLevelEnum(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class CourseStatusEnum(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class SectionTypeEnum(str, Enum):
    MATERIAL = "material"
    QUIZ = "quiz"
    CONTAINER = "container"

class StorageTypeEnum(str, Enum):
    IMAGE = "image"

class CatalogVisibilityEnum(str, Enum):
    # administrators only ever see the courses they own
    UNSCOPED = "unscoped"
    SCOPED_BY_SUBSCRIPTION = "scoped_by_subscription"
    PUBLIC = "public"
