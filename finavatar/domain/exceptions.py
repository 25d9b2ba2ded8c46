"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class HabitNotFoundError(DomainException):
    """No habit with the given id exists for the owner"""

    pass


class InvalidHabitUpdateError(DomainException):
    """Update named a field that habits do not have"""

    pass


class AdvisorAPIError(DomainException):
    """Generative AI service returned an error or is unavailable"""

    pass
