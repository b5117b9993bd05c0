import logging

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlmodel import Session

from .....application.ports.result import RepositoryResult
from .....domain.errors import DomainError, ErrorType


UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """True only for duplicate-key failures."""
    orig = error.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == UNIQUE_VIOLATION
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


def handle_error(session: Session, error: Exception, entity: str, logger: logging.Logger) -> RepositoryResult:
    """Translate an exception raised inside a repository into a failed result."""
    if isinstance(error, DomainError):
        logger.warning(f"{entity} repository rejected input: {error.message}")
        return RepositoryResult.fail(error.error_type, error.message, error.details)

    logger.error(f"{entity} repository error: {error}", exc_info=True)
    if isinstance(error, SQLAlchemyError):
        session.rollback()

    if isinstance(error, IntegrityError) and is_unique_violation(error):
        return RepositoryResult.fail(
            ErrorType.CONFLICT,
            f"{entity} conflict detected",
            {"originalError": str(error.orig)},
        )
    if isinstance(error, IntegrityError):
        return RepositoryResult.fail(
            ErrorType.DATABASE,
            f"{entity} violates a database constraint",
            {"originalError": str(error.orig)},
        )
    if isinstance(error, NoResultFound):
        return RepositoryResult.fail(
            ErrorType.NOT_FOUND,
            f"{entity} not found",
            {"originalError": str(error)},
        )
    return RepositoryResult.fail(
        ErrorType.DATABASE,
        "An unexpected database error occurred",
        {"originalError": str(error)},
    )
