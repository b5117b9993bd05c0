from typing import List, Optional, Protocol, Tuple

from ...domain.patient import NewPatient, Patient, PatientFilters, PatientUpdate
from ...domain.shared_types import EmailAddress, PhoneNumber
from .result import RepositoryResult


class PatientRepository(Protocol):
    def create(self, data: NewPatient) -> RepositoryResult[Patient]:
        ...

    def find_by_id(self, patient_id: str) -> RepositoryResult[Patient]:
        ...

    def find_by_email(self, email: EmailAddress) -> RepositoryResult[Patient]:
        ...

    def find_by_phone(self, phone: PhoneNumber) -> RepositoryResult[Patient]:
        ...

    def find_by_auth_user_id(self, auth_user_id: str) -> RepositoryResult[Patient]:
        ...

    def email_exists(self, email: EmailAddress) -> bool:
        ...

    def phone_exists(self, phone: PhoneNumber) -> bool:
        ...

    def update(self, patient_id: str, data: PatientUpdate) -> RepositoryResult[Patient]:
        ...

    def delete(self, patient_id: str) -> RepositoryResult[None]:
        ...

    def find_many(self, filters: Optional[PatientFilters] = None, limit: Optional[int] = None, offset: int = 0) -> RepositoryResult[Tuple[List[Patient], int]]:
        ...

    def count(self, filters: Optional[PatientFilters] = None) -> RepositoryResult[int]:
        ...
