from typing import List, Optional, Protocol

from ...domain.doctor import Doctor, DoctorFilters, DoctorUpdate, NewDoctor
from .result import RepositoryResult


class DoctorRepository(Protocol):
    def create(self, data: NewDoctor) -> RepositoryResult[Doctor]:
        ...

    def find_by_id(self, doctor_id: str) -> RepositoryResult[Doctor]:
        ...

    def find_by_auth_user_id(self, auth_user_id: str) -> RepositoryResult[Doctor]:
        ...

    def find_active(self) -> RepositoryResult[List[Doctor]]:
        ...

    def find_by_specialization(self, specialization: str) -> RepositoryResult[List[Doctor]]:
        ...

    def find_many(self, filters: Optional[DoctorFilters] = None) -> RepositoryResult[List[Doctor]]:
        ...

    def update(self, doctor_id: str, data: DoctorUpdate) -> RepositoryResult[Doctor]:
        ...

    def delete(self, doctor_id: str) -> RepositoryResult[None]:
        ...

    def count(self, filters: Optional[DoctorFilters] = None) -> RepositoryResult[int]:
        ...
