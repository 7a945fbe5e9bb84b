"""Service for the problems a user tracks."""

import logging
from typing import Any, Dict, List, Optional

from codevance.errors import ForbiddenError, ResourceNotFoundError, ValidationError
from codevance.models.problem import Problem

log = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'description', 'platform', 'topic', 'language', 'difficulty', 'url', 'completed')

class ProblemService:
    """CRUD operations on problems.

    Records created by a platform sync are owned by the sync: they cannot be
    edited, toggled or deleted by hand, only replaced by the next sync.
    """

    def __init__(self, problem_repository):
        self.problem_repository = problem_repository

    def list_problems(self, user_id: str, platform: Optional[str] = None) -> List[Problem]:
        return self.problem_repository.list_for_user(user_id, platform)

    def get_problem(self, user_id: str, problem_id: int) -> Problem:
        problem = self.problem_repository.get_for_user(problem_id, user_id)
        if problem is None:
            raise ResourceNotFoundError("Problem not found")
        return problem

    def add_problem(self, user_id: str, data: Dict[str, Any]) -> Problem:
        """Create a manually entered problem."""
        name = (data.get('name') or '').strip()
        if not name:
            raise ValidationError("Problem name is required")

        problem = Problem(user_id=user_id, synced_from_platform=False)
        self._apply(problem, dict(data, name=name))
        self.problem_repository.save(problem)
        log.info(f"User {user_id} added problem {problem.id}")
        return problem

    def update_problem(self, user_id: str, problem_id: int, data: Dict[str, Any]) -> Problem:
        problem = self._editable(user_id, problem_id, "edited")
        if 'name' in data and not (data.get('name') or '').strip():
            raise ValidationError("Problem name cannot be empty")
        self._apply(problem, data)
        self.problem_repository.save(problem)
        return problem

    def toggle_completion(self, user_id: str, problem_id: int) -> Problem:
        problem = self._editable(user_id, problem_id, "toggled")
        problem.completed = not problem.completed
        self.problem_repository.save(problem)
        return problem

    def delete_problem(self, user_id: str, problem_id: int) -> None:
        problem = self._editable(user_id, problem_id, "deleted")
        self.problem_repository.delete(problem)
        log.info(f"User {user_id} deleted problem {problem_id}")

    def reset_problems(self, user_id: str) -> int:
        """Delete every problem of a user, synced or not."""
        count = self.problem_repository.delete_all_for_user(user_id)
        log.info(f"User {user_id} reset {count} problems")
        return count

    def _editable(self, user_id: str, problem_id: int, action: str) -> Problem:
        problem = self.get_problem(user_id, problem_id)
        if problem.synced_from_platform:
            raise ForbiddenError(f"Synced problems cannot be {action}; unlink or re-sync the account instead")
        return problem

    @staticmethod
    def _apply(problem: Problem, data: Dict[str, Any]) -> None:
        for field in EDITABLE_FIELDS:
            if field not in data:
                continue
            value = data[field]
            if field == 'completed':
                value = bool(value)
            elif isinstance(value, str):
                value = value.strip() or None
            setattr(problem, field, value)
