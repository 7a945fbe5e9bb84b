"""Database models."""

from codevance.models.user import User
from codevance.models.linked_account import LinkedAccount
from codevance.models.problem import Problem
from codevance.models.notification import UserNotification

__all__ = ['User', 'LinkedAccount', 'Problem', 'UserNotification']
