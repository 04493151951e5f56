"""Person entity module.

This module contains all Person-related classes organized by responsibility:
- Person: Domain entity with the role predicates
- Role: Role tags and the pure functions over a role set
- Relationship: How a family member is related to a linked senior
- PersonTable, PersonRoleTable, SeniorFamilyLinkTable: Database persistence models
- PersonRepository: Data access layer
"""

from .entity import Person
from .repository import PersonRepository
from .relationship import Relationship, parse_relationship
from .roles import Role, full_name, is_family_member, is_senior, parse_role
from .table import PersonRoleTable, PersonTable, SeniorFamilyLinkTable

__all__ = [
    "Person",
    "PersonRepository",
    "PersonRoleTable",
    "PersonTable",
    "Relationship",
    "Role",
    "SeniorFamilyLinkTable",
    "full_name",
    "is_family_member",
    "is_senior",
    "parse_relationship",
    "parse_role",
]
