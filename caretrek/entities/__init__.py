"""Entities organized by business concept rather than technical layer.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .person import Person, PersonRepository, PersonTable, Role

__all__ = [
    "Person",
    "PersonRepository",
    "PersonTable",
    "Role",
]
