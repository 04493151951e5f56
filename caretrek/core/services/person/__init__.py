from .person_management import PersonManagementService

__all__ = ["PersonManagementService"]
