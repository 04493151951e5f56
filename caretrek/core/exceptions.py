"""Domain errors raised by the CareTrek services."""


class CareTrekError(Exception):
    """Base class for errors raised by CareTrek services."""


class PersonNotFoundError(CareTrekError):
    def __init__(self, person_id: str):
        super().__init__(f"Person {person_id} not found")
        self.person_id = person_id


class DuplicatePersonError(CareTrekError):
    """Email or phone number is already taken by another person."""


class LinkageError(CareTrekError):
    """A family member cannot be linked to the requested senior."""


class SeniorCodeExhaustedError(CareTrekError):
    """No unused senior code was found within the configured attempts."""
