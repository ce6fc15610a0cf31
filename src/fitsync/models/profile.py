"""Profile model."""

from fitsync.models.base import DomainModel

MAX_PROFILE_NAME_LENGTH = 100


class Profile(DomainModel):
    """User profile owning every other record."""

    name: str
    is_active: bool = True

    def validation_errors(self) -> list[str]:
        """Check business rules the column types cannot express.

        Returns:
            Human-readable problems, empty when the profile is valid
        """
        errors = []
        if not self.name.strip():
            errors.append("name must not be empty")
        elif len(self.name) > MAX_PROFILE_NAME_LENGTH:
            errors.append(f"name must be at most {MAX_PROFILE_NAME_LENGTH} characters")
        if self.updated_at < self.created_at:
            errors.append("updated_at must not precede created_at")
        return errors
