"""Domain value objects."""

from construction_docs.domain.value_objects.core import StorageRef, VersionNumber

__all__ = ["StorageRef", "VersionNumber"]
