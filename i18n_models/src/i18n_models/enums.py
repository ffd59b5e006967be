from enum import Enum, IntEnum


class DeploymentStage(str, Enum):
    """Well-known stage labels.

    The store treats stages as opaque strings; these are only the names the
    original deployment uses. No ordering between them is implied.
    """

    DRAFT = "draft"
    STAGING = "staging"
    PRODUCTION = "production"


class TranslationSlot(IntEnum):
    # Frozen snapshot written by the very first save of a key
    ORIGINAL = 1
    # Overwritten by every save and by revert
    CURRENT = 2


__all__ = ["DeploymentStage", "TranslationSlot"]
