"""Shared SQLModel models for the i18n center.

Table models here are reused by the API service, the migrations and tests.
"""

from .application import Application
from .base import BaseModel
from .component import Component
from .enums import DeploymentStage, TranslationSlot
from .translation_version import TranslationVersion

__all__ = [
    "BaseModel",
    "Application",
    "Component",
    "DeploymentStage",
    "TranslationSlot",
    "TranslationVersion",
]
