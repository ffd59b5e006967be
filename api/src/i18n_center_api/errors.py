"""Exception hierarchy shared by the store, the translator and the HTTP layer."""

from typing import Any, List, Optional, Sequence


class I18nCenterError(Exception):
    """Base class for every error raised by the i18n center."""


class NotFoundError(I18nCenterError):
    """Nothing saved yet for the requested key, or the entity does not exist."""


class ApplicationNotFoundError(NotFoundError):
    pass


class ComponentNotFoundError(NotFoundError):
    pass


class TranslationNotFoundError(NotFoundError):
    def __init__(self, component_id: Any, locale: str, stage: str, detail: str = "Translation not found") -> None:
        super().__init__(f"{detail}: component={component_id} locale={locale} stage={stage}")
        self.component_id = component_id
        self.locale = locale
        self.stage = stage


class UnknownComponentCodesError(NotFoundError):
    def __init__(self, missing_codes: Sequence[str]) -> None:
        super().__init__(f"component codes not found: {list(missing_codes)}")
        self.missing_codes: List[str] = list(missing_codes)


class ConflictError(I18nCenterError):
    """Unique code already taken."""


class ExternalServiceError(I18nCenterError):
    """The translation engine failed (auth, quota, network, malformed response)."""

    def __init__(self, message: str, locale: Optional[str] = None, key_path: Optional[str] = None) -> None:
        super().__init__(message)
        self.locale = locale
        self.key_path = key_path


class PlaceholderLostError(ExternalServiceError):
    """Raised under the strict placeholder policy when a token cannot be restored."""

    def __init__(self, missing: Sequence[str], locale: Optional[str] = None) -> None:
        super().__init__(
            f"placeholders lost in translation: {['[' + m + ']' for m in missing]}",
            locale=locale,
        )
        self.missing: List[str] = list(missing)


class PersistenceError(I18nCenterError):
    """Entity store failure. The message stays opaque to callers."""


class DuplicateSlotError(PersistenceError):
    """A concurrent writer inserted the same (component, locale, stage, slot) row."""


class CacheDegradedError(I18nCenterError):
    """Cache unreachable or erroring; never surfaced past ResilientCache."""


class BackfillError(I18nCenterError):
    """A backfill stopped at `failed_locale`; `completed` rows stay persisted."""

    def __init__(self, failed_locale: str, completed: Sequence[Any], cause: BaseException) -> None:
        super().__init__(f"Failed to backfill locale {failed_locale}: {cause}")
        self.failed_locale = failed_locale
        self.completed = list(completed)
        self.cause = cause

    @property
    def completed_locales(self) -> List[str]:
        return [row.locale for row in self.completed]
