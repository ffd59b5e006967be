"""i18n center: versioned, staged translation store behind a FastAPI service."""
