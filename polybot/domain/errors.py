"""Domain exceptions."""


class ConfigError(Exception):
    """Raised when configuration or templates are missing or malformed."""

    pass


class TemplateError(ConfigError):
    """Raised when a rendered template still contains placeholders."""

    def __init__(self, unresolved):
        self.unresolved = list(unresolved)
        super().__init__(
            f"Template has unresolved placeholders: {', '.join(self.unresolved)}"
        )


class DecisionServiceError(Exception):
    """Raised when the completion backend produces no usable text."""

    pass
