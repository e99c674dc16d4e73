"""Exception types raised across the study partner."""


class StudyPartnerError(Exception):
    """Base class for all study partner errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ConfigurationMissing(StudyPartnerError):
    """A required credential or setting is absent."""

    def __init__(self, error: str, details: str):
        super().__init__(details)
        self.error = error
        self.details = details


class InvalidClientInput(StudyPartnerError):
    """A request is missing a required field or carries an invalid one."""

    def __init__(self, error: str, details: str | None = None):
        super().__init__(details or error)
        self.error = error
        self.details = details


class UpstreamRequestFailed(StudyPartnerError):
    """The generative service call failed."""


class UpstreamSearchError(UpstreamRequestFailed):
    """The encyclopedia search call failed."""


class MalformedGeneratedContent(StudyPartnerError):
    """Generated quiz text is not valid JSON of the expected shape."""


class ApiRequestError(StudyPartnerError):
    """A panel request to the study partner API did not succeed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
