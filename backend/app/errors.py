"""
Request-rejection errors for the SES v2 emulator.

Every error carries the HTTP status code and the human-readable detail
string that the API returns. None of them is process-fatal: the exception
handler registered in app.main renders each one as

    {"message": "Bad Request Exception", "detail": "aws-ses-v2-local: ..."}
"""

DETAIL_PREFIX = "aws-ses-v2-local: "


class SesError(Exception):
    """Base class for all errors that reject a single API request."""

    status_code: int = 400
    message: str = "Bad Request Exception"
    default_detail: str = "Bad request"

    def __init__(self, detail: str | None = None):
        self.detail = DETAIL_PREFIX + (detail or self.default_detail)
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# SendEmail rejections
# ---------------------------------------------------------------------------

class SchemaValidationFailed(SesError):
    default_detail = "Schema validation failed"


class UnsupportedContentKind(SesError):
    default_detail = (
        "Must have either Simple, Raw or Template content. "
        "Want to add support for other types of emails? Open a PR!"
    )


class MissingBody(SesError):
    default_detail = "Simple content must have either a HTML or Text body."


class MissingSubject(SesError):
    default_detail = "Simple content must have a subject."


class MissingSender(SesError):
    default_detail = "Must have a from email address."


class MissingTemplateName(SesError):
    default_detail = "Template content must have a TemplateName."


class TemplateNotFound(SesError):
    def __init__(self, template_name: str):
        self.template_name = template_name
        super().__init__(f'Template not found for "{template_name}"')


class InvalidTemplateData(SesError):
    default_detail = "Invalid template data format."


class MalformedRawMessage(SesError):
    default_detail = "Raw content could not be decoded as a MIME message."


# ---------------------------------------------------------------------------
# Template management rejections
# ---------------------------------------------------------------------------

class NotFoundException(SesError):
    status_code = 404
    message = "NotFoundException"
    default_detail = "Resource not found."


class AlreadyExistsException(SesError):
    message = "AlreadyExistsException"
    default_detail = "Resource already exists."
