"""
Error taxonomy for the Notion AI backend.

Every downstream failure is translated into exactly one of these kinds at
the pipeline boundary. The HTTP layer turns them into JSON bodies.
"""


class PipelineError(Exception):
    kind = "PipelineError"
    status_code = 500

    def __init__(self, message, cause=None, stage=None, output=None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.stage = stage
        self.output = output

    def to_payload(self):
        payload = {"success": False, "error": self.kind, "message": self.message}
        if self.cause is not None:
            payload["details"] = str(self.cause)
        if self.output is not None:
            payload["output"] = self.output
        return payload


class ConfigurationError(PipelineError):
    kind = "ConfigurationError"
    status_code = 500


class ValidationError(PipelineError):
    kind = "ValidationError"
    status_code = 400


class EmptyContent(PipelineError):
    kind = "EmptyContent"
    status_code = 400


class ContentFetchFailed(PipelineError):
    kind = "ContentFetchFailed"
    status_code = 400

    def __init__(self, url, cause=None):
        super().__init__(f"Could not fetch content from URL: {url}.", cause=cause)
        self.url = url


class InvalidAction(PipelineError):
    kind = "InvalidAction"
    status_code = 400

    def __init__(self, action):
        super().__init__(f"Invalid action specified: {action!r}.")
        self.action = action


class ExtractionFailed(PipelineError):
    kind = "ExtractionFailed"
    status_code = 500

    def __init__(self, page_id, cause=None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to fetch content from Notion page {page_id}{detail}", cause=cause)
        self.page_id = page_id


class GenerationFailed(PipelineError):
    kind = "GenerationFailed"
    status_code = 500


class AppendFailed(PipelineError):
    kind = "AppendFailed"
    status_code = 500

    def __init__(self, page_id, cause=None, output=None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to append content to Notion page {page_id}{detail}", cause=cause, output=output)
        self.page_id = page_id
