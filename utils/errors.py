class QuizAppError(Exception):
    """Base error for the quiz service. Carries the HTTP status it maps to."""

    status_code = 500
    default_message = "An error occurred on the server."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(QuizAppError):
    status_code = 400
    default_message = "Invalid input."


class InsufficientContext(QuizAppError):
    status_code = 400
    default_message = "Could not find sufficient text from the provided sources to generate a quiz."


class PayloadTooLarge(QuizAppError):
    status_code = 413
    default_message = "Uploaded file is too large."


class NotFound(QuizAppError):
    status_code = 404
    default_message = "Not found."


class MalformedAiResponse(QuizAppError):
    status_code = 500
    default_message = "Failed to parse AI response. The format was invalid."


class StorageFailure(QuizAppError):
    status_code = 500
    default_message = "A storage error occurred on the server."


class UpstreamFailure(QuizAppError):
    status_code = 500
    default_message = "The AI service failed to generate the quiz."


class GenerationTimeout(QuizAppError):
    status_code = 504
    default_message = "The AI service took too long to respond."
