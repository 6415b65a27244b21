class ServiceError(Exception):
    pass


class NotFoundError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class ValidationError(ServiceError):
    pass


class AuthoringIncompleteFieldError(ValidationError):
    def __init__(self, message: str = "Please complete all current fields before adding new ones."):
        super().__init__(message)


class MissingRequiredAnswerError(ValidationError):
    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Please fill in all required fields: {', '.join(self.missing)}")


class TeamSizeNotSelectedError(ValidationError):
    def __init__(self, message: str = "Please select a team size before submitting."):
        super().__init__(message)


class NoMeaningfulDataError(ValidationError):
    def __init__(self, message: str = "Please fill in at least some registration information."):
        super().__init__(message)


class PaymentProofRequiredError(ValidationError):
    def __init__(self, message: str = "Please upload a payment proof before submitting."):
        super().__init__(message)


class NetworkOrServerError(ServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
