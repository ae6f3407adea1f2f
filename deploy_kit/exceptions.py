"""Exceptions related to deploy-kit."""

__all__ = [
    "DeployKitException",
    "InputException",
    "UnresolvedPropertyError",
    "UnknownFormatTokenError",
    "FragmentParseError",
    "MissingRequiredFieldError",
    "CredentialsException",
    "NoCredentialsFoundError",
    "MissingUsernameError",
    "MissingPasswordError",
    "DuplicateCredentialsError",
    "NoRepositoryConfiguredError",
    "CommandException",
    "UploadError",
]


class DeployKitException(Exception):
    """Generic base exception used for this library."""


class InputException(DeployKitException):
    """Raised when the input files or values are not formatted as expected."""


class UnresolvedPropertyError(InputException):
    """Raised when a `${property}` reference has no value and blanks are not allowed."""

    def __init__(self, property_name: str) -> None:
        super().__init__(f"Unable to resolve property '{property_name}'")
        self.property_name = property_name


class UnknownFormatTokenError(InputException):
    """Raised when an image name contains a `%x` token with no resolver."""

    def __init__(self, token: str) -> None:
        super().__init__(f"No parameter '%{token}' defined")
        self.token = token


class FragmentParseError(InputException):
    """Raised when a chart fragment file exists but can't be parsed."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Failure in parsing Helm Chart fragment: {path}: {message}")
        self.path = path


class MissingRequiredFieldError(InputException):
    """Raised when the merged chart is missing a mandatory field."""


class CredentialsException(DeployKitException):
    """Raised when repository credentials can't be determined."""

    def __init__(self, repository: str, message: str) -> None:
        super().__init__(message)
        self.repository = repository


class NoCredentialsFoundError(CredentialsException):
    """Raised when no server entry exists for a repository without credentials."""


class MissingUsernameError(CredentialsException):
    """Raised when the matching server entry has no username."""


class MissingPasswordError(CredentialsException):
    """Raised when a username was found but no password."""


class DuplicateCredentialsError(CredentialsException):
    """Raised when more than one server entry shares the repository id."""


class NoRepositoryConfiguredError(DeployKitException):
    """Raised when there is no valid repository to upload a chart to."""


class CommandException(DeployKitException):
    """Raised when there is a failure running a subcommand."""


class UploadError(CommandException):
    """Raised when the upload transport fails to publish an archive."""
