"""Error kinds raised throughout fetters.

Every error carries a single user-facing message. The CLI prints it and
exits non-zero; nothing in the db package retries.
"""

from __future__ import annotations


class FettersError(Exception):
    """Base class for all errors surfaced to the user."""

    message = "An unknown error occurred"

    def __init__(self, detail: object = None):
        self.detail = detail
        super().__init__(self.message.format(detail=detail))


class ApplicationDirError(FettersError):
    message = "Could not retrieve system application directories!"


class QueryError(FettersError):
    message = "Database query error: {detail}"


class FettersIOError(FettersError):
    message = "IO Error: {detail}"


class PromptError(FettersError):
    message = "Prompt error: {detail}"


class MigrationError(FettersError):
    message = "Failed to run migrations!"


class NoJobsAvailable(FettersError):
    """No job applications matched in the sprint the user is working in."""

    message = "No job applications tracked for the current sprint [{detail}]"

    def __init__(self, sprint_name: str):
        self.sprint_name = sprint_name
        super().__init__(sprint_name)


class SheetNameError(FettersError):
    message = "Set sheet name error: {detail}"


class SprintNameConflict(FettersError):
    """Raised when a sprint name is already taken (names are unique)."""

    message = "There is already a sprint with name {detail}. Try renaming the sprint."

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)


class StoreConnectionError(FettersError):
    message = "Failed to connect to SQLite database: {detail}"


class ConfigDeserializeError(FettersError):
    message = "TOML deserialization error: {detail}"


class ConfigSerializeError(FettersError):
    message = "TOML serialization error: {detail}"


class UnknownError(FettersError):
    message = "{detail}"


class XlsxError(FettersError):
    message = "XLSX write error: {detail}"
