"""
Custom exception classes for the Ask Your Data application.
These allow us to differentiate between user errors (4xx) and system errors (5xx).
"""

class AppException(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class FileProcessingError(AppException):
    """Raised when file upload or parsing fails."""
    def __init__(self, message: str = "Failed to process the uploaded file."):
        super().__init__(message, status_code=400)

class QueryExecutionError(AppException):
    """Raised inside the query cascade; converted to QueryResult.error by execute()."""
    def __init__(self, message: str = "Failed to execute the query."):
        super().__init__(message, status_code=500)

class InvalidQueryError(AppException):
    """Raised when the user input is empty or invalid."""
    def __init__(self, message: str = "The query is invalid or incomplete."):
        super().__init__(message, status_code=400)

class DatasetNotLoadedError(AppException):
    """Raised when a query arrives before any dataset was loaded."""
    def __init__(self, message: str = "No dataset loaded. Please upload a file first."):
        super().__init__(message, status_code=400)

class HistoryEntryNotFoundError(AppException):
    """Raised when a history entry id is unknown."""
    def __init__(self, entry_id: str):
        super().__init__(f"No history entry with id '{entry_id}'.", status_code=404)

class VisualizationError(AppException):
    """Raised when an unsupported chart is requested."""
    def __init__(self, message: str = "Failed to generate visualization."):
        super().__init__(message, status_code=400)
