# app/core/exceptions/__init__.py

from .base_exception import (
    BaseBusinessException,
    NotFoundException,
    ValidationFailureException,
    ConfigurationMissingException,
)
from .file_exceptions import (
    NoFileUploadedException,
    UnsupportedFileTypeException,
    FileTooLargeException,
    InvalidImageIdException,
    RecordNotFoundException,
    RecordStoreFailureException,
    StorageWriteFailureException,
    StorageDeleteFailureException,
    StorageReadFailureException,
    BlobNotFoundException,
    UploadFailedException,
    FetchFailedException,
    DeleteFailedException,
)

__all__ = [
    "BaseBusinessException",
    "NotFoundException",
    "ValidationFailureException",
    "ConfigurationMissingException",

    "NoFileUploadedException",
    "UnsupportedFileTypeException",
    "FileTooLargeException",
    "InvalidImageIdException",

    "RecordNotFoundException",
    "RecordStoreFailureException",

    "StorageWriteFailureException",
    "StorageDeleteFailureException",
    "StorageReadFailureException",
    "BlobNotFoundException",

    "UploadFailedException",
    "FetchFailedException",
    "DeleteFailedException",
]
