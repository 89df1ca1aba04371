# filestage/storage/base.py
from abc import ABC, abstractmethod
from typing import BinaryIO

class BaseStore(ABC):
    """
    Minimal contract for the remote object store staged files are sent to.
    Synchronous on purpose: the transfer blocks the caller until done,
    timeouts belong to the client underneath.
    """

    @abstractmethod
    def put_object(self, bucket: str, object_key: str, body: BinaryIO) -> str:
        """Store *body* (opened in binary mode) under *object_key* and return its URL."""
        ...

    @abstractmethod
    def url(self, bucket: str, object_key: str, expires: int = 3600) -> str:
        """Return a publicly accessible (or pre-signed) URL."""
        ...
