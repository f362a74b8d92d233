"""Error taxonomy shared by the library and the CLI."""
from __future__ import annotations


class TargetCopyError(Exception): ...

class ValidationError(TargetCopyError): ...
class InvalidPath(ValidationError): ...
class InvalidNickname(ValidationError): ...
class DuplicateNickname(ValidationError): ...
class UnknownNickname(ValidationError): ...
class IndexOutOfRange(ValidationError): ...
class SourceNotFound(ValidationError): ...
class DestinationBaseNotFound(ValidationError): ...

class StorageError(TargetCopyError): ...
class RegistrationError(TargetCopyError): ...

class CopyFailed(TargetCopyError):
	def __init__(self, message: str, code: int | None = None):
		super().__init__(message)
		self.code = code
