"""Fatal generator error taxonomy."""

from __future__ import annotations


class GenerationError(Exception):
    """Raised when a generation run must abort."""

    exit_code = 1

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class MappingError(GenerationError):
    """Raised for malformed mapping operands and other argument errors."""

    def __init__(self, message: str) -> None:
        super().__init__(code="INVALID_ARGUMENT", message=message)


class MissingOperandError(MappingError):
    """Raised when no mapping operand was supplied."""

    exit_code = 2

    def __init__(self) -> None:
        super().__init__("missing mapping operand")


class SourceIOError(GenerationError):
    """Raised when a source or output path cannot be read or written."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(code="IO_ERROR", message=message)
        self.path = path


class TargetCollisionError(GenerationError):
    """Raised when two sources resolve to the same virtual path."""

    def __init__(self, target: str) -> None:
        super().__init__(code="TARGET_EXISTS", message=f"target already exists: {target}")
        self.target = target


class FileTooLargeError(GenerationError):
    """Raised when a source file exceeds the embeddable size."""

    def __init__(self, path: str, size: int, max_size: int) -> None:
        super().__init__(
            code="FILE_TOO_LARGE",
            message=f"maximum allowed size exceeded: {max_size} ({path}: {size} bytes)",
        )
        self.path = path
        self.size = size


class UnknownTestFileError(GenerationError):
    """Raised when the golden test seed path was never embedded."""

    def __init__(self, target: str) -> None:
        super().__init__(code="TEST_FILE_NOT_FOUND", message=f"test file not found: {target}")
        self.target = target


class TestPathConflictError(GenerationError):
    """Raised when the derived golden test path is the output path itself."""

    __test__ = False

    def __init__(self, output: str) -> None:
        super().__init__(
            code="TEST_PATH_CONFLICT",
            message=f"test file path would overwrite output (no .py in path): {output}",
        )
        self.output = output
