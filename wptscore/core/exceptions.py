"""wptscore exceptions."""


class WPTScoreError(Exception):
    """Base exception for all wptscore errors."""


class MergeError(WPTScoreError):
    """Base exception for deep-merge failures.

    ``key`` is the offending key, ``path`` the keys leading to it from the
    root of the merged structure.
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        path: tuple[str, ...] = (),
    ) -> None:
        self.message = message
        self.key = key
        self.path = path

        if path:
            full_message = f"{message} (at {' > '.join(path)})"
        else:
            full_message = message

        super().__init__(full_message)


class InvalidShapeError(MergeError):
    """An array appears where only scalars and mappings are allowed."""

    def __init__(self, key: str, path: tuple[str, ...] = ()) -> None:
        super().__init__(f"Key {key} - arrays can't be merged", key=key, path=path)


class TypeConflictError(MergeError):
    """A key holds a mapping in one operand and a scalar in the other."""

    def __init__(self, key: str, path: tuple[str, ...] = ()) -> None:
        super().__init__(
            f"Key {key} is a mapping in one operand only", key=key, path=path
        )


class KeyOverlapError(MergeError):
    """A scalar leaf key is present in both merge operands."""

    def __init__(self, key: str, path: tuple[str, ...] = ()) -> None:
        super().__init__(f"Key {key} overlaps", key=key, path=path)


class MalformedInputError(WPTScoreError):
    """A raw report or run file is missing required fields."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        test: str | None = None,
        source: str | None = None,
    ) -> None:
        self.message = message
        self.field = field
        self.test = test
        self.source = source

        location_parts = []
        if source:
            location_parts.append(f"File: {source}")
        if test is not None:
            location_parts.append(f"Test: {test}")
        if field is not None:
            location_parts.append(f"Field: {field}")

        if location_parts:
            full_message = f"{', '.join(location_parts)}: {message}"
        else:
            full_message = message

        super().__init__(full_message)


class ScoringError(WPTScoreError):
    """Classification data does not match the registry used for scoring."""
