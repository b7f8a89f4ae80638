"""Field-scoped error collection."""

from collections.abc import Iterator


class Errors:
    """Ordered mapping of field name to failure messages.

    This is the reference ErrorSink used by ValidatedRecord and
    RecordValidator. Fields keep the order of their first error, messages
    keep the order they were added.

    Example:
        >>> errors = Errors()
        >>> errors.add("email", "should look like an email address for email")
        >>> errors["email"]
        ['should look like an email address for email']
        >>> errors["name"]
        []
        >>> errors.full_messages()
        ['should look like an email address for email']
    """

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._messages.setdefault(field, []).append(message)

    def __getitem__(self, field: str) -> list[str]:
        return list(self._messages.get(field, []))

    def __contains__(self, field: object) -> bool:
        return field in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        """Total number of messages across all fields."""
        return sum(len(messages) for messages in self._messages.values())

    def __repr__(self) -> str:
        return f"Errors({self._messages!r})"

    def is_empty(self) -> bool:
        return not self._messages

    def clear(self) -> None:
        self._messages.clear()

    def full_messages(self) -> list[str]:
        """Render every message, prefixing the field unless the message names it already."""
        rendered = []
        for field, messages in self._messages.items():
            for message in messages:
                if message.endswith(f"for {field}"):
                    rendered.append(message)
                else:
                    rendered.append(f"{field} {message}")
        return rendered

    def to_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._messages.items()}
