"""
Base component for server-rendered Tutordesk pages.

HTML is produced by small Python classes instead of a template engine: each
component takes plain data in its constructor and returns markup from
`render()`. Every dynamic value goes through `escape()` or `attributes()`.
"""

from typing import Any, Iterable, Optional
import html


class Component:
    """Base class for all UI components."""

    def render(self) -> str:
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def escape(text: Optional[Any]) -> str:
        """Escape HTML entities; None renders as an empty string."""
        return html.escape(str(text)) if text is not None else ""

    @staticmethod
    def classes(*args: str, **conditionals: bool) -> str:
        """Build a class string; keyword classes are added when their value is true.

        >>> Component.classes("btn", "btn-danger", disabled=True, active=False)
        'btn btn-danger disabled'
        """
        names = [name for name in args if name]
        names.extend(key.replace("_", "-") for key, value in conditionals.items() if value)
        return " ".join(names)

    @staticmethod
    def attributes(**attrs: Any) -> str:
        """Render keyword arguments as HTML attributes.

        `class_`/`for_` lose the trailing underscore, other underscores become
        hyphens (`aria_label` -> `aria-label`). True renders a bare boolean
        attribute; False and None are omitted.

        >>> Component.attributes(id="code", data_role="login", required=True, disabled=False)
        'id="code" data-role="login" required'
        """
        result = []
        for key, value in attrs.items():
            if key.endswith("_"):
                key = key[:-1]
            else:
                key = key.replace("_", "-")

            if value is True:
                result.append(key)
            elif value is not False and value is not None:
                result.append(f'{key}="{html.escape(str(value))}"')

        return " ".join(result)

    @staticmethod
    def join(parts: Iterable[str]) -> str:
        return "\n".join(part for part in parts if part)
