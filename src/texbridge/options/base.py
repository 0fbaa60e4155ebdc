"""Base classes for parser and renderer options.

Every texbridge component takes a frozen dataclass of options. Field
metadata carries the ``help`` text shown by the command-line interface.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

from texbridge.exceptions import ValidationError

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing cloning and introspection for frozen option dataclasses."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        Raises
        ------
        ValidationError
            If a keyword does not name a field of this options class

        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ValidationError(
                f"Unknown option(s) for {type(self).__name__}: {', '.join(unknown)}",
                parameter_name=unknown[0],
                parameter_value=kwargs[unknown[0]],
            )
        return replace(self, **kwargs)

    @classmethod
    def option_help(cls, name: str) -> str:
        """Return the help text recorded in a field's metadata, or an empty string."""
        for f in fields(cls):
            if f.name == name:
                return str(f.metadata.get("help", ""))
        return ""


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for renderer options.

    Renderers turn either a Document tree (the LaTeX writer) or markup text
    (the HTML preview) into an output string.
    """

    def __post_init__(self) -> None:
        """Validate field values for renderer options."""
        pass


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options."""

    def __post_init__(self) -> None:
        """Validate field values for parser options."""
        pass
