# ABOUTME: Immutable snapshot models for dialogue lines and dialogue groups
# ABOUTME: Editing a snapshot yields a new snapshot; nothing here touches the store

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field


class DialogueLine(BaseModel):
    """A single unit of narrative text identified by an integer ID."""

    model_config = ConfigDict(frozen=True)

    id: int
    text: str


class DialogueGroup(BaseModel):
    """A caller-named ordered collection of narrative text elements."""

    model_config = ConfigDict(frozen=True)

    id: str
    elements: tuple[str, ...] = Field(default_factory=tuple)

    def with_elements(self, elements: Iterable[str]) -> DialogueGroup:
        return self.model_copy(update={"elements": tuple(elements)})

    def append_element(self, text: str) -> DialogueGroup:
        return self.with_elements((*self.elements, text))

    def remove_element(self, index: int) -> DialogueGroup:
        """Drop the element at ``index``.

        Raises:
            IndexError: If ``index`` is outside the element list
        """
        if not 0 <= index < len(self.elements):
            raise IndexError(f"Element index {index} out of range for group '{self.id}'")
        return self.with_elements(self.elements[:index] + self.elements[index + 1 :])

    def __len__(self) -> int:
        return len(self.elements)
