"""Base class for import prompts.

A prompt owns three things for one model task: the text sent to Gemini, the
``generationConfig`` values it wants, and how the decoded JSON answer is
turned into a typed result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar, cast

from pydantic import BaseModel


T = TypeVar("T", bound=BaseModel)


class BasePrompt(ABC, Generic[T]):
    """One model task.

    Subclasses set ``output_schema`` and implement ``format``. ``parse``
    validates strictly by default; override it where model output should be
    read leniently.

    Example:
        ```python
        prompt = ImageLookupPrompt()
        data = await client.generate_json(
            prompt.format(html=html, title="Curry"),
            options=prompt.get_options(),
        )
        result = prompt.parse(data)
        ```
    """

    output_schema: ClassVar[type[BaseModel]]

    temperature: ClassVar[float] = 0.1
    max_output_tokens: ClassVar[int | None] = None

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Render the prompt text."""
        ...

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def get_options(self) -> dict[str, Any]:
        """``generationConfig`` overrides for this task."""
        options: dict[str, Any] = {"temperature": self.temperature}
        if self.max_output_tokens is not None:
            options["max_output_tokens"] = self.max_output_tokens
        return options

    def parse(self, data: dict[str, Any]) -> T:
        """Read a decoded JSON answer into ``output_schema``.

        Raises:
            pydantic.ValidationError: If the answer does not fit the schema.
        """
        return cast("T", self.output_schema.model_validate(data))
