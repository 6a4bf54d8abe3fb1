"""Typed CDP commands and results used by DOM handles and input surfaces.

Every remote call goes through one of the command classes below. Each class
binds a CDP method name to its parameter fields and to the result model its
response is parsed into, so parameter and result shapes are checked by
pydantic instead of being passed around as loose dictionaries. Field names are
snake_case in Python and camelCase on the wire.
"""

from typing import Any, ClassVar, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CommandResult(BaseModel):
    """Base class for parsed command results."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        extra='ignore',
    )


class EmptyResult(CommandResult):
    """Result of commands whose response carries no payload."""


ResultT = TypeVar('ResultT', bound=CommandResult)


class Command(BaseModel, Generic[ResultT]):
    """A CDP method call with typed parameters and a typed result."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
        frozen=True,
    )

    METHOD: ClassVar[str]
    RESULT: ClassVar[type[CommandResult]] = EmptyResult

    @property
    def method(self) -> str:
        return self.METHOD

    def params(self) -> dict[str, Any]:
        """Wire parameters for this command."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def parse_result(self, payload: dict[str, Any] | None) -> ResultT:
        """Parse a successful response payload into the command's result model."""
        return self.RESULT.model_validate(payload or {})  # type: ignore[return-value]


# ============================================================================
# DOM domain results
# ============================================================================


class DocumentNode(CommandResult):
    node_id: int


class GetDocumentResult(CommandResult):
    root: DocumentNode


class PerformSearchResult(CommandResult):
    search_id: str
    result_count: int


class NodeIdsResult(CommandResult):
    node_ids: list[int] = Field(default_factory=list)


class QuerySelectorResult(CommandResult):
    node_id: int | None = None


class GetAttributesResult(CommandResult):
    attributes: list[str] = Field(default_factory=list)


class GetOuterHTMLResult(CommandResult):
    outer_html: str = Field(alias='outerHTML')


class BoxModel(CommandResult):
    content: list[float] | None = None
    width: float | None = None
    height: float | None = None


class GetBoxModelResult(CommandResult):
    model: BoxModel | None = None


# ============================================================================
# DOM domain commands
# ============================================================================


class GetDocument(Command[GetDocumentResult]):
    METHOD: ClassVar[str] = 'DOM.getDocument'
    RESULT: ClassVar[type[CommandResult]] = GetDocumentResult

    depth: int | None = None


class PerformSearch(Command[PerformSearchResult]):
    METHOD: ClassVar[str] = 'DOM.performSearch'
    RESULT: ClassVar[type[CommandResult]] = PerformSearchResult

    query: str


class GetSearchResults(Command[NodeIdsResult]):
    METHOD: ClassVar[str] = 'DOM.getSearchResults'
    RESULT: ClassVar[type[CommandResult]] = NodeIdsResult

    search_id: str
    from_index: int
    to_index: int


class DiscardSearchResults(Command[EmptyResult]):
    METHOD: ClassVar[str] = 'DOM.discardSearchResults'

    search_id: str


class QuerySelector(Command[QuerySelectorResult]):
    METHOD: ClassVar[str] = 'DOM.querySelector'
    RESULT: ClassVar[type[CommandResult]] = QuerySelectorResult

    node_id: int
    selector: str


class QuerySelectorAll(Command[NodeIdsResult]):
    METHOD: ClassVar[str] = 'DOM.querySelectorAll'
    RESULT: ClassVar[type[CommandResult]] = NodeIdsResult

    node_id: int
    selector: str


class GetAttributes(Command[GetAttributesResult]):
    METHOD: ClassVar[str] = 'DOM.getAttributes'
    RESULT: ClassVar[type[CommandResult]] = GetAttributesResult

    node_id: int


class SetAttributeValue(Command[EmptyResult]):
    METHOD: ClassVar[str] = 'DOM.setAttributeValue'

    node_id: int
    name: str
    value: str


class GetOuterHTML(Command[GetOuterHTMLResult]):
    METHOD: ClassVar[str] = 'DOM.getOuterHTML'
    RESULT: ClassVar[type[CommandResult]] = GetOuterHTMLResult

    node_id: int


class GetBoxModel(Command[GetBoxModelResult]):
    METHOD: ClassVar[str] = 'DOM.getBoxModel'
    RESULT: ClassVar[type[CommandResult]] = GetBoxModelResult

    node_id: int


class Focus(Command[EmptyResult]):
    METHOD: ClassVar[str] = 'DOM.focus'

    node_id: int


class ScrollIntoViewIfNeeded(Command[EmptyResult]):
    METHOD: ClassVar[str] = 'DOM.scrollIntoViewIfNeeded'

    node_id: int


class SetFileInputFiles(Command[EmptyResult]):
    METHOD: ClassVar[str] = 'DOM.setFileInputFiles'

    files: list[str]
    node_id: int


# ============================================================================
# Input domain commands
# ============================================================================

MouseButton = Literal['none', 'left', 'middle', 'right']


class DispatchMouseEvent(Command[EmptyResult]):
    METHOD: ClassVar[str] = 'Input.dispatchMouseEvent'

    type: Literal['mousePressed', 'mouseReleased', 'mouseMoved', 'mouseWheel']
    x: float
    y: float
    button: MouseButton | None = None
    click_count: int | None = None
    modifiers: int | None = None


class DispatchKeyEvent(Command[EmptyResult]):
    METHOD: ClassVar[str] = 'Input.dispatchKeyEvent'

    type: Literal['keyDown', 'keyUp', 'rawKeyDown', 'char']
    key: str | None = None
    code: str | None = None
    text: str | None = None
    modifiers: int | None = None
    windows_virtual_key_code: int | None = None
