"""
Relationship extraction collaborator.

Defines the protocol the graph engine consumes and an LLM-backed
implementation that asks the model for a JSON array of candidates.

Example:
    extractor = LLMRelationshipExtractor(llm=get_llm(0.3))
    candidates = await extractor.identify_relationships(concepts)
"""

import json
import re
from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import ValidationError as PydanticValidationError

from concept_graph.core.exceptions import ExtractionFailure
from concept_graph.core.logging import get_logger
from concept_graph.schemas.graph import Concept, IdentifiedRelationship
from concept_graph.services.prompts import (
    RELATIONSHIP_IDENTIFICATION_PROMPT,
    build_user_message,
)

logger = get_logger(__name__)

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


@runtime_checkable
class LLMProtocol(Protocol):
    """Anything with an async ``ainvoke(messages)`` returning ``.content``."""

    async def ainvoke(self, messages: List[BaseMessage]) -> Any:
        ...


@runtime_checkable
class RelationshipExtractor(Protocol):
    """
    Interface of the relationship extraction collaborator.

    Given a project's concepts, returns raw candidates. Implementations raise
    ExtractionFailure when the underlying call fails.
    """

    async def identify_relationships(
        self, concepts: Sequence[Concept]
    ) -> List[IdentifiedRelationship]:
        ...


class LLMRelationshipExtractor:
    """
    Identifies concept relationships with a chat model.

    Attributes:
        min_concepts: Below this many concepts no call is made.
    """

    def __init__(self, llm: LLMProtocol, min_concepts: int = 2) -> None:
        """
        Args:
            llm: Chat model implementing LLMProtocol.
            min_concepts: Minimum concept count worth an extraction call.
        """
        self._llm = llm
        self.min_concepts = min_concepts

    def build_messages(self, concepts: Sequence[Concept]) -> List[BaseMessage]:
        return [
            SystemMessage(content=RELATIONSHIP_IDENTIFICATION_PROMPT),
            HumanMessage(content=build_user_message(concepts)),
        ]

    async def identify_relationships(
        self, concepts: Sequence[Concept]
    ) -> List[IdentifiedRelationship]:
        """
        Ask the model for relationship candidates.

        Args:
            concepts: Concepts to analyse.

        Returns:
            Parsed candidates. Items that do not fit the candidate shape are
            skipped; range and type checks are left to the validator.

        Raises:
            ExtractionFailure: If the model call fails or returns broken JSON.
        """
        if len(concepts) < self.min_concepts:
            logger.info(f"Only {len(concepts)} concept(s), skipping relationship extraction")
            return []

        project_id = concepts[0].project_id
        try:
            response = await self._llm.ainvoke(self.build_messages(concepts))
        except Exception as e:
            raise ExtractionFailure(str(e), project_id=project_id, original_error=e) from e

        content = response.content if hasattr(response, "content") else response
        if not isinstance(content, str):
            content = str(content)
        return self.parse_response(content, project_id=project_id)

    def parse_response(
        self, content: str, project_id: Optional[str] = None
    ) -> List[IdentifiedRelationship]:
        """Parse the JSON array embedded in a model response."""
        json_match = _JSON_ARRAY.search(content or "")
        if not json_match:
            logger.warning("No JSON array found in LLM response, no relationships identified")
            return []

        try:
            data = json.loads(json_match.group())
        except json.JSONDecodeError as e:
            raise ExtractionFailure(
                "LLM response is not valid JSON",
                project_id=project_id,
                original_error=e,
            ) from e

        if not isinstance(data, list):
            return []

        candidates: List[IdentifiedRelationship] = []
        for item in data:
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object relationship item: {item!r}")
                continue
            try:
                candidates.append(IdentifiedRelationship.model_validate(item))
            except PydanticValidationError as e:
                logger.warning(f"Failed to parse relationship item: {e.error_count()} error(s)")
                continue

        logger.info(f"LLM identified {len(candidates)} relationship candidate(s)")
        return candidates
