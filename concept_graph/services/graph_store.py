"""
Graph Store Adapter.

Persists and loads concepts and concept relationships through the relational
store. The engine only sees the GraphStore interface; SQLAlchemyGraphStore is
the default implementation on SQLAlchemy's async engine (PostgreSQL or
SQLite, both through ``INSERT ... ON CONFLICT DO UPDATE ... RETURNING``).

Store failures surface as DatabaseError; an edge belonging to another project
is a ValidationError. On SQLite, foreign keys are switched on for every
connection so edges cannot point at unknown concepts. The adapter never
retries.

Example:
    store = SQLAlchemyGraphStore.from_url("sqlite+aiosqlite:///./graph.db")
    await store.create_schema()
    stored = await store.upsert_edges(project_id, edges)
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    event,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from concept_graph.core.exceptions import DatabaseError, ValidationError
from concept_graph.core.logging import get_logger
from concept_graph.graph.validator import RELATIONSHIP_TYPES
from concept_graph.schemas.graph import (
    Concept,
    ConceptRelationship,
    RelationshipInsert,
    RelationshipType,
)

logger = get_logger(__name__)

UNIQUE_EDGE_COLUMNS = ("project_id", "from_concept_id", "to_concept_id", "relationship_type")

metadata_obj = MetaData()

concepts_table = Table(
    "concepts",
    metadata_obj,
    Column("id", String(64), primary_key=True),
    Column("project_id", String(64), nullable=False, index=True),
    Column("source_id", String(64), nullable=True),
    Column("name", String(255), nullable=False),
    Column("definition", Text, nullable=False, default=""),
    Column("key_points", JSON, nullable=False, default=list),
    Column("cognitive_type", String(50), nullable=True),
    Column("difficulty", Integer, nullable=True),
    Column("tier", Integer, nullable=True),
    Column("metadata", JSON, nullable=False, default=dict),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

_allowed_types = ", ".join(f"'{value}'" for value in RELATIONSHIP_TYPES)

relationships_table = Table(
    "concept_relationships",
    metadata_obj,
    Column("id", String(64), primary_key=True),
    Column("project_id", String(64), nullable=False, index=True),
    Column(
        "from_concept_id",
        String(64),
        ForeignKey("concepts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "to_concept_id",
        String(64),
        ForeignKey("concepts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("relationship_type", String(50), nullable=False, index=True),
    Column("strength", Float, nullable=False, default=1.0),
    Column("metadata", JSON, nullable=False, default=dict),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint(*UNIQUE_EDGE_COLUMNS, name="unique_concept_relationship"),
    CheckConstraint(
        f"relationship_type IN ({_allowed_types})",
        name="concept_relationship_type_check",
    ),
    CheckConstraint(
        "strength >= 0.0 AND strength <= 1.0",
        name="concept_relationship_strength_check",
    ),
)


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite only enforces foreign keys when asked to, per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class GraphStore(ABC):
    """Interface of the relational store as seen by the graph engine."""

    @abstractmethod
    async def upsert_edges(
        self, project_id: str, edges: Sequence[RelationshipInsert]
    ) -> List[ConceptRelationship]:
        """Write edges keyed by the uniqueness tuple; return them as stored."""

    @abstractmethod
    async def load_edges(
        self,
        project_id: str,
        relationship_type: Optional[RelationshipType] = None,
    ) -> List[ConceptRelationship]:
        """Load a project's edges, optionally of a single type."""

    @abstractmethod
    async def load_incoming_edges(
        self,
        concept_id: str,
        relationship_type: Optional[RelationshipType] = None,
    ) -> List[ConceptRelationship]:
        """Load edges whose to_concept_id is concept_id."""

    @abstractmethod
    async def load_outgoing_edges(
        self,
        concept_id: str,
        relationship_type: Optional[RelationshipType] = None,
    ) -> List[ConceptRelationship]:
        """Load edges whose from_concept_id is concept_id."""

    @abstractmethod
    async def load_concepts_by_id(self, ids: Sequence[str]) -> List[Concept]:
        """Load concepts by id. Unknown ids are simply absent."""

    @abstractmethod
    async def load_concepts_by_project(self, project_id: str) -> List[Concept]:
        """Load every concept of a project in stable store order."""


class SQLAlchemyGraphStore(GraphStore):
    """GraphStore backed by an SQLAlchemy AsyncEngine."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        if engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(engine)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SQLAlchemyGraphStore":
        return cls(create_async_engine(database_url, echo=echo))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def create_schema(self) -> None:
        """Create the concepts and concept_relationships tables if missing."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(metadata_obj.create_all)
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to create schema", operation="create_schema", original_error=e) from e
        logger.info("Graph store schema ready")

    async def dispose(self) -> None:
        await self._engine.dispose()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def upsert_edges(
        self, project_id: str, edges: Sequence[RelationshipInsert]
    ) -> List[ConceptRelationship]:
        """
        Insert edges, overwriting strength and metadata on a key collision.

        Edges repeated within the batch collapse to the last occurrence.

        Args:
            project_id: Owning project; every edge must belong to it.
            edges: Resolved edges.

        Returns:
            Edges as persisted (ids, created_at), in input order.

        Raises:
            ValidationError: If an edge belongs to another project.
            DatabaseError: If the write fails.
        """
        if not edges:
            return []

        deduplicated: Dict[tuple, RelationshipInsert] = {}
        for edge in edges:
            if edge.project_id != project_id:
                raise ValidationError(
                    f"Edge project '{edge.project_id}' does not match '{project_id}'",
                    field="project_id",
                    candidate=edge.model_dump(mode="json"),
                )
            deduplicated[edge.unique_key] = edge

        now = datetime.now(timezone.utc)
        rows = [
            {
                "id": str(uuid.uuid4()),
                "project_id": edge.project_id,
                "from_concept_id": edge.from_concept_id,
                "to_concept_id": edge.to_concept_id,
                "relationship_type": edge.relationship_type.value,
                "strength": edge.strength,
                "metadata": dict(edge.metadata),
                "created_at": now,
            }
            for edge in deduplicated.values()
        ]

        insert = self._dialect_insert("upsert_edges")
        stmt = insert(relationships_table).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(UNIQUE_EDGE_COLUMNS),
            set_={
                "strength": stmt.excluded.strength,
                "metadata": stmt.excluded["metadata"],
            },
        ).returning(*relationships_table.c)

        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(stmt)
                stored_rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to store relationships",
                operation="upsert_edges",
                original_error=e,
                details={"project_id": project_id, "edge_count": len(rows)},
            ) from e

        by_key = {}
        for row in stored_rows:
            stored = ConceptRelationship.model_validate(dict(row))
            by_key[stored.unique_key] = stored

        logger.info(f"Stored {len(by_key)} relationship(s) for project {project_id}")
        return [by_key[key] for key in deduplicated if key in by_key]

    async def save_concepts(self, concepts: Iterable[Concept]) -> List[Concept]:
        """
        Insert or update concepts by id.

        Concepts are produced upstream; this is how they land in the store.
        """
        now = datetime.now(timezone.utc)
        rows = []
        for concept in concepts:
            row = concept.model_dump()
            row["created_at"] = concept.created_at or now
            row["updated_at"] = concept.updated_at or now
            rows.append(row)

        if not rows:
            return []

        insert = self._dialect_insert("save_concepts")
        stmt = insert(concepts_table).values(rows)
        updatable = [c.name for c in concepts_table.c if c.name not in ("id", "created_at")]
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={name: stmt.excluded[name] for name in updatable},
        ).returning(*concepts_table.c)

        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(stmt)
                stored_rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to store concepts",
                operation="save_concepts",
                original_error=e,
                details={"concept_count": len(rows)},
            ) from e

        return [Concept.model_validate(dict(row)) for row in stored_rows]

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def load_edges(
        self,
        project_id: str,
        relationship_type: Optional[RelationshipType] = None,
    ) -> List[ConceptRelationship]:
        stmt = select(relationships_table).where(relationships_table.c.project_id == project_id)
        stmt = self._filter_type(stmt, relationship_type)
        rows = await self._fetch(stmt, "load_edges", {"project_id": project_id})
        return [ConceptRelationship.model_validate(dict(row)) for row in rows]

    async def load_incoming_edges(
        self,
        concept_id: str,
        relationship_type: Optional[RelationshipType] = None,
    ) -> List[ConceptRelationship]:
        stmt = select(relationships_table).where(relationships_table.c.to_concept_id == concept_id)
        stmt = self._filter_type(stmt, relationship_type)
        rows = await self._fetch(stmt, "load_incoming_edges", {"concept_id": concept_id})
        return [ConceptRelationship.model_validate(dict(row)) for row in rows]

    async def load_outgoing_edges(
        self,
        concept_id: str,
        relationship_type: Optional[RelationshipType] = None,
    ) -> List[ConceptRelationship]:
        stmt = select(relationships_table).where(relationships_table.c.from_concept_id == concept_id)
        stmt = self._filter_type(stmt, relationship_type)
        rows = await self._fetch(stmt, "load_outgoing_edges", {"concept_id": concept_id})
        return [ConceptRelationship.model_validate(dict(row)) for row in rows]

    async def load_concepts_by_id(self, ids: Sequence[str]) -> List[Concept]:
        if not ids:
            return []
        stmt = (
            select(concepts_table)
            .where(concepts_table.c.id.in_(list(ids)))
            .order_by(concepts_table.c.created_at, concepts_table.c.id)
        )
        rows = await self._fetch(stmt, "load_concepts_by_id", {"ids": list(ids)})
        return [Concept.model_validate(dict(row)) for row in rows]

    async def load_concepts_by_project(self, project_id: str) -> List[Concept]:
        stmt = (
            select(concepts_table)
            .where(concepts_table.c.project_id == project_id)
            .order_by(concepts_table.c.created_at, concepts_table.c.id)
        )
        rows = await self._fetch(stmt, "load_concepts_by_project", {"project_id": project_id})
        return [Concept.model_validate(dict(row)) for row in rows]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _filter_type(stmt, relationship_type: Optional[RelationshipType]):
        if relationship_type is not None:
            stmt = stmt.where(
                relationships_table.c.relationship_type == RelationshipType(relationship_type).value
            )
        return stmt.order_by(relationships_table.c.created_at, relationships_table.c.id)

    async def _fetch(self, stmt, operation: str, details: Dict[str, Any]) -> list:
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt)
                return result.mappings().all()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to {operation.replace('_', ' ')}",
                operation=operation,
                original_error=e,
                details=details,
            ) from e

    def _dialect_insert(self, operation: str):
        """Return the dialect-specific insert() that supports ON CONFLICT."""
        dialect = self._engine.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise DatabaseError(
                f"Upsert is not supported for dialect '{dialect}'",
                operation=operation,
            )
        return insert
