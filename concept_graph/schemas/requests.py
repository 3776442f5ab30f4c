from typing import List, Optional

from pydantic import BaseModel, Field

from concept_graph.schemas.graph import Concept


class BuildGraphRequest(BaseModel):
    # None means "use the concepts already stored for the project"
    concepts: Optional[List[Concept]] = Field(default=None, max_length=500)
