"""Pydantic models for the rating service's teacher search response.

The GraphQL payload is validated here, at the transport boundary, so the
resolver and scorer only ever see well-typed ``CandidateRecord`` objects.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from profrate.utils.logger import log_warning


class CandidateRecord(BaseModel):
    """One instructor entry returned by the search."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    node_id: Optional[str] = Field(None, alias="id")
    external_id: Optional[Union[int, str]] = Field(None, alias="legacyId")
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    department: Optional[str] = None
    average_rating: Optional[float] = Field(None, alias="avgRating")
    average_difficulty: Optional[float] = Field(None, alias="avgDifficulty")
    would_take_again_percent: Optional[float] = Field(None, alias="wouldTakeAgainPercent")
    num_ratings: int = Field(0, alias="numRatings")

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""

    @field_validator("num_ratings", mode="before")
    @classmethod
    def coerce_num_ratings(cls, v):
        if v is None:
            return 0
        try:
            return max(0, int(float(v)))
        except (TypeError, ValueError, OverflowError):
            return 0


class TeacherEdge(BaseModel):
    node: Optional[CandidateRecord] = None

    @field_validator("node", mode="wrap")
    @classmethod
    def drop_malformed_node(cls, v, handler: ValidatorFunctionWrapHandler):
        """A record that fails validation is dropped, not the whole page."""
        try:
            return handler(v)
        except ValidationError as e:
            log_warning("Dropping malformed search candidate", errors=e.error_count(),
                        last_name=v.get("lastName") if isinstance(v, dict) else None)
            return None


class TeacherConnection(BaseModel):
    edges: List[TeacherEdge] = Field(default_factory=list)

    @field_validator("edges", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []


class NewSearch(BaseModel):
    teachers: Optional[TeacherConnection] = None


class SearchData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_search: Optional[NewSearch] = Field(None, alias="newSearch")


class GraphQLError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str = ""


class TeacherSearchResponse(BaseModel):
    """Top-level GraphQL response for the teacher search query."""

    data: Optional[SearchData] = None
    errors: List[GraphQLError] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v or []

    def candidates(self) -> List[CandidateRecord]:
        """Candidate records in response order, skipping empty edges."""
        teachers = self.data.new_search.teachers if self.data and self.data.new_search else None
        if teachers is None:
            return []
        return [edge.node for edge in teachers.edges if edge.node is not None]
