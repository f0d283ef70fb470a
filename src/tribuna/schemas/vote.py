"""Topic vote Pydantic schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from tribuna.models import BinaryChoice

from .common import ApiModel


class VoteStats(BaseModel):
    """Yes/no/depends totals. For multi-choice topics only ``total`` is filled."""

    SIM: int = 0
    NAO: int = 0
    DEPENDE: int = 0
    total: int = 0


class VoteRequest(ApiModel):
    """Body of ``POST /topics/{slug}/vote``.

    Accepts the plain shapes ``{"vote": "SIM"}`` and ``{"optionIds": [...]}`` as
    well as the tagged form ``{"action": "set", "value": ...}`` /
    ``{"action": "clear"}``.
    """

    action: Literal["set", "clear"] = "set"
    vote: BinaryChoice | None = None
    option_ids: list[int] | None = Field(None, max_length=50)
    value: BinaryChoice | list[int] | None = None

    @model_validator(mode="after")
    def _normalize(self) -> VoteRequest:
        if self.action == "clear":
            return self
        if self.value is not None:
            if isinstance(self.value, list):
                self.option_ids = self.value
            else:
                self.vote = self.value
        if (self.vote is None) == (self.option_ids is None):
            raise ValueError("exactly one of vote or optionIds is required")
        return self


class VoteResponse(ApiModel):
    """Vote snapshot returned after every vote mutation."""

    success: bool = True
    user_vote: BinaryChoice | None = None
    user_vote_options: list[int] = Field(default_factory=list)
    vote_stats: VoteStats
    option_vote_stats: dict[int, int] = Field(default_factory=dict)
    total_votes: int = 0
