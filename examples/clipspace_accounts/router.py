"""Clips REST API router.

Every endpoint takes the :data:`CurrentPrincipal` dependency, so requests
without a valid access token are rejected with 401 by the guard before the
handler runs. Clips are scoped to their owner.
"""

from __future__ import annotations

from uuid import UUID  # noqa: TC003 -- FastAPI needs UUID at runtime for path params

from fastapi import APIRouter
from pydantic import BaseModel

from clipspace.infra.auth import CurrentPrincipal

from .domain import Clip, ClipNotFoundError

router = APIRouter(prefix="/clips", tags=["clips"])

# In-memory store, replaced by a real repository in production.
_clips: dict[UUID, Clip] = {}


class CreateClipRequest(BaseModel):
    title: str


class ClipResponse(BaseModel):
    id: str
    owner_id: str
    title: str


@router.post("/", status_code=201)
def create_clip(body: CreateClipRequest, principal: CurrentPrincipal) -> ClipResponse:
    """Create a clip owned by the caller."""
    clip = Clip.create(owner_id=principal.id, title=body.title)
    _clips[clip.id] = clip
    return _clip_response(clip)


@router.get("/")
def list_clips(principal: CurrentPrincipal) -> list[ClipResponse]:
    """List the caller's clips, oldest first."""
    owned = sorted(
        (c for c in _clips.values() if c.owner_id == principal.id),
        key=lambda c: c.created_at,
    )
    return [_clip_response(c) for c in owned]


@router.get("/{clip_id}")
def get_clip(clip_id: UUID, principal: CurrentPrincipal) -> ClipResponse:
    """Retrieve one of the caller's clips. Other owners' clips read as missing."""
    clip = _clips.get(clip_id)
    if clip is None or clip.owner_id != principal.id:
        raise ClipNotFoundError(str(clip_id))
    return _clip_response(clip)


def _clip_response(clip: Clip) -> ClipResponse:
    return ClipResponse(id=str(clip.id), owner_id=str(clip.owner_id), title=clip.title)
