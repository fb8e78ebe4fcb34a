"""
Post search: free text, categorical and radius filters over the posts table.

Filters are turned into a ``SearchPlan`` by ``build_search_plan``, a pure
function that decides the predicate conjunction and which ordering rule
applies. ``SearchService`` executes plans against the database.

Without a geo filter results run newest first and the database paginates.
With one, candidates are prefiltered by bounding box in SQL, the exact
haversine distance is computed in Python, and results run nearest first
before pagination. Only the returned page is hydrated with images and
author.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select, and_, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from lostfound.exceptions import ValidationError
from lostfound.models.enums import PostStatus
from lostfound.models.post import Post
from lostfound.schemas.post_schema import PostResult
from lostfound.schemas.search_schema import SearchFilters
from lostfound.services.geo import BoundingBox, bounding_box, distance_km
from lostfound.services.post_service import hydrated, to_result

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


class Ordering(str, Enum):
    NEWEST = "newest"
    NEAREST = "nearest"


@dataclass(frozen=True)
class GeoCriterion:
    latitude: float
    longitude: float
    radius_km: float

    @property
    def center(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    @property
    def box(self) -> BoundingBox:
        return bounding_box(self.center, self.radius_km)


@dataclass(frozen=True)
class SearchPlan:
    predicates: tuple
    ordering: Ordering
    geo: Optional[GeoCriterion] = None
    limit: Optional[int] = 20
    offset: int = 0


def contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` anywhere, with wildcards taken literally"""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _geo_criterion(filters: SearchFilters) -> Optional[GeoCriterion]:
    fields = filters.geo_fields
    missing = [name for name, value in fields.items() if value is None]
    if len(missing) == len(fields):
        return None
    if missing:
        raise ValidationError(
            "latitude, longitude and radius_km must be provided together; "
            f"missing: {', '.join(missing)}"
        )
    if filters.radius_km <= 0:
        raise ValidationError("radius_km must be greater than 0")
    return GeoCriterion(filters.latitude, filters.longitude, filters.radius_km)


def _geo_predicates(geo: GeoCriterion) -> list:
    box = geo.box
    predicates = [
        Post.latitude.is_not(None),
        Post.longitude.is_not(None),
        Post.latitude.between(box.min_lat, box.max_lat),
    ]
    if box.min_lon is not None:
        predicates.append(Post.longitude.between(box.min_lon, box.max_lon))
    return predicates


def build_search_plan(filters: SearchFilters) -> SearchPlan:
    """Map filters onto a predicate conjunction and an ordering rule"""
    predicates = [Post.status == PostStatus.ACTIVE]

    if filters.query:
        pattern = contains_pattern(filters.query)
        predicates.append(or_(
            Post.title.ilike(pattern, escape=LIKE_ESCAPE),
            Post.description.ilike(pattern, escape=LIKE_ESCAPE),
        ))

    if filters.type:
        predicates.append(Post.type == filters.type)

    if filters.category:
        predicates.append(Post.category == filters.category)

    if filters.location:
        predicates.append(
            Post.location_text.ilike(contains_pattern(filters.location), escape=LIKE_ESCAPE)
        )

    geo = _geo_criterion(filters)
    if geo:
        predicates.extend(_geo_predicates(geo))

    return SearchPlan(
        predicates=tuple(predicates),
        ordering=Ordering.NEAREST if geo else Ordering.NEWEST,
        geo=geo,
        limit=filters.limit,
        offset=filters.offset,
    )


def rank_by_distance(
    geo: GeoCriterion,
    candidates: Sequence[Tuple[int, Optional[float], Optional[float]]],
) -> List[Tuple[float, int]]:
    """(distance, post id) pairs inside the radius, closest first"""
    ranked = []
    for post_id, latitude, longitude in candidates:
        if latitude is None or longitude is None:
            continue
        distance = distance_km(geo.latitude, geo.longitude, latitude, longitude)
        if distance <= geo.radius_km:
            ranked.append((distance, post_id))
    ranked.sort()
    return ranked


class SearchService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(self, filters: SearchFilters) -> List[PostResult]:
        """Search active posts"""
        plan = build_search_plan(filters)
        logger.debug(
            f"Searching posts: ordering={plan.ordering.value} "
            f"limit={plan.limit} offset={plan.offset}"
        )
        return await self.execute(plan)

    async def nearby_posts(
        self,
        latitude: float,
        longitude: float,
        radius_km: float,
        limit: Optional[int] = None
    ) -> List[PostResult]:
        """Active posts within ``radius_km``, closest first, capped at ``limit``"""
        missing = [
            name for name, value in (("latitude", latitude), ("longitude", longitude), ("radius_km", radius_km))
            if value is None
        ]
        if missing:
            raise ValidationError(f"Nearby search needs {', '.join(missing)}")
        if radius_km <= 0:
            raise ValidationError("radius_km must be greater than 0")
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise ValidationError("latitude must be within [-90, 90] and longitude within [-180, 180]")
        if limit is not None and limit < 1:
            raise ValidationError("limit must be a positive integer")
        plan = build_search_plan(
            SearchFilters(latitude=latitude, longitude=longitude, radius_km=radius_km)
        )
        return await self.execute(replace(plan, limit=limit, offset=0))

    async def execute(self, plan: SearchPlan) -> List[PostResult]:
        if plan.ordering is Ordering.NEAREST:
            return await self._execute_nearest(plan)
        return await self._execute_newest(plan)

    async def _execute_newest(self, plan: SearchPlan) -> List[PostResult]:
        stmt = hydrated(select(Post)).where(
            and_(*plan.predicates)
        ).order_by(
            desc(Post.created_at), desc(Post.id)
        ).offset(plan.offset)

        if plan.limit is not None:
            stmt = stmt.limit(plan.limit)

        result = await self.db.execute(stmt)
        return [to_result(post) for post in result.scalars().all()]

    async def _execute_nearest(self, plan: SearchPlan) -> List[PostResult]:
        stmt = select(Post.id, Post.latitude, Post.longitude).where(and_(*plan.predicates))
        result = await self.db.execute(stmt)

        ranked = rank_by_distance(plan.geo, result.all())
        end = None if plan.limit is None else plan.offset + plan.limit
        page = ranked[plan.offset:end]

        if not page:
            return []

        posts = await self._load_posts([post_id for _, post_id in page])
        return [to_result(posts[post_id], distance) for distance, post_id in page]

    async def _load_posts(self, post_ids: List[int]) -> Dict[int, Post]:
        stmt = hydrated(select(Post)).where(Post.id.in_(post_ids))
        result = await self.db.execute(stmt)
        return {post.id: post for post in result.scalars().all()}
