"""
Product Search Service
Text/category/tag search with optional location-radius filtering

Candidates are fetched from ProductRepository (which narrows them in SQL
where it can); the filtering, distance computation and ordering rules
live here so they hold regardless of what the database returned.

Ordering:
- with a search origin: ascending distance, producers without a location last
- without an origin: newest products first
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from app.domain.product import Producer, ProductWithProducer
from app.domain.user import Location
from app.repositories.product_repository import ProductRepository
from app.repositories.producer_repository import ProducerRepository
from app.services.geo import distance_between, parse_origin, validate_radius

logger = logging.getLogger(__name__)


@dataclass
class SearchCriteria:
    """Parsed search parameters"""
    query: str = ""
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    origin: Optional[Location] = None
    radius_km: Optional[float] = None

    @classmethod
    def from_params(cls, q: Optional[str] = None, lat: Optional[float] = None,
                    lng: Optional[float] = None, radius: Optional[float] = None,
                    category: Optional[str] = None,
                    tags: Optional[Iterable[str]] = None) -> "SearchCriteria":
        """Validate raw query parameters (raises InvalidInput)"""
        return cls(
            query=(q or "").strip(),
            category=category or None,
            tags=[tag for tag in (tags or []) if tag],
            origin=parse_origin(lat, lng),
            radius_km=validate_radius(radius),
        )


def matches_text(product: ProductWithProducer, query: str) -> bool:
    """Case-insensitive substring match on name or description"""
    if not query:
        return True
    needle = query.lower()
    if needle in product.name.lower():
        return True
    return bool(product.description) and needle in product.description.lower()


def matches_tags(product: ProductWithProducer, tags: List[str]) -> bool:
    """At least one requested tag present (no tags requested matches everything)"""
    if not tags:
        return True
    return bool(set(product.tags) & set(tags))


def filter_and_rank(candidates: Iterable[ProductWithProducer],
                    criteria: SearchCriteria) -> List[ProductWithProducer]:
    """
    Apply search filters and ordering to candidate products

    Returns new ProductWithProducer objects with distance_km set
    (rounded to one decimal) when an origin was given.
    """
    results = []
    for product in candidates:
        if not product.available:
            continue
        if not matches_text(product, criteria.query):
            continue
        if criteria.category and product.category != criteria.category:
            continue
        if not matches_tags(product, criteria.tags):
            continue

        distance = None
        if criteria.origin is not None:
            distance = distance_between(criteria.origin, product.producer.location)
            if criteria.radius_km is not None and (distance is None or distance > criteria.radius_km):
                continue

        results.append((distance, product))

    if criteria.origin is not None:
        results.sort(key=lambda pair: (pair[0] is None, pair[0] or 0.0))
    else:
        results.sort(key=lambda pair: pair[1].created_at, reverse=True)

    return [
        product.model_copy(update={'distance_km': round(distance, 1) if distance is not None else None})
        for distance, product in results
    ]


def rank_producers_by_distance(producers: Iterable[Producer], origin: Location,
                               radius_km: float) -> List[dict]:
    """Producers within radius of origin, nearest first, as dicts with distance_km"""
    nearby = []
    for producer in producers:
        distance = distance_between(origin, producer.location)
        if distance is None or distance > radius_km:
            continue
        nearby.append((distance, producer))

    nearby.sort(key=lambda pair: pair[0])

    results = []
    for distance, producer in nearby:
        data = producer.to_dict()
        data['distance_km'] = round(distance, 1)
        results.append(data)
    return results


class ProductSearchService:
    """Runs searches against the catalog repositories"""

    def __init__(self, product_repo: Optional[ProductRepository] = None,
                 producer_repo: Optional[ProducerRepository] = None):
        self.product_repo = product_repo or ProductRepository()
        self.producer_repo = producer_repo or ProducerRepository()

    def search(self, criteria: SearchCriteria) -> List[ProductWithProducer]:
        candidates = self.product_repo.find_search_candidates(
            query=criteria.query,
            category=criteria.category,
            tags=criteria.tags,
        )
        results = filter_and_rank(candidates, criteria)
        logger.debug(
            f"Search q={criteria.query!r} category={criteria.category!r} tags={criteria.tags} "
            f"origin={criteria.origin} radius={criteria.radius_km}: "
            f"{len(results)}/{len(candidates)} candidates kept"
        )
        return results

    def find_nearby_producers(self, origin: Location, radius_km: float) -> List[dict]:
        producers = self.producer_repo.find_with_location()
        return rank_producers_by_distance(producers, origin, radius_km)
