"""
Producers API Endpoints
Producer profiles and location-based producer discovery
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from app.core.auth import TokenUser, get_current_user
from app.core.config import settings
from app.core.exceptions import MarketplaceError, status_code_for
from app.domain.product import ProducerCreate, ProducerUpdate
from app.services.catalog_service import CatalogService
from app.services.geo import parse_origin, validate_radius
from app.services.product_search_service import ProductSearchService

router = APIRouter()


def get_search_service() -> ProductSearchService:
    return ProductSearchService()


def get_catalog_service() -> CatalogService:
    return CatalogService()


@router.get("/nearby")
async def get_nearby_producers(
    lat: float = Query(..., description="Origin latitude"),
    lng: float = Query(..., description="Origin longitude"),
    radius: Optional[float] = Query(None, description="Radius in km (defaults to DEFAULT_NEARBY_RADIUS_KM)"),
    service: ProductSearchService = Depends(get_search_service)
):
    """Get producers within radius km of (lat, lng), nearest first"""
    try:
        origin = parse_origin(lat, lng)
        radius_km = validate_radius(radius) or settings.DEFAULT_NEARBY_RADIUS_KM
        producers = service.find_nearby_producers(origin, radius_km)

        return {
            "status": "success",
            "count": len(producers),
            "radius_km": radius_km,
            "data": producers
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching nearby producers: {str(e)}")


@router.post("", status_code=201)
async def create_producer(
    request: ProducerCreate,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service)
):
    """Create a producer profile for the current user"""
    try:
        producer = service.create_producer(user.id, request)

        return {
            "status": "success",
            "data": producer.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating producer: {str(e)}")


@router.get("/me")
async def get_my_producer(
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service)
):
    try:
        producer = service.get_own_producer(user.id)

        return {
            "status": "success",
            "data": producer.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching producer: {str(e)}")


@router.patch("/me")
async def update_my_producer(
    request: ProducerUpdate,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service)
):
    try:
        producer = service.update_own_producer(user.id, request)

        return {
            "status": "success",
            "data": producer.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating producer: {str(e)}")


@router.get("/{producer_id}/products")
async def get_producer_products(
    producer_id: str,
    service: CatalogService = Depends(get_catalog_service)
):
    """Get all products of a producer"""
    try:
        products = service.list_producer_products(producer_id)

        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching producer products: {str(e)}")
