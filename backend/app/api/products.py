"""
Products API Endpoints
Catalog search, product management and reviews
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.core.auth import TokenUser, get_current_user
from app.core.exceptions import MarketplaceError, status_code_for
from app.domain.product import ProductCreate, ProductUpdate
from app.domain.review import ReviewCreate
from app.services.catalog_service import CatalogService
from app.services.product_search_service import ProductSearchService, SearchCriteria

router = APIRouter()


def get_search_service() -> ProductSearchService:
    return ProductSearchService()


def get_catalog_service() -> CatalogService:
    return CatalogService()


@router.get("/search")
async def search_products(
    q: Optional[str] = Query(None, description="Text matched against name and description"),
    lat: Optional[float] = Query(None, description="Search origin latitude"),
    lng: Optional[float] = Query(None, description="Search origin longitude"),
    radius: Optional[float] = Query(None, description="Maximum producer distance in km"),
    category: Optional[str] = Query(None, description="Exact category"),
    tags: Optional[List[str]] = Query(None, description="Match products with any of these tags"),
    service: ProductSearchService = Depends(get_search_service)
):
    """
    Search available products

    With lat/lng results are ordered nearest first and carry distance_km;
    adding radius drops products whose producer is farther away.
    Without a location results are ordered newest first.
    """
    try:
        criteria = SearchCriteria.from_params(
            q=q, lat=lat, lng=lng, radius=radius, category=category, tags=tags
        )
        products = service.search(criteria)

        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error searching products: {str(e)}")


@router.post("", status_code=201)
async def create_product(
    request: ProductCreate,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service)
):
    """Create a product for the current user's producer profile"""
    try:
        product = service.create_product(user.id, request)

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service)
):
    """Get a product with its producer"""
    try:
        product = service.get_product(product_id)

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    request: ProductUpdate,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service)
):
    """Update one of the current user's products"""
    try:
        product = service.update_product(user.id, product_id, request)

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service)
):
    """Delete one of the current user's products"""
    try:
        service.delete_product(user.id, product_id)

        return {
            "status": "success",
            "message": f"Product {product_id} deleted"
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")


@router.get("/{product_id}/reviews")
async def get_product_reviews(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service)
):
    """Get a product's reviews, newest first"""
    try:
        reviews = service.list_reviews(product_id)

        return {
            "status": "success",
            "count": len(reviews),
            "data": [review.to_dict() for review in reviews]
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching reviews: {str(e)}")


@router.post("/{product_id}/reviews", status_code=201)
async def create_product_review(
    product_id: str,
    request: ReviewCreate,
    user: TokenUser = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service)
):
    """Review a product; the producer's rating is updated with it"""
    try:
        review = service.add_review(user.id, product_id, request)

        return {
            "status": "success",
            "data": review.to_dict()
        }

    except MarketplaceError as e:
        raise HTTPException(status_code=status_code_for(e), detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating review: {str(e)}")
