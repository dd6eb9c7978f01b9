"""
Product Domain Models

Represents producers and the products they list on the marketplace.
These are the single source of truth for catalog data structure.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from app.domain.user import Location


class Producer(BaseModel):
    """
    Producer domain model - a farm or food business selling on the marketplace

    Fields:
        id: Producer ID (uuid)
        user_id: Owning user account
        business_name: Public business name
        description: Short description
        story: Long-form producer story
        certifications: Organic, fair-trade, etc.
        location: Farm/shop location used for radius search
        address: Street address
        phone: Contact phone
        website: Public website
        verified: Whether the marketplace verified this producer
        rating: Average review rating (0.0 - 5.0)
        total_reviews: Number of reviews
    """

    id: str = Field(..., description="Producer ID")
    user_id: str = Field(..., description="Owning user ID")
    business_name: str = Field(..., description="Business name")
    description: Optional[str] = None
    story: Optional[str] = None
    certifications: List[str] = Field(default_factory=list)
    location: Optional[Location] = Field(None, description="Producer location")
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    profile_image: Optional[str] = None
    verified: bool = False
    rating: Decimal = Field(Decimal("0.0"), ge=0, le=5)
    total_reviews: int = Field(0, ge=0)
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data['rating'] = float(self.rating)
        return data


class Product(BaseModel):
    """
    Product domain model - an item listed by a producer

    Fields:
        id: Product ID (uuid)
        producer_id: Owning producer
        name: Product name
        description: Product description (optional)
        category: Product category (vegetables, dairy, ...)
        price: Price per unit
        unit: Unit description (kg, piece, bunch, ...)
        stock: Units in stock
        images: Image URLs
        tags: Free-form tags (organic, local, ...)
        seasonal: Whether the product is seasonal
        available: Whether the product is listed for sale
    """

    id: str = Field(..., description="Product ID")
    producer_id: str = Field(..., description="Producer ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    category: str = Field(..., description="Product category")
    price: Decimal = Field(..., description="Price per unit", ge=0)
    unit: str = Field(..., description="Unit description (kg, piece, bunch)")
    stock: int = Field(0, description="Units in stock", ge=0)
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    seasonal: bool = False
    available: bool = True
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock <= 0

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump(mode="json")
        data['price'] = float(self.price)
        data['is_out_of_stock'] = self.is_out_of_stock
        return data


class ProductWithProducer(Product):
    """
    Product joined with its producer, as returned by catalog reads and search

    distance_km is set by radius search (one decimal), None otherwise.
    """

    producer: Producer
    distance_km: Optional[float] = Field(None, description="Distance from search origin in km")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['producer'] = self.producer.to_dict()
        data['distance_km'] = self.distance_km
        return data


class ProducerCreate(BaseModel):
    """Schema for creating a producer profile"""
    business_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    story: Optional[str] = None
    certifications: List[str] = Field(default_factory=list)
    location: Optional[Location] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None


class ProducerUpdate(BaseModel):
    """Schema for updating a producer profile"""
    business_name: Optional[str] = None
    description: Optional[str] = None
    story: Optional[str] = None
    certifications: Optional[List[str]] = None
    location: Optional[Location] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    profile_image: Optional[str] = None


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str
    price: Decimal = Field(..., ge=0)
    unit: str
    stock: int = Field(0, ge=0)
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    seasonal: bool = False


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    unit: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    seasonal: Optional[bool] = None
    available: Optional[bool] = None
