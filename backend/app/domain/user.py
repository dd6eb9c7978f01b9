"""
User Domain Models

Users and the geographic location shared by users and producers.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class Location(BaseModel):
    """A point on Earth in decimal degrees"""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @classmethod
    def from_row(cls, row: dict, prefix: str = "") -> Optional["Location"]:
        """Build a Location from latitude/longitude columns, None if either is missing"""
        lat = row.get(f"{prefix}latitude")
        lng = row.get(f"{prefix}longitude")
        if lat is None or lng is None:
            return None
        return cls(latitude=float(lat), longitude=float(lng))


class User(BaseModel):
    """
    User domain model - a consumer, producer or business account

    Fields:
        id: User ID (uuid)
        email: Login email
        username: Public handle
        role: consumer, producer or business
        profile_completion: Onboarding progress (0-100)
        location: Home location used as default search origin
        city: City name
        province: Province name
    """

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    username: str = Field(..., description="Username")
    role: str = Field("consumer", description="consumer, producer or business")
    profile_completion: int = Field(0, ge=0, le=100, description="Profile completion percentage")
    location: Optional[Location] = Field(None, description="User location")
    city: Optional[str] = None
    province: Optional[str] = None
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class UserUpdate(BaseModel):
    """Schema for updating the current user's profile"""
    username: Optional[str] = None
    location: Optional[Location] = None
    city: Optional[str] = None
    province: Optional[str] = None
