from typing import Any, Optional
from pydantic import BaseModel, Field


class RegistrationRequest(BaseModel):
    # Champs non typés: les règles de validation (400) s'appliquent dans l'ordre,
    # plutôt que la validation pydantic (422)
    username: Optional[Any] = Field(None, examples=["sallyTwo"])
    password: Optional[Any] = Field(None, examples=["abc12345"])
    favoriteClub: Optional[Any] = Field(None, examples=["Ogden Curling Club"])
    newsLetter: Optional[Any] = Field(None, examples=[False])


class UserResponse(BaseModel):
    id: str
    username: str
    password: str
    favoriteClub: str
    newsLetter: bool

    class Config:
        from_attributes = True  # Pour compatibilité Pydantic v2
