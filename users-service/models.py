from typing import List
from pydantic import BaseModel


class User(BaseModel):
    id: str
    username: str
    # Stocké en clair, aucun hachage n'est appliqué
    password: str
    favoriteClub: str
    newsLetter: bool = False


def seed_users() -> List[User]:
    """Utilisateurs présents au démarrage du service."""
    return [
        User(
            id="3c8da4d5-1597-46e7-baa1-e402aed70d80",
            username="sallyStudent",
            password="c00d1ng1sc00l",
            favoriteClub="Cache Valley Stone Society",
            newsLetter=True,
        ),
        User(
            id="ce20079c-2326-4f17-8ac4-f617bfd28b7f",
            username="johnBlocton",
            password="veryg00dpassw0rd",
            favoriteClub="Salt City Curling Club",
            newsLetter=False,
        ),
    ]
