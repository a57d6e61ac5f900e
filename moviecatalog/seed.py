"""
Seed the database with a demo account and a handful of sample movies.

Run with ``python -m moviecatalog.seed``. Safe to run repeatedly: the demo
user is created only once, and movies only when that user has none.
"""
import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from moviecatalog.core.config import Settings, get_settings
from moviecatalog.database import build_engine, init_db
from moviecatalog.models.movie import Movie
from moviecatalog.models.user import User
from moviecatalog.repositories.user_repo import get_user_by_email
from moviecatalog.services import movie_service, user_service

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo_user"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password"

SAMPLE_MOVIES = [
    {"title": "Inception", "kind": "Movie", "director": "Christopher Nolan",
     "budget": "$160M", "location": "LA, Paris", "duration": "148 min", "time_period": "2010",
     "description": "A thief who steals corporate secrets through dream-sharing technology "
                    "is given the inverse task of planting an idea.",
     "rating": 8.8, "poster_url": "https://image.tmdb.org/t/p/w500/9gk7adHYeDvHkCSEqAvQNLV5Uge.jpg"},
    {"title": "Breaking Bad", "kind": "TV Show", "director": "Vince Gilligan",
     "budget": "$3M/ep", "location": "Albuquerque", "duration": "49 min/ep", "time_period": "2008-2013",
     "description": "A chemistry teacher turned methamphetamine manufacturer.",
     "rating": 9.5, "poster_url": "https://image.tmdb.org/t/p/w500/ggFHVNu6YYI5L9pCfOacMizPGv.png"},
    {"title": "The Shawshank Redemption", "kind": "Movie", "director": "Frank Darabont",
     "budget": "$25M", "location": "Mansfield, Ohio", "duration": "142 min", "time_period": "1994",
     "description": "Two imprisoned men bond over a number of years.",
     "rating": 9.3, "poster_url": "https://image.tmdb.org/t/p/w500/q6y0Go1tsGEsmtFryDOJo3dEmqu.jpg"},
    {"title": "Game of Thrones", "kind": "TV Show", "director": "David Benioff",
     "budget": "$6M/ep", "location": "Northern Ireland", "duration": "57 min/ep", "time_period": "2011-2019",
     "description": "Noble families fight for control over the lands of Westeros.",
     "rating": 9.3, "poster_url": "https://image.tmdb.org/t/p/w500/u3bZgnGQ9T01sWNhyveQz0wH0Hl.jpg"},
    {"title": "The Dark Knight", "kind": "Movie", "director": "Christopher Nolan",
     "budget": "$185M", "location": "Chicago, London", "duration": "152 min", "time_period": "2008",
     "description": "Batman faces the Joker.",
     "rating": 9.0, "poster_url": "https://image.tmdb.org/t/p/w500/qJ2tW6WMUDux911r6m7haRef0WH.jpg"},
    {"title": "Stranger Things", "kind": "TV Show", "director": "The Duffer Brothers",
     "budget": "$6M/ep", "location": "Atlanta, Georgia", "duration": "51 min/ep", "time_period": "2016-2024",
     "description": "A young boy disappears and his friends confront supernatural forces.",
     "rating": 8.7, "poster_url": "https://image.tmdb.org/t/p/w500/49WJfeN0moxb9IPfGn8AIqMGskD.jpg"},
    {"title": "Pulp Fiction", "kind": "Movie", "director": "Quentin Tarantino",
     "budget": "$8.5M", "location": "Los Angeles", "duration": "154 min", "time_period": "1994",
     "description": "Four intertwined tales of violence and redemption.",
     "rating": 8.9, "poster_url": "https://image.tmdb.org/t/p/w500/d5iIlFn5s0ImszYzBPb8JPIfbXD.jpg"},
    {"title": "The Office", "kind": "TV Show", "director": "Greg Daniels",
     "budget": "$2.5M/ep", "location": "Los Angeles", "duration": "22 min/ep", "time_period": "2005-2013",
     "description": "A mockumentary on a group of typical office workers.",
     "rating": 8.9, "poster_url": "https://image.tmdb.org/t/p/w500/qWnJzyZhyy74gjpSjIXWmuk0ifX.jpg"},
    {"title": "Fight Club", "kind": "Movie", "director": "David Fincher",
     "budget": "$63M", "location": "Los Angeles", "duration": "139 min", "time_period": "1999",
     "description": "An insomniac office worker forms an underground fight club.",
     "rating": 8.8, "poster_url": "https://image.tmdb.org/t/p/w500/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg"},
    {"title": "Friends", "kind": "TV Show", "director": "David Crane",
     "budget": "$1M/ep", "location": "Los Angeles", "duration": "22 min/ep", "time_period": "1994-2004",
     "description": "Six friends living in Manhattan.",
     "rating": 8.9, "poster_url": "https://image.tmdb.org/t/p/w500/f496cm9enuEsZkSPWgVltW7gMKH.jpg"},
]


def seed_demo_user(db: Session, settings: Settings) -> User:
    user = get_user_by_email(db, DEMO_EMAIL)
    if user:
        logger.info("Demo user '%s' already exists", DEMO_EMAIL)
        return user
    user = user_service.create_user(db, DEMO_USERNAME, DEMO_EMAIL, DEMO_PASSWORD, settings)
    logger.info("Created demo user: %s", DEMO_EMAIL)
    return user


def seed_movies(db: Session, owner: User) -> int:
    existing = db.exec(select(Movie).where(Movie.owner_id == owner.id)).first()
    if existing:
        logger.info("Demo user already has movies")
        return 0
    for data in SAMPLE_MOVIES:
        movie_service.create_movie(db, data, owner.id)
    logger.info("Created %d sample movies", len(SAMPLE_MOVIES))
    return len(SAMPLE_MOVIES)


def seed(engine: Engine, settings: Settings) -> None:
    init_db(engine)
    with Session(engine) as db:
        owner = seed_demo_user(db, settings)
        seed_movies(db, owner)


def main(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    logger.info("Starting database seeding...")
    engine = build_engine(settings)
    try:
        seed(engine, settings)
        logger.info("Database seeding completed successfully")
    except Exception as e:
        logger.error("Error during seeding: %s", e)
        raise
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
