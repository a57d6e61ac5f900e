import logging

from sqlmodel import Session, select

from moviecatalog import seed
from moviecatalog.models.movie import Movie
from moviecatalog.services import user_service


def test_seed_is_idempotent(engine, settings):
    seed.seed(engine, settings)
    seed.seed(engine, settings)

    with Session(engine) as db:
        demo = user_service.find_by_email(db, seed.DEMO_EMAIL)
        assert demo is not None
        movies = db.exec(select(Movie).where(Movie.owner_id == demo.id)).all()
        assert len(movies) == len(seed.SAMPLE_MOVIES)


def test_seed_never_logs_the_password(engine, settings, caplog, monkeypatch):
    monkeypatch.setattr(seed, "DEMO_PASSWORD", "s3cret-demo-pass")

    with caplog.at_level(logging.DEBUG):
        seed.seed(engine, settings)

    assert "Created demo user: demo@example.com" in caplog.text
    assert "s3cret-demo-pass" not in caplog.text

    with Session(engine) as db:
        user, _ = user_service.authenticate_user(db, seed.DEMO_EMAIL, "s3cret-demo-pass", settings)
        assert user.username == seed.DEMO_USERNAME
