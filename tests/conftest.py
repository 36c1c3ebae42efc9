import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fieldbook.db.session import Base
from fieldbook.db import models


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db_session):
    counter = {"n": 0}

    def factory(first_name="Alex"):
        counter["n"] += 1
        user = models.User(
            email=f"player{counter['n']}@example.com",
            first_name=first_name,
            last_name="Player",
        )
        db_session.add(user)
        db_session.commit()
        return user

    return factory


@pytest.fixture()
def make_field(db_session):
    complex_ = models.Complex(name="Arena", address="1 Stadium Road")
    db_session.add(complex_)
    db_session.commit()
    counter = {"n": 0}

    def factory(price=50):
        counter["n"] += 1
        field = models.Field(
            complex_id=complex_.id,
            name=f"Pitch {counter['n']}",
            type="football",
            price=price,
        )
        db_session.add(field)
        db_session.commit()
        return field

    return factory
