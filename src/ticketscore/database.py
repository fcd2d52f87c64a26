"""Relational rating store backed by SQLAlchemy.

The store is constructed explicitly with :meth:`RatingStore.connect` and
injected into the scoring service; nothing here is created at import time.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Generator, List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, create_engine, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .errors import ServiceConnectionError, StorageError
from .intervals import parse_calendar_date
from .models import Agent, Category, RatingRow

logger = logging.getLogger(__name__)

Base = declarative_base()


class User(Base):
    """A user; agents are the users that receive ratings."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)


class RatingCategory(Base):
    """A rating dimension and its importance in the overall score."""

    __tablename__ = "rating_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    weight = Column(Integer, nullable=False)


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subject = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=True)


class Rating(Base):
    """One rating given by a reviewer to a reviewee for a ticket and category."""

    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    rating = Column(Integer, nullable=False)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False)
    rating_category_id = Column(Integer, ForeignKey("rating_categories.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    reviewee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=True, index=True)


def _day_window(start_date: str, end_date: str) -> tuple[datetime, datetime]:
    """Return ``[start 00:00, day after end 00:00)`` covering both whole days."""
    start: date = parse_calendar_date(start_date)
    end: date = parse_calendar_date(end_date)
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


class RatingStore:
    """Read access to ratings, agents and categories."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def connect(cls, database_url: str, echo: bool = False) -> "RatingStore":
        """Create a store for ``database_url`` and verify the connection.

        Raises:
            ServiceConnectionError: If the engine cannot be created or the
                database cannot be reached.
        """
        connect_args: Dict[str, Any] = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        try:
            engine = create_engine(database_url, echo=echo, connect_args=connect_args)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Rating store connection failed", extra={"database": database_url.split("@")[-1]})
            raise ServiceConnectionError(f"Cannot connect to rating store: {exc}") from exc

        logger.info("Rating store connected", extra={"database": database_url.split("@")[-1]})
        return cls(engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Session scope that commits on success and rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create all tables that do not exist yet.

        Raises:
            StorageError: If the schema cannot be created.
        """
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to create rating store schema: {exc}") from exc
        logger.info("Rating store schema initialized")

    def fetch_ratings(
        self,
        start_date: str,
        end_date: str,
        agent_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> List[RatingRow]:
        """Fetch ratings created on any day in ``[start_date, end_date]``.

        ``agent_id`` restricts to one reviewee and ``category_id`` to one
        category; a falsy filter value is ignored.

        Raises:
            DateParseError: If either date is malformed.
            StorageError: If the query fails.
        """
        window_start, window_end = _day_window(start_date, end_date)

        statement = (
            select(
                Rating.rating,
                Rating.created_at,
                RatingCategory.name.label("category_name"),
                RatingCategory.weight,
                Rating.reviewer_id,
                Rating.reviewee_id,
                User.name.label("reviewee_name"),
            )
            .join(RatingCategory, Rating.rating_category_id == RatingCategory.id)
            .join(User, Rating.reviewee_id == User.id)
            .where(Rating.created_at >= window_start, Rating.created_at < window_end)
            .order_by(Rating.created_at, Rating.id)
        )
        if agent_id:
            statement = statement.where(Rating.reviewee_id == agent_id)
        if category_id:
            statement = statement.where(Rating.rating_category_id == category_id)

        try:
            with self.session() as session:
                result = session.execute(statement).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to fetch ratings: {exc}") from exc

        ratings = [
            RatingRow(
                rating=row.rating,
                created_at=row.created_at.isoformat(),
                category_name=row.category_name,
                weight=row.weight,
                reviewee_id=row.reviewee_id,
                reviewee_name=row.reviewee_name,
                reviewer_id=row.reviewer_id,
            )
            for row in result
        ]

        logger.debug(
            "Fetched ratings",
            extra={
                "start_date": start_date,
                "end_date": end_date,
                "agent_id": agent_id,
                "category_id": category_id,
                "ratings_total": len(ratings),
            },
        )
        return ratings

    def list_agents(self) -> List[Agent]:
        """List every user that can be rated, ordered by id."""
        try:
            with self.session() as session:
                rows = session.execute(select(User.id, User.name).order_by(User.id)).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to list agents: {exc}") from exc
        return [Agent(id=row.id, name=row.name) for row in rows]

    def list_categories(self) -> List[Category]:
        """List rating categories, ordered by id."""
        try:
            with self.session() as session:
                rows = session.execute(
                    select(RatingCategory.id, RatingCategory.name).order_by(RatingCategory.id)
                ).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to list categories: {exc}") from exc
        return [Category(id=row.id, name=row.name) for row in rows]

    def dispose(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
