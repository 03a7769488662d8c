"""
RecipeShare Backend - Recipe SQLAlchemy Model
==============================================

What:  ORM model representing the `recipes` table.
How:   Inherits from the DeclarativeBase in recipeshare.database; the table is
       created at startup by `create_tables()`.
Who:   Used by RecipeStore for every read and write.

Table:
    recipes(
        id        INTEGER PRIMARY KEY AUTOINCREMENT,
        title     TEXT NOT NULL,
        recipe    TEXT NOT NULL,
        thumbnail TEXT NOT NULL,   -- generated filename under <storage_root>/thumbnail/
        timestamp DATETIME DEFAULT CURRENT_TIMESTAMP
    )

    sqlite_autoincrement emits the AUTOINCREMENT keyword, which stops SQLite
    from handing out the id of a deleted row again.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from recipeshare.database import Base


class Recipe(Base):
    """
    A submitted recipe.

    Lifecycle:
        1. Inserted by POST /add-recipe (fields and thumbnail arrive together)
        2. Mutated only by PUT /update-recipe (text fields and/or thumbnail)
        3. Removed by POST /delete-recipe, together with its thumbnail file

    `id` and `timestamp` are assigned on insert and never change.
    """

    __tablename__ = "recipes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    # The recipe body text
    recipe: Mapped[str] = mapped_column(Text, nullable=False)

    # Generated filename (e.g. 1718035200000-482913377.jpg), never the
    # client's original name
    thumbnail: Mapped[str] = mapped_column(Text, nullable=False)

    # Set once on insert; the update statement never touches it
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation for debugging."""
        return f"<Recipe(id={self.id}, title='{self.title}', thumbnail='{self.thumbnail}')>"
