from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, Integer, MetaData, Table, Text

metadata = MetaData()

activities_table = Table(
    "activities",
    metadata,
    Column("id", Text, primary_key=True),
    Column("title", Text, nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("category", Text),
    Column("subcategory", Text),
    Column("when", Text, nullable=False, default=""),
    Column("lat", Float),
    Column("lon", Float),
    Column("location", Text),
    Column("status", Text, nullable=False, default="published"),
    Column("website", Text),
    Column("image", Text),
    Column("position", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)
