# enquiry_app/models/base.py
"""
Shared SQLAlchemy handle and timestamped base model.
"""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc)


class BaseModel(db.Model):
    """Abstract base carrying creation and modification timestamps."""

    __abstract__ = True

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
