from __future__ import annotations

from ..extensions import db


class StorageEntry(db.Model):
    """
    One named collection of the terminal's key-value store.

    The value is opaque text (serialized JSON written by the services);
    the table offers no querying beyond whole-entry read and write.
    """
    __tablename__ = "storage_entries"

    key = db.Column(db.String(128), primary_key=True)
    value = db.Column(db.Text, nullable=False)

    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<StorageEntry key={self.key!r} size={len(self.value or '')}>"
