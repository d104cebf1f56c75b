from ideahive.extensions import db
from .base import BaseModel

class Template(BaseModel):
    """
    Relational metadata for a template.
    The block list itself lives in the `templates` document collection
    under the same id.
    """
    __tablename__ = "templates"

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    workspace_id = db.Column(db.String(36), db.ForeignKey("workspaces.id"), nullable=True, index=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
