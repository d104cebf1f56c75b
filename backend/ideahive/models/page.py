from ideahive.extensions import db
from .base import BaseModel

class Page(BaseModel):
    __tablename__ = 'pages'

    workspace_id = db.Column(db.String(36), db.ForeignKey("workspaces.id"), nullable=False, index=True)
    parent_page_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=True, index=True)
    title = db.Column(db.String(200), nullable=False, default="Untitled")
    icon = db.Column(db.String(50), nullable=True)
    is_public = db.Column(db.Boolean, nullable=False, default=False)
    created_by = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)
