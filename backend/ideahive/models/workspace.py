from ideahive.extensions import db
from .base import BaseModel

class Workspace(BaseModel):
    __tablename__ = "workspaces"

    name = db.Column(db.String(200), nullable=False)
    owner_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    members = db.relationship(
        "WorkspaceMember",
        back_populates="workspace",
        cascade="all, delete-orphan"
    )


class WorkspaceMember(BaseModel):
    __tablename__ = "workspace_members"

    workspace_id = db.Column(db.String(36), db.ForeignKey("workspaces.id"), nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="MEMBER")  # OWNER | ADMIN | MEMBER | VIEWER

    workspace = db.relationship("Workspace", back_populates="members")

    __table_args__ = (
        db.UniqueConstraint("workspace_id", "user_id", name="uq_workspace_member"),
    )
