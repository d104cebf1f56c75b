from .user import User
from .workspace import Workspace, WorkspaceMember
from .page import Page
from .template import Template

__all__ = ["User", "Workspace", "WorkspaceMember", "Page", "Template"]
