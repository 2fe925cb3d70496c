"""Daily summary / action item / Kanban persistence shared by server and CLI."""

from .models import ActionItem, KanbanColumn, KanbanItem, StoredSummary
from .repository import DigestRepository

__all__ = ["ActionItem", "DigestRepository", "KanbanColumn", "KanbanItem", "StoredSummary"]
