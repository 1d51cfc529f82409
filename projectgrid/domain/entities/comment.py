"""Task comment entity."""

from dataclasses import dataclass
from datetime import datetime

from projectgrid.domain.exceptions import ValidationException


@dataclass
class CommentEntity:
    id: str
    task_id: str
    author_id: str
    text: str
    is_edited: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValidationException("Comment text is required", field="text")
