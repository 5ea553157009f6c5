from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Optional

SIZE_CLASSES: dict[str, str] = {
    "text-sm": "Small",
    "text-base": "Normal",
    "text-lg": "Large",
    "text-xl": "Extra Large",
}
DEFAULT_SIZE_CLASS = "text-base"


def _now_iso() -> str:
    return datetime.now().replace(microsecond=0).isoformat()


@dataclass
class CommentFormatting:
    bold: bool = False
    italic: bool = False
    size_class: str = DEFAULT_SIZE_CLASS

    def __post_init__(self) -> None:
        if self.size_class not in SIZE_CLASSES:
            raise ValueError(f"Unknown size class: {self.size_class}")


@dataclass
class Comment:
    id: str
    content: str
    title: str = ""
    created_at: str = field(default_factory=_now_iso)
    formatting: CommentFormatting = field(default_factory=CommentFormatting)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Comment":
        fmt = payload.get("formatting") if isinstance(payload.get("formatting"), dict) else {}
        size_class = str(fmt.get("size_class") or DEFAULT_SIZE_CLASS)
        if size_class not in SIZE_CLASSES:
            size_class = DEFAULT_SIZE_CLASS
        return cls(
            id=str(payload.get("id") or uuid.uuid4().hex),
            title=str(payload.get("title") or ""),
            content=str(payload.get("content") or ""),
            created_at=str(payload.get("created_at") or _now_iso()),
            formatting=CommentFormatting(
                bold=bool(fmt.get("bold", False)),
                italic=bool(fmt.get("italic", False)),
                size_class=size_class,
            ),
        )


def add_comment(
    comments: list[Comment],
    content: str,
    title: str = "",
    formatting: Optional[CommentFormatting] = None,
) -> Optional[Comment]:
    """Append a comment; blank content is ignored and returns ``None``."""
    content = str(content or "").strip()
    if not content:
        return None
    comment = Comment(
        id=uuid.uuid4().hex,
        title=str(title or "").strip(),
        content=content,
        formatting=formatting if formatting is not None else CommentFormatting(),
    )
    comments.append(comment)
    return comment


def update_comment(comments: list[Comment], comment_id: str, title: str, content: str) -> bool:
    title = str(title or "").strip()
    content = str(content or "").strip()
    if not title or not content:
        return False
    for comment in comments:
        if comment.id == comment_id:
            comment.title = title
            comment.content = content
            return True
    return False


def delete_comment(comments: list[Comment], comment_id: str) -> bool:
    before = len(comments)
    comments[:] = [c for c in comments if c.id != comment_id]
    return len(comments) != before
