"""Request payloads of the articles module."""
from typing import List, Optional

from pydantic import BaseModel, HttpUrl, TypeAdapter, ValidationError, field_validator

_HTTP_URL = TypeAdapter(HttpUrl)


class ArticlePayload(BaseModel):
    title: str
    summary: Optional[str] = None
    content: str
    imageUrl: Optional[str] = None
    published: bool
    categoryIds: List[int]

    @field_validator("title")
    @classmethod
    def title_length(cls, v: str) -> str:
        v = v.strip()
        if not 5 <= len(v) <= 255:
            raise ValueError("Le titre doit contenir entre 5 et 255 caractères")
        return v

    @field_validator("summary")
    @classmethod
    def summary_length(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if len(v) > 500:
            raise ValueError("Le résumé ne peut pas dépasser 500 caractères")
        return v

    @field_validator("content")
    @classmethod
    def content_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Le contenu est requis")
        return v

    @field_validator("imageUrl")
    @classmethod
    def http_url(cls, v: Optional[str]) -> Optional[str]:
        # checked as a URL, stored exactly as sent
        if v is None or not v.strip():
            return None
        v = v.strip()
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError:
            raise ValueError("L'URL de l'image est invalide") from None
        return v
