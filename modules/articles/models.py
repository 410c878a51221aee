# -*- coding: utf-8 -*-
"""
Article models and publishing operations.

Tables:
- ArticleCategory           : editorial categories (reference data).
- Article                   : the article itself; ``slug`` is unique.
- article_category_relations: many-to-many link between the two.

Slugs:
- the base slug comes from slugify(title); "admin" and "categories" are
  reserved because the routes of the same name would shadow them;
- when it is taken, the number of slugs sharing the prefix decides the
  suffix ("titre" -> "titre-2" -> "titre-3" ...);
- the unique constraint on ``slug`` catches concurrent creations, in which
  case the whole insert is retried with a freshly computed slug.

``published_at`` is stamped on the first publication and never moved.
"""
import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from errors import Forbidden, NotFound, ValidationFailed
from extensions import db, transaction
from utils import isoformat, slugify, utcnow

logger = logging.getLogger(__name__)

SLUG_ATTEMPTS = 3
ARTICLE_NOT_FOUND = "Article non trouvé"
# path segments of the blueprint that a slug would be shadowed by
RESERVED_SLUGS = frozenset({"admin", "categories"})

article_category_relations = db.Table(
    "article_category_relations",
    db.Column("article_id", db.Integer, db.ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True),
    db.Column("category_id", db.Integer, db.ForeignKey("article_categories.id", ondelete="CASCADE"), primary_key=True),
)


class ArticleCategory(db.Model):
    __tablename__ = "article_categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": isoformat(self.created_at),
        }


class Article(db.Model):
    __tablename__ = "articles"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(300), unique=True, nullable=False)
    summary = db.Column(db.String(500))
    content = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(500))
    published = db.Column(db.Boolean, default=False, nullable=False)
    published_at = db.Column(db.DateTime)
    author_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"))
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    author = db.relationship("User")
    categories = db.relationship(
        "ArticleCategory",
        secondary=article_category_relations,
        lazy="selectin",
        order_by="ArticleCategory.name",
    )

    # ------ Serialisation for the different listings ------
    def _author_fields(self) -> dict:
        return {
            "first_name": self.author.first_name if self.author else None,
            "last_name": self.author.last_name if self.author else None,
        }

    def to_summary(self) -> dict:
        """Row of the public listing."""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "summary": self.summary,
            "image_url": self.image_url,
            "published_at": isoformat(self.published_at),
            **self._author_fields(),
            "categories": [c.name for c in self.categories],
        }

    def to_public(self) -> dict:
        data = self.to_summary()
        data.update({
            "content": self.content,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        })
        return data

    def to_admin_row(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "summary": self.summary,
            "published": self.published,
            "created_at": isoformat(self.created_at),
            "published_at": isoformat(self.published_at),
            "updated_at": isoformat(self.updated_at),
            **self._author_fields(),
            "categories": [c.name for c in self.categories],
        }

    def to_admin_detail(self) -> dict:
        data = self.to_admin_row()
        data.update({
            "content": self.content,
            "image_url": self.image_url,
            "author_id": self.author_id,
            "category_ids": [c.id for c in self.categories],
        })
        return data


# ---------- Slugs ----------

def slug_exists(slug: str) -> bool:
    return db.session.query(Article.query.filter(Article.slug == slug).exists()).scalar()


def generate_unique_slug(title: str) -> str:
    base = slugify(title) or "article"
    if base not in RESERVED_SLUGS and not slug_exists(base):
        return base

    # reserved slugs count as taken, so suffixes start at -2
    count = max(Article.query.filter(Article.slug.like(f"{base}%")).count(), 1)
    candidate = f"{base}-{count + 1}"
    while slug_exists(candidate):
        count += 1
        candidate = f"{base}-{count + 1}"
    return candidate


# ---------- Queries ----------

def list_categories() -> list[ArticleCategory]:
    return ArticleCategory.query.order_by(ArticleCategory.name).all()


def list_published(category: str | None, search: str | None, limit: int, offset: int) -> tuple[list[Article], int]:
    query = Article.query.filter(Article.published.is_(True))
    if category:
        query = query.filter(Article.categories.any(ArticleCategory.name == category))
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            Article.title.ilike(like),
            Article.content.ilike(like),
            Article.summary.ilike(like),
        ))
    total = query.count()
    articles = (query.order_by(Article.published_at.desc(), Article.id.desc())
                .limit(limit)
                .offset(offset)
                .all())
    return articles, total


def list_for_admin(published: bool | None, limit: int, offset: int) -> tuple[list[Article], int]:
    query = Article.query
    if published is not None:
        query = query.filter(Article.published.is_(published))
    total = query.count()
    articles = (query.order_by(Article.created_at.desc(), Article.id.desc())
                .limit(limit)
                .offset(offset)
                .all())
    return articles, total


def get_published_by_slug(slug: str) -> Article:
    article = Article.query.filter(Article.slug == slug, Article.published.is_(True)).first()
    if article is None:
        raise NotFound(ARTICLE_NOT_FOUND)
    return article


def get_article(article_id: int) -> Article:
    article = db.session.get(Article, article_id)
    if article is None:
        raise NotFound(ARTICLE_NOT_FOUND)
    return article


# ---------- Writes ----------

def _load_categories(category_ids: list[int]) -> list[ArticleCategory]:
    wanted = set(category_ids)
    if not wanted:
        return []
    categories = ArticleCategory.query.filter(ArticleCategory.id.in_(wanted)).all()
    missing = wanted - {c.id for c in categories}
    if missing:
        raise ValidationFailed(errors=[{
            "field": "categoryIds",
            "message": f"Catégories inconnues : {', '.join(str(i) for i in sorted(missing))}",
        }])
    return categories


def create_article(author_id: int, title: str, summary: str | None, content: str,
                   image_url: str | None, published: bool, category_ids: list[int]) -> Article:
    for attempt in range(1, SLUG_ATTEMPTS + 1):
        slug = None
        try:
            with transaction():
                slug = generate_unique_slug(title)
                article = Article(
                    title=title,
                    slug=slug,
                    summary=summary,
                    content=content,
                    image_url=image_url,
                    published=published,
                    published_at=utcnow() if published else None,
                    author_id=author_id,
                    categories=_load_categories(category_ids),
                )
                db.session.add(article)
                db.session.flush()
        except IntegrityError:
            # another request took the slug between our check and the insert
            if attempt == SLUG_ATTEMPTS or slug is None or not slug_exists(slug):
                raise
            logger.warning("Slug %s taken concurrently, retrying (%d/%d)", slug, attempt, SLUG_ATTEMPTS)
            continue
        logger.info("Article %s created by user %s (slug=%s)", article.id, author_id, slug)
        return article


def update_article(article_id: int, editor_id: int, editor_is_admin: bool, title: str,
                   summary: str | None, content: str, image_url: str | None,
                   published: bool, category_ids: list[int] | None) -> Article:
    with transaction():
        article = get_article(article_id)
        if not editor_is_admin and article.author_id != editor_id:
            raise Forbidden("Accès non autorisé")

        if published and article.published_at is None:
            article.published_at = utcnow()
        article.title = title
        article.summary = summary
        article.content = content
        article.image_url = image_url
        article.published = published
        if category_ids is not None:
            article.categories = _load_categories(category_ids)
        article.updated_at = utcnow()

    logger.info("Article %s updated by user %s", article_id, editor_id)
    return article


def delete_article(article_id: int, editor_id: int, editor_is_admin: bool) -> None:
    with transaction():
        article = get_article(article_id)
        if not editor_is_admin and article.author_id != editor_id:
            raise Forbidden("Accès non autorisé")
        db.session.delete(article)
    logger.info("Article %s deleted by user %s", article_id, editor_id)
