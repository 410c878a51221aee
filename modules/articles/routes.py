"""HTTP routes for articles: public reading, admin publishing."""

from flask import jsonify, request
from flask_login import current_user

from models import RoleName
from permissions import is_admin, role_required
from utils import pagination_meta, parse_body, parse_pagination

from . import bp
from .models import (
    create_article as create,
    delete_article as delete,
    get_article,
    get_published_by_slug,
    list_categories,
    list_for_admin,
    list_published,
    update_article as update,
)
from .schemas import ArticlePayload


# ---------- Public ----------
@bp.route("", methods=["GET"])
def get_all_articles():
    limit, offset = parse_pagination(default_limit=10)
    category = (request.args.get("category") or "").strip() or None
    search = (request.args.get("search") or "").strip() or None
    articles, total = list_published(category, search, limit, offset)
    return jsonify(
        success=True,
        data=[article.to_summary() for article in articles],
        pagination=pagination_meta(total, limit, offset),
    )


@bp.route("/categories", methods=["GET"])
def get_categories():
    return jsonify(success=True, data=[category.to_dict() for category in list_categories()])


@bp.route("/<string:slug>", methods=["GET"])
def get_article_by_slug(slug: str):
    return jsonify(success=True, data=get_published_by_slug(slug).to_public())


# ---------- Admin ----------
@bp.route("/admin", methods=["GET"])
@role_required({RoleName.ADMIN})
def get_admin_articles():
    limit, offset = parse_pagination(default_limit=20)
    raw = request.args.get("published")
    published = None if raw is None else raw.lower() == "true"
    articles, total = list_for_admin(published, limit, offset)
    return jsonify(
        success=True,
        data=[article.to_admin_row() for article in articles],
        pagination=pagination_meta(total, limit, offset),
    )


@bp.route("/admin/<int:article_id>", methods=["GET"])
@role_required({RoleName.ADMIN})
def get_article_by_id(article_id: int):
    return jsonify(success=True, data=get_article(article_id).to_admin_detail())


@bp.route("", methods=["POST"])
@role_required({RoleName.ADMIN})
def create_article():
    payload = parse_body(ArticlePayload)
    article = create(
        author_id=current_user.id,
        title=payload.title,
        summary=payload.summary,
        content=payload.content,
        image_url=payload.imageUrl,
        published=payload.published,
        category_ids=payload.categoryIds,
    )
    data = {"id": article.id, "title": article.title, "slug": article.slug,
            "created_at": article.created_at.isoformat()}
    return jsonify(success=True, data=data, message="Article créé avec succès"), 201


@bp.route("/<int:article_id>", methods=["PUT"])
@role_required({RoleName.ADMIN})
def update_article(article_id: int):
    payload = parse_body(ArticlePayload)
    article = update(
        article_id,
        editor_id=current_user.id,
        editor_is_admin=is_admin(),
        title=payload.title,
        summary=payload.summary,
        content=payload.content,
        image_url=payload.imageUrl,
        published=payload.published,
        category_ids=payload.categoryIds,
    )
    data = {"id": article.id, "title": article.title, "slug": article.slug,
            "updated_at": article.updated_at.isoformat()}
    return jsonify(success=True, data=data, message="Article mis à jour avec succès")


@bp.route("/<int:article_id>", methods=["DELETE"])
@role_required({RoleName.ADMIN})
def delete_article(article_id: int):
    delete(article_id, editor_id=current_user.id, editor_is_admin=is_admin())
    return jsonify(success=True, message="Article supprimé avec succès")
