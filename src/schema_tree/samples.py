"""Demo ER documents used to seed an empty ER collection.

``sample_schemas`` returns wire-form documents (the same shape the codec
reads), so they pass through ``decode_document`` like anything loaded from
a store. Timestamps are relative to the time of the call.

Example:
    >>> from schema_tree import ER_DIALECT, DocumentCollection
    >>> from schema_tree.samples import sample_schemas
    >>> collection = DocumentCollection(ER_DIALECT, seed=sample_schemas)
    >>> [d.name for d in collection.documents]
    ['E-commerce System', 'Blog Platform']
"""

from __future__ import annotations

from typing import Any

from schema_tree.ids import now_ms

__all__ = ["sample_schemas"]

_HOUR_MS = 3_600_000
_DAY_MS = 24 * _HOUR_MS


def _field(
    field_id: str, name: str, type_: str, required: bool = True, **extra: Any
) -> dict[str, Any]:
    return {"id": field_id, "name": name, "type": type_, "required": required, **extra}


def _entity(
    entity_id: str, name: str, x: int, y: int, fields: list[dict[str, Any]]
) -> dict[str, Any]:
    return {"id": entity_id, "name": name, "position": {"x": x, "y": y}, "fields": fields}


def _relationship(rel_id: str, source: str, target: str, type_: str, name: str) -> dict[str, Any]:
    """Relationship between entities given by id suffix (``"user"`` is ``"entity-user"``)."""
    return {
        "id": rel_id,
        "fromEntityId": f"entity-{source}",
        "toEntityId": f"entity-{target}",
        "type": type_,
        "name": name,
    }


def _ecommerce(now: int) -> dict[str, Any]:
    product_metadata = _field(
        "field-product-metadata",
        "metadata",
        "object",
        required=False,
        nestedFields=[
            _field(
                "nested-meta-tags",
                "tags",
                "array",
                required=False,
                arrayItemType={"type": "primitive", "value": "string"},
            ),
            _field(
                "nested-meta-dimensions",
                "dimensions",
                "object",
                required=False,
                nestedFields=[
                    _field("nested-dim-width", "width", "number"),
                    _field("nested-dim-height", "height", "number"),
                    _field("nested-dim-depth", "depth", "number"),
                ],
            ),
            _field(
                "nested-meta-reviews",
                "reviews",
                "array",
                required=False,
                arrayItemType={
                    "type": "object",
                    "fields": [
                        _field("nested-review-rating", "rating", "number"),
                        _field("nested-review-comment", "comment", "string", required=False),
                        _field(
                            "nested-review-author",
                            "author",
                            "object",
                            nestedFields=[
                                _field("nested-author-name", "name", "string"),
                                _field("nested-author-email", "email", "string", required=False),
                            ],
                        ),
                    ],
                },
            ),
        ],
    )
    return {
        "id": "dummy-ecommerce-1",
        "name": "E-commerce System",
        "description": "A complete e-commerce platform schema with products, orders, and users",
        "createdAt": now - _DAY_MS,
        "updatedAt": now - _HOUR_MS,
        "entities": [
            _entity(
                "entity-user",
                "User",
                100,
                100,
                [
                    _field("field-user-id", "id", "number"),
                    _field("field-user-email", "email", "string"),
                    _field("field-user-name", "name", "string"),
                    _field("field-user-password", "password", "string"),
                    _field("field-user-created", "createdAt", "date"),
                ],
            ),
            _entity(
                "entity-product",
                "Product",
                500,
                100,
                [
                    _field("field-product-id", "id", "number"),
                    _field("field-product-title", "title", "string"),
                    _field("field-product-description", "description", "string", required=False),
                    _field("field-product-price", "price", "number"),
                    _field("field-product-stock", "stock", "number"),
                    _field("field-product-active", "isActive", "boolean"),
                    product_metadata,
                ],
            ),
            _entity(
                "entity-order",
                "Order",
                300,
                400,
                [
                    _field("field-order-id", "id", "number"),
                    _field("field-order-userId", "userId", "number"),
                    _field("field-order-total", "total", "number"),
                    _field("field-order-status", "status", "string"),
                    _field("field-order-date", "orderDate", "date"),
                ],
            ),
            _entity(
                "entity-orderitem",
                "OrderItem",
                700,
                400,
                [
                    _field("field-orderitem-id", "id", "number"),
                    _field("field-orderitem-orderId", "orderId", "number"),
                    _field("field-orderitem-productId", "productId", "number"),
                    _field("field-orderitem-quantity", "quantity", "number"),
                    _field("field-orderitem-price", "price", "number"),
                ],
            ),
            _entity(
                "entity-category",
                "Category",
                500,
                600,
                [
                    _field("field-category-id", "id", "number"),
                    _field("field-category-name", "name", "string"),
                    _field("field-category-slug", "slug", "string"),
                    _field("field-category-description", "description", "string", required=False),
                ],
            ),
        ],
        "relationships": [
            _relationship("rel-user-order", "user", "order", "one-to-many", "places"),
            _relationship("rel-order-orderitem", "order", "orderitem", "one-to-many", "contains"),
            _relationship(
                "rel-product-orderitem", "product", "orderitem", "one-to-many", "included_in"
            ),
            _relationship(
                "rel-product-category", "product", "category", "many-to-many", "belongs_to"
            ),
        ],
    }


def _blog(now: int) -> dict[str, Any]:
    return {
        "id": "dummy-blog-1",
        "name": "Blog Platform",
        "description": "A blogging platform with posts, authors, and comments",
        "createdAt": now - 2 * _DAY_MS,
        "updatedAt": now - 2 * _HOUR_MS,
        "entities": [
            _entity(
                "entity-author",
                "Author",
                150,
                150,
                [
                    _field("field-author-id", "id", "number"),
                    _field("field-author-username", "username", "string"),
                    _field("field-author-email", "email", "string"),
                    _field("field-author-bio", "bio", "string", required=False),
                    _field("field-author-avatar", "avatarUrl", "string", required=False),
                ],
            ),
            _entity(
                "entity-post",
                "Post",
                550,
                150,
                [
                    _field("field-post-id", "id", "number"),
                    _field("field-post-title", "title", "string"),
                    _field("field-post-content", "content", "string"),
                    _field("field-post-excerpt", "excerpt", "string", required=False),
                    _field("field-post-published", "publishedAt", "date", required=False),
                    _field("field-post-featured", "isFeatured", "boolean"),
                ],
            ),
            _entity(
                "entity-comment",
                "Comment",
                350,
                450,
                [
                    _field("field-comment-id", "id", "number"),
                    _field("field-comment-postId", "postId", "number"),
                    _field("field-comment-author", "authorName", "string"),
                    _field("field-comment-content", "content", "string"),
                    _field("field-comment-created", "createdAt", "date"),
                ],
            ),
            _entity(
                "entity-tag",
                "Tag",
                750,
                450,
                [
                    _field("field-tag-id", "id", "number"),
                    _field("field-tag-name", "name", "string"),
                    _field("field-tag-slug", "slug", "string"),
                ],
            ),
        ],
        "relationships": [
            _relationship("rel-author-post", "author", "post", "one-to-many", "writes"),
            _relationship("rel-post-comment", "post", "comment", "one-to-many", "has"),
            _relationship("rel-post-tag", "post", "tag", "many-to-many", "tagged_with"),
        ],
    }


def sample_schemas() -> list[dict[str, Any]]:
    """The two demo ER documents, E-commerce System then Blog Platform."""
    now = now_ms()
    return [_ecommerce(now), _blog(now)]
