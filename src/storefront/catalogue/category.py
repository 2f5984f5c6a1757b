"""Category aggregate root for grouping products."""

import re
from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from storefront.domain import storefront


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "category"


@storefront.aggregate
class Category:
    name: String(required=True, max_length=50, unique=True)
    slug: String(required=True, max_length=60)
    description: String(max_length=200)
    image_url: String(max_length=500)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None, image_url=None):
        from storefront.catalogue.events import CategoryAdded

        now = datetime.now(UTC)
        category = cls(
            name=name,
            slug=slugify(name),
            description=description,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        category.raise_(CategoryAdded(category_id=category.id, name=name, slug=category.slug))
        return category

    def update_details(self, name=None, description=None, image_url=None):
        from storefront.catalogue.events import CategoryUpdated

        if name is not None:
            self.name = name
            self.slug = slugify(name)
        if description is not None:
            self.description = description
        if image_url is not None:
            self.image_url = image_url

        self.updated_at = datetime.now(UTC)
        self.raise_(CategoryUpdated(category_id=self.id, name=self.name))

    def deactivate(self):
        from storefront.catalogue.events import CategoryDeactivated

        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(CategoryDeactivated(category_id=self.id))
