"""Category management — commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.domain import storefront


@storefront.command(part_of="Category")
class AddCategory:
    name: String(required=True, max_length=50)
    description: String(max_length=200)
    image_url: String(max_length=500)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=50)
    description: String(max_length=200)
    image_url: String(max_length=500)


@storefront.command(part_of="Category")
class DeactivateCategory:
    category_id: Identifier(required=True)


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(AddCategory)
    def add_category(self, command):
        repo = current_domain.repository_for(Category)
        if repo.find_by_name(command.name) is not None:
            raise ValidationError({"name": [f"Category '{command.name}' already exists"]})

        category = Category.create(
            name=command.name,
            description=command.description,
            image_url=command.image_url,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name and command.name != category.name:
            if repo.find_by_name(command.name) is not None:
                raise ValidationError({"name": [f"Category '{command.name}' already exists"]})

        category.update_details(
            name=command.name,
            description=command.description,
            image_url=command.image_url,
        )
        repo.add(category)

    @handle(DeactivateCategory)
    def deactivate_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        category.deactivate()
        repo.add(category)
