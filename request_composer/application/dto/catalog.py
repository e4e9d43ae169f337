from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from request_composer.domain.entities.service_catalog import (
    AdditionalFieldSchema,
    FieldDependency,
    ServiceCatalogItem,
    ServiceCategory,
)


class FieldDependencyDTO(BaseModel):
    field: str
    value: str


class AdditionalFieldDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    field: str
    type: str = "text"
    label: str = ""
    required: bool = False
    options: list[str] = Field(default_factory=list)
    depends_on: FieldDependencyDTO | None = Field(default=None, alias="dependsOn")
    question: str | None = None

    def to_entity(self) -> AdditionalFieldSchema:
        return AdditionalFieldSchema(
            field=self.field,
            type=self.type,
            label=self.label,
            required=self.required,
            options=tuple(self.options),
            depends_on=(
                FieldDependency(field=self.depends_on.field, value=self.depends_on.value)
                if self.depends_on
                else None
            ),
            question=self.question,
        )


class ServiceCatalogItemDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | str
    code: str
    name: str
    additional_info: list[AdditionalFieldDTO] = Field(default_factory=list, alias="additionalInfo")

    def to_entity(self) -> ServiceCatalogItem:
        return ServiceCatalogItem(
            id=self.id,
            code=self.code,
            name=self.name,
            additional_info=tuple(f.to_entity() for f in self.additional_info),
        )


class ServiceCategoryDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str
    code: str = ""
    category: str = ""
    items: list[ServiceCatalogItemDTO] = Field(default_factory=list)

    def to_entity(self) -> ServiceCategory:
        return ServiceCategory(
            id=self.id,
            code=self.code,
            category=self.category,
            items=tuple(item.to_entity() for item in self.items),
        )


class ServiceCatalogResponseDTO(BaseModel):
    success: bool = True
    services: list[ServiceCategoryDTO] = Field(default_factory=list)

    def extract_categories(self) -> list[ServiceCategory]:
        return [category.to_entity() for category in self.services]
