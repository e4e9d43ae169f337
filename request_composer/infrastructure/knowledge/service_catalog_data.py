from __future__ import annotations

from request_composer.domain.entities.service_catalog import (
    AdditionalFieldSchema,
    FieldDependency,
    ServiceCatalogItem,
    ServiceCategory,
)

# Offline fallback for local development; production reads the catalog from the API.
SERVICE_CATALOG: tuple[ServiceCategory, ...] = (
    ServiceCategory(
        id=1,
        code="EDS",
        category="Estudios de suelos",
        items=(
            ServiceCatalogItem(
                id=101,
                code="EDS-1",
                name="Estudio de suelos para edificaciones",
                additional_info=(
                    AdditionalFieldSchema(field="areaPredio", type="number", label="Área del predio (m²)", required=True),
                    AdditionalFieldSchema(field="cantidadPisos", type="number", label="Cantidad de pisos", required=True),
                    AdditionalFieldSchema(field="ubicacion", type="text", label="Ubicación", required=True),
                    AdditionalFieldSchema(
                        field="tieneSotano",
                        type="radio",
                        label="¿Tiene sótano?",
                        options=("Sí", "No"),
                    ),
                    AdditionalFieldSchema(
                        field="nivelesSotano",
                        type="number",
                        label="Niveles de sótano",
                        required=True,
                        depends_on=FieldDependency(field="tieneSotano", value="Sí"),
                    ),
                ),
            ),
            ServiceCatalogItem(
                id=103,
                code="EDS-3",
                name="Estudio de suelos para lotes",
                additional_info=(
                    AdditionalFieldSchema(field="areaPredio", type="number", label="Área del predio (m²)", required=True),
                ),
            ),
        ),
    ),
    ServiceCategory(
        id=2,
        code="EMC",
        category="Ensayos en muestras de concreto",
        items=(
            ServiceCatalogItem(
                id=201,
                code="EMC-1",
                name="Resistencia a compresión de cilindros",
                additional_info=(
                    AdditionalFieldSchema(
                        field="tipoMuestra",
                        type="select",
                        label="Tipo de muestra",
                        required=True,
                        options=("Cilindro", "Núcleo"),
                    ),
                    AdditionalFieldSchema(field="elementoFundido", type="text", label="Elemento fundido", required=True),
                    AdditionalFieldSchema(
                        field="resistenciaDiseno", type="number", label="Resistencia de diseño (psi)", required=True
                    ),
                    AdditionalFieldSchema(
                        field="identificacionMuestra", type="text", label="Identificación de la muestra", required=True
                    ),
                    AdditionalFieldSchema(
                        field="estructuraRealizada", type="text", label="Estructura realizada", required=True
                    ),
                    AdditionalFieldSchema(field="fechaFundida", type="date", label="Fecha de fundida", required=True),
                    AdditionalFieldSchema(
                        field="edadEnsayo",
                        type="select-multiple",
                        label="Edad de ensayo (días)",
                        required=True,
                        options=("7", "14", "28"),
                    ),
                ),
            ),
        ),
    ),
)
