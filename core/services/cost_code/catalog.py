"""Default Work Breakdown Structure seeded into an empty catalog."""
from __future__ import annotations

from core.models import CostType


def _entry(code, name, description, division, category, cost_type, unit):
    return {
        "code": code,
        "name": name,
        "description": description,
        "division": division,
        "category": category,
        "subcategory": f"{code} - {name}",
        "cost_type": cost_type,
        "unit": unit,
        "is_active": True,
        "is_default": False,
    }


_PRELIMINARES = "01 - Preliminares"
_CIMENTACION = "02 - Cimentación"
_ESTRUCTURA = "03 - Estructura"
_ALBANILERIA = "04 - Albañilería"
_ELECTRICAS = "05 - Instalaciones Eléctricas"
_SANITARIAS = "06 - Instalaciones Sanitarias"
_ACABADOS = "07 - Acabados"

DEFAULT_COST_CODES: list[dict] = [
    _entry("01.01.01", "Excavación", "Excavación de terreno para cimentación",
           _PRELIMINARES, "01.01 - Movimiento de Tierras", CostType.EQUIPMENT, "m³"),
    _entry("01.01.02", "Relleno", "Relleno y compactación de terreno",
           _PRELIMINARES, "01.01 - Movimiento de Tierras", CostType.MATERIAL, "m³"),
    _entry("01.02.01", "Demolición", "Demolición de estructuras existentes",
           _PRELIMINARES, "01.02 - Demoliciones", CostType.LABOR, "m²"),
    _entry("02.01.01", "Zapatas", "Construcción de zapatas de cimentación",
           _CIMENTACION, "02.01 - Cimentación Superficial", CostType.MATERIAL, "m³"),
    _entry("02.01.02", "Vigas de Cimentación", "Construcción de vigas de cimentación",
           _CIMENTACION, "02.01 - Cimentación Superficial", CostType.MATERIAL, "m³"),
    _entry("03.01.01", "Columnas", "Construcción de columnas de concreto armado",
           _ESTRUCTURA, "03.01 - Concreto Armado", CostType.MATERIAL, "m³"),
    _entry("03.01.02", "Vigas", "Construcción de vigas de concreto armado",
           _ESTRUCTURA, "03.01 - Concreto Armado", CostType.MATERIAL, "m³"),
    _entry("03.01.03", "Losas", "Construcción de losas de concreto armado",
           _ESTRUCTURA, "03.01 - Concreto Armado", CostType.MATERIAL, "m²"),
    _entry("04.01.01", "Muros de Ladrillo", "Construcción de muros de ladrillo",
           _ALBANILERIA, "04.01 - Muros", CostType.MATERIAL, "m²"),
    _entry("04.02.01", "Tabiques", "Construcción de tabiques divisorios",
           _ALBANILERIA, "04.02 - Tabiques", CostType.MATERIAL, "m²"),
    _entry("05.01.01", "Cableado Eléctrico", "Instalación de cableado eléctrico",
           _ELECTRICAS, "05.01 - Cableado", CostType.SUBCONTRACT, "m"),
    _entry("05.02.01", "Tableros Eléctricos", "Instalación de tableros eléctricos",
           _ELECTRICAS, "05.02 - Tableros", CostType.MATERIAL, "und"),
    _entry("06.01.01", "Agua Potable", "Instalación de red de agua potable",
           _SANITARIAS, "06.01 - Agua Potable", CostType.SUBCONTRACT, "m"),
    _entry("06.02.01", "Desagüe", "Instalación de red de desagüe",
           _SANITARIAS, "06.02 - Desagüe", CostType.SUBCONTRACT, "m"),
    _entry("07.01.01", "Pisos", "Instalación de pisos",
           _ACABADOS, "07.01 - Pisos", CostType.MATERIAL, "m²"),
    _entry("07.02.01", "Pintura", "Aplicación de pintura",
           _ACABADOS, "07.02 - Pintura", CostType.LABOR, "m²"),
    _entry("07.03.01", "Carpintería", "Trabajos de carpintería",
           _ACABADOS, "07.03 - Carpintería", CostType.SUBCONTRACT, "global"),
]


__all__ = ["DEFAULT_COST_CODES"]
