from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from labvisit.application.use_cases.catalog_index import CatalogIndex

CATALOG_PAYLOAD = {
    "message": {
        "message": {
            "categories": [
                {"id": "all", "name": "All", "nameAr": "الكل"},
                {"id": "hematology", "name": "Hematology", "nameAr": "أمراض الدم"},
                {"id": "chemistry", "name": "Chemistry", "nameAr": "الكيمياء الحيوية"},
            ],
            "tests": [
                {"id": "T-CBC", "name": "Complete Blood Count", "nameAr": "صورة دم كاملة", "code": "CBC", "categoryId": "hematology"},
                {"id": "T-ESR", "test_name": "Erythrocyte Sedimentation Rate", "test_name_ar": "سرعة الترسيب", "item_code": "ESR", "category_id": "hematology"},
                {"id": "T-FBS", "name": "Fasting Blood Sugar", "nameAr": "سكر الدم الصائم", "code": "FBS", "categoryId": "chemistry", "requiresFasting": True},
                {"id": "T-LIPID", "name": "Lipid Profile", "nameAr": "دهون الدم", "code": "LIPID", "categoryId": "chemistry"},
            ],
        }
    }
}


def make_png(width: int, height: int, mode: str = "RGB") -> bytes:
    color = (30, 120, 200, 128) if mode == "RGBA" else (30, 120, 200)
    buffer = BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_noise_png(width: int, height: int) -> bytes:
    buffer = BytesIO()
    Image.effect_noise((width, height), 96).convert("RGB").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def catalog() -> CatalogIndex:
    return CatalogIndex.from_payload(CATALOG_PAYLOAD)
