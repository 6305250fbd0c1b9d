from fastapi import APIRouter

from app.schemas.catalog import ProductType, ProductTypesResponse

router = APIRouter(tags=["catalog"])

PRODUCT_TYPES = [
    ProductType(value="neon-led", label="Néon LED"),
    ProductType(value="caixa-luz", label="Caixa de Luz"),
    ProductType(value="letras-monobloco", label="Letras Monobloco"),
    ProductType(value="logo-iluminado", label="Logótipo Iluminado"),
    ProductType(value="outro", label="Outro / Consultar"),
]


@router.get("/product-types", response_model=ProductTypesResponse)
async def product_types():
    return ProductTypesResponse(data=PRODUCT_TYPES)
