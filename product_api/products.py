# product_api/products.py
from decimal import Decimal
from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_session
from .exceptions import ProductNotFoundError
from .models import Product
from .repository import ProductRepository, SqlAlchemyProductRepository
from .schemas import MAX_PRICE, Message, ProductIn, ProductOut, ValidationErrorOut, round_price

router = APIRouter(prefix="/products", tags=["products"])

NOT_FOUND_RESPONSE = {404: {"model": Message, "description": "Product not found"}}
BAD_REQUEST_RESPONSE = {400: {"model": ValidationErrorOut, "description": "Validation failed"}}

# ids outside the INTEGER primary key range cannot exist and never reach the driver
MAX_PRODUCT_ID = 2**31 - 1
ProductId = Annotated[int, Path(ge=1, le=MAX_PRODUCT_ID)]


def get_product_repository(session: AsyncSession = Depends(get_session)) -> ProductRepository:
    return SqlAlchemyProductRepository(session)


async def _get_or_404(repository: ProductRepository, product_id: int) -> Product:
    product = await repository.get_by_id(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


# GET /products?name=
@router.get("", response_model=List[ProductOut])
async def list_products(
    name: Optional[str] = Query(None, description="Case-sensitive substring of the product name"),
    repository: ProductRepository = Depends(get_product_repository),
):
    return await repository.get_all(name=name)


# GET /products/list?name=&sortBy=  (declared before /{product_id} so "list" is not read as an id)
@router.get("/list", response_model=List[ProductOut])
async def list_sorted_products(
    name: Optional[str] = Query(None, description="Case-sensitive substring of the product name"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="'price' or 'name'; anything else keeps store order"),
    repository: ProductRepository = Depends(get_product_repository),
):
    return await repository.get_all(name=name, sort_by=sort_by)


@router.get("/{product_id}", response_model=ProductOut, responses=NOT_FOUND_RESPONSE)
async def get_product(product_id: ProductId, repository: ProductRepository = Depends(get_product_repository)):
    return await _get_or_404(repository, product_id)


@router.post(
    "",
    response_model=ProductOut,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST_RESPONSE,
)
async def create_product(
    payload: ProductIn,
    request: Request,
    response: Response,
    repository: ProductRepository = Depends(get_product_repository),
):
    # payload.id is never trusted; the store assigns it
    product = Product(
        name=payload.name,
        description=payload.description,
        price=payload.price,
    )
    await repository.add(product)

    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return product


@router.put(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**BAD_REQUEST_RESPONSE, **NOT_FOUND_RESPONSE},
)
async def update_product(
    product_id: ProductId,
    payload: ProductIn,
    repository: ProductRepository = Depends(get_product_repository),
):
    product = await _get_or_404(repository, product_id)

    product.name = payload.name
    product.description = payload.description
    product.price = payload.price

    await repository.update(product)
    return


@router.patch(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**BAD_REQUEST_RESPONSE, **NOT_FOUND_RESPONSE},
)
async def update_product_price(
    product_id: ProductId,
    price: Decimal = Body(..., ge=0, lt=MAX_PRICE, description="New price as a bare JSON number"),
    repository: ProductRepository = Depends(get_product_repository),
):
    product = await _get_or_404(repository, product_id)

    product.price = round_price(price)
    await repository.update(product)
    return


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND_RESPONSE)
async def delete_product(product_id: ProductId, repository: ProductRepository = Depends(get_product_repository)):
    await _get_or_404(repository, product_id)

    if not await repository.delete(product_id):
        raise ProductNotFoundError(product_id)
    return
