from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.exceptions import APIError, ProductNotFound
from storefront.db.session import get_db
from storefront.models.product import Product
from storefront.repos.cart_repo import LineItemRepo
from storefront.repos.product_repo import ProductRepo
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from storefront.utils.response import success

router = APIRouter()


def _get_product(db: Session, product_id: int) -> Product:
    product = ProductRepo(db).get(product_id)
    if not product:
        raise ProductNotFound()
    return product


def _ensure_unique_name(repo: ProductRepo, name: str, product_id: int = None) -> None:
    existing = repo.find_by(name=name)
    if existing and existing.id != product_id:
        raise APIError(
            status_code=status.HTTP_409_CONFLICT,
            message="Name has already been taken",
        )


@router.get("")
def list_products(db: Session = Depends(get_db)):
    products = ProductRepo(db).list(Product.name)
    return success(data=[ProductResponse.model_validate(product) for product in products])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(product_in: ProductCreate, db: Session = Depends(get_db)):
    repo = ProductRepo(db)
    _ensure_unique_name(repo, product_in.name)

    product = repo.save(Product(**product_in.model_dump()))
    db.commit()
    db.refresh(product)

    return success(data=ProductResponse.model_validate(product), message="Product was successfully created")


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    return success(data=ProductResponse.model_validate(_get_product(db, product_id)))


@router.put("/{product_id}")
@router.patch("/{product_id}")
def update_product(product_id: int, product_in: ProductUpdate, db: Session = Depends(get_db)):
    product = _get_product(db, product_id)
    changes = product_in.model_dump(exclude_unset=True)
    if changes.get("name"):
        _ensure_unique_name(ProductRepo(db), changes["name"], product.id)

    for field, value in changes.items():
        if value is None and field in {"name", "price"}:
            continue
        setattr(product, field, value)
    db.commit()
    db.refresh(product)

    return success(data=ProductResponse.model_validate(product), message="Product was successfully updated")


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    """Delete a product unless a cart still references it"""
    product = _get_product(db, product_id)

    if LineItemRepo(db).count_for_product(product.id):
        raise APIError(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="Line Items present",
        )

    ProductRepo(db).delete(product)
    db.commit()
    return success(message="Product was successfully destroyed")


@router.get("/{product_id}/who_bought")
def who_bought(product_id: int, db: Session = Depends(get_db)):
    """Orders that contain the product, newest first"""
    product = _get_product(db, product_id)
    orders = ProductRepo(db).orders_containing(product.id)
    return success(
        data={
            "product": ProductResponse.model_validate(product),
            "orders": [OrderResponse.model_validate(order) for order in orders],
        }
    )
