"""
Product inventory routes (owner scoped)
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session, joinedload

from .auth import get_current_user
from .database import get_db, User, Product, RestockHistory
from .exceptions import api_error, send_response
from .middleware.uploads import MAX_PRODUCT_IMAGES, save_images
from .schemas import (
    PageParams,
    RestockRequest,
    like_pattern,
    order_direction,
    page_params,
    paginate,
)
from .services.storage_provider import delete_local_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/products", tags=["products"])


def _owned_product(db: Session, owner: User, product_id: str) -> Product:
    product = db.query(Product).filter(Product.id == product_id, Product.owner_id == owner.id).first()
    if product is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Product not found")
    return product


def _remove_images(urls) -> None:
    for url in urls or []:
        delete_local_upload("products", url)


@router.post("/create")
async def create_product(
    name: Optional[str] = Form(None),
    measurement: Optional[str] = Form(None),
    quantity: Optional[int] = Form(None),
    quantity_type: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    expiry: Optional[str] = Form(None),
    restock_alert: Optional[int] = Form(None),
    image: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a product with up to five images"""
    if not name or not quantity or not price:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Missing fields")

    images = await save_images(image, "products", MAX_PRODUCT_IMAGES)

    product = Product(
        owner_id=current_user.id,
        image=images,
        name=name,
        measurement=measurement,
        quantity=quantity,
        quantity_type=quantity_type,
        price=price,
        expiry_date=expiry or None,
        restock_alert=restock_alert or 0,
        number_of_restocks=1,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info(f"Product {product.id} created for user {current_user.id}")
    return send_response(status.HTTP_200_OK, "Product Added", product.to_dict())


@router.put("/edit/{product_id}")
async def edit_product(
    product_id: str,
    name: Optional[str] = Form(None),
    measurement: Optional[str] = Form(None),
    quantity: Optional[int] = Form(None),
    quantity_type: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    expiry: Optional[str] = Form(None),
    restock_alert: Optional[int] = Form(None),
    image: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update a product; empty or zero values keep the stored value.
    New images replace the old set.
    """
    product = _owned_product(db, current_user, product_id)

    old_images = []
    new_images = await save_images(image, "products", MAX_PRODUCT_IMAGES)
    if new_images:
        old_images = product.image
        product.image = new_images

    product.name = name or product.name
    product.measurement = measurement or product.measurement
    product.quantity = quantity or product.quantity
    product.quantity_type = quantity_type or product.quantity_type
    product.price = price or product.price
    product.expiry_date = expiry or product.expiry_date
    product.restock_alert = restock_alert or product.restock_alert

    db.commit()
    _remove_images(old_images)
    db.refresh(product)
    return send_response(status.HTTP_200_OK, "Product Updated", product.to_dict())


@router.delete("/delete/{product_id}")
async def delete_product(
    product_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = _owned_product(db, current_user, product_id)
    images = list(product.image or [])

    db.delete(product)
    db.commit()
    _remove_images(images)
    logger.info(f"Product {product_id} deleted by user {current_user.id}")
    return send_response(status.HTTP_200_OK, "Product Deleted")


@router.get("/my")
async def my_products(
    page: int = Query(1),
    limit: int = Query(10),
    name: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's products without image lists; paginated by page/limit"""
    query = db.query(Product).filter(Product.owner_id == current_user.id)
    if name:
        query = query.filter(Product.name.ilike(like_pattern(name), escape="\\"))

    created = Product.created_at.asc() if order_direction(order) == "asc" else Product.created_at.desc()
    params = PageParams(page=max(page, 1), per_page=max(limit, 1))
    result = paginate(
        query.order_by(created),
        params,
        lambda product: product.to_dict(include_image=False),
        size_key="limit",
    )
    return send_response(status.HTTP_200_OK, "User products fetched", result)


@router.get("/user/{owner_id}")
async def products_by_user(
    owner_id: str,
    params: PageParams = Depends(page_params),
    keyword: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Another business's catalogue"""
    query = db.query(Product).filter(Product.owner_id == owner_id)
    keyword = (keyword or "").strip()
    if keyword:
        query = query.filter(Product.name.ilike(like_pattern(keyword), escape="\\"))

    result = paginate(query.order_by(Product.created_at.desc()), params, Product.to_dict)
    return send_response(status.HTTP_200_OK, "User products fetched", result)


@router.post("/restock/{product_id}")
async def restock_product(
    product_id: str,
    body: RestockRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add stock and record the restock event"""
    quantity = body.quantity
    if not quantity or quantity <= 0 or not float(quantity).is_integer():
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid restock quantity")

    product = _owned_product(db, current_user, product_id)
    product.quantity = (product.quantity or 0) + int(quantity)
    product.number_of_restocks = (product.number_of_restocks or 0) + 1

    db.add(RestockHistory(
        product_id=product.id,
        owner_id=current_user.id,
        restocked_by=current_user.id,
        quantity=int(quantity),
    ))
    db.commit()
    db.refresh(product)
    logger.info(f"Product {product.id} restocked by {int(quantity)}")
    return send_response(status.HTTP_200_OK, "Product restocked successfully", product.to_dict())


@router.get("/restock-history")
async def restock_history(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    history = (
        db.query(RestockHistory)
        .options(joinedload(RestockHistory.product))
        .filter(RestockHistory.owner_id == current_user.id)
        .order_by(RestockHistory.created_at.desc())
        .all()
    )
    return send_response(status.HTTP_200_OK, "Restock history fetched", [entry.to_dict() for entry in history])
